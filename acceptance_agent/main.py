"""
FastAPI application exposing the payments agent and its REST mirror.
"""

import logging

from fastapi import FastAPI

from acceptance_agent import __version__
from acceptance_agent.api.routers import router as api_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Create FastAPI app
app = FastAPI(title="Visa Acceptance Agent", version=__version__)
app.include_router(api_router)
