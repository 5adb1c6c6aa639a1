"""Visa Acceptance agent service: chat agent and REST mirror over the payments toolkit."""

__version__ = "0.1.0"
