"""
FastAPI router definitions for the API endpoints.
"""

import logging
from typing import Any

from fastapi import APIRouter, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from acceptance_agent.api.dependencies import (
    get_chat_adapter,
    get_invoice_uc,
    get_payment_link_uc,
)
from acceptance_agent.api.schemas import (
    ChatRequest,
    DataResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceActionRequest,
)
from acceptance_agent.config.settings import has_credentials, settings
from acceptance_agent.container import container
from acceptance_agent.exceptions import ConfigurationError, RequestShapeError
from acceptance_agent.utils.toolkit import format_toolkit_error

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _missing_credentials(purpose: str, list_endpoint: bool = False) -> JSONResponse:
    content: dict[str, Any] = {
        "error": (
            "Visa Acceptance credentials are not configured. "
            f"Set VISA_ACCEPTANCE_* variables to {purpose}."
        )
    }
    if list_endpoint:
        content["data"] = []
    return JSONResponse(status_code=503, content=content)


def _data(result: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder({"data": result})
    )


def _error(e: Exception) -> JSONResponse:
    if isinstance(e, RequestShapeError):
        status_code = 400
    elif isinstance(e, ConfigurationError):
        # Credentials vanished between the route gate and provisioning
        status_code = 503
    else:
        status_code = 500
    if status_code == 500:
        logger.error(f"Request failed: {e}")
    return JSONResponse(status_code=status_code, content={"error": format_toolkit_error(e)})


@router.get("/health", response_model=HealthResponse)
def health():
    """Report whether the service is configured, without touching the toolkit."""
    return HealthResponse(
        status="ok",
        credentials_configured=has_credentials(),
        environment=settings.visa_environment,
    )


# ------------------------------ invoices ------------------------------


@router.get("/invoices", response_model=DataResponse, responses=ERROR_RESPONSES)
async def list_invoices(
    summary: bool = Query(False, description="Return compact record summaries"),
):
    """
    List invoices.

    Args:
        summary: If true, map each invoice to id/title/status/amount fields

    Returns:
        DataResponse: Invoices as returned by the toolkit
    """
    if not has_credentials():
        return _missing_credentials("enable invoice listing", list_endpoint=True)
    try:
        return _data(await get_invoice_uc().list(summary=summary))
    except Exception as e:
        return _error(e)


@router.post(
    "/invoices", status_code=201, response_model=DataResponse, responses=ERROR_RESPONSES
)
async def create_invoice(request: Request):
    """Create an invoice from the raw JSON body."""
    if not has_credentials():
        return _missing_credentials("enable invoice creation")
    try:
        payload = await request.json()
        return _data(await get_invoice_uc().create(payload), status_code=201)
    except Exception as e:
        return _error(e)


@router.get(
    "/invoices/{invoice_id}", response_model=DataResponse, responses=ERROR_RESPONSES
)
async def get_invoice(invoice_id: str):
    """Retrieve one invoice."""
    if not has_credentials():
        return _missing_credentials("retrieve invoices")
    try:
        return _data(await get_invoice_uc().get(invoice_id))
    except Exception as e:
        return _error(e)


@router.patch(
    "/invoices/{invoice_id}", response_model=DataResponse, responses=ERROR_RESPONSES
)
async def update_invoice(invoice_id: str, request: Request):
    """Update one invoice with the raw JSON body."""
    if not has_credentials():
        return _missing_credentials("update invoices")
    try:
        payload = await request.json()
        return _data(await get_invoice_uc().update(invoice_id, payload))
    except Exception as e:
        return _error(e)


@router.post(
    "/invoices/{invoice_id}", response_model=DataResponse, responses=ERROR_RESPONSES
)
async def invoice_action(invoice_id: str, request: Request):
    """
    Send or cancel an invoice.

    The body is ``{"action": "send"}`` or ``{"action": "cancel"}``; any other
    action is rejected with 400 before the toolkit is touched.
    """
    if not has_credentials():
        return _missing_credentials("send or cancel invoices")
    try:
        body = await request.json()
        if not isinstance(body, dict):
            raise RequestShapeError('Unsupported action. Use "send" or "cancel".')
        action = InvoiceActionRequest.model_validate(body).action
        return _data(await get_invoice_uc().perform_action(invoice_id, action))
    except Exception as e:
        return _error(e)


# ---------------------------- payment links ----------------------------


@router.get("/payment-links", response_model=DataResponse, responses=ERROR_RESPONSES)
async def list_payment_links(
    summary: bool = Query(False, description="Return compact record summaries"),
):
    """List payment links."""
    if not has_credentials():
        return _missing_credentials("enable payment link listing", list_endpoint=True)
    try:
        return _data(await get_payment_link_uc().list(summary=summary))
    except Exception as e:
        return _error(e)


@router.post(
    "/payment-links",
    status_code=201,
    response_model=DataResponse,
    responses=ERROR_RESPONSES,
)
async def create_payment_link(request: Request):
    """Create a payment link from the raw JSON body."""
    if not has_credentials():
        return _missing_credentials("enable payment link creation")
    try:
        payload = await request.json()
        return _data(await get_payment_link_uc().create(payload), status_code=201)
    except Exception as e:
        return _error(e)


@router.get(
    "/payment-links/{link_id}", response_model=DataResponse, responses=ERROR_RESPONSES
)
async def get_payment_link(link_id: str):
    """Retrieve one payment link."""
    if not has_credentials():
        return _missing_credentials("retrieve payment links")
    try:
        return _data(await get_payment_link_uc().get(link_id))
    except Exception as e:
        return _error(e)


@router.patch(
    "/payment-links/{link_id}", response_model=DataResponse, responses=ERROR_RESPONSES
)
async def update_payment_link(link_id: str, request: Request):
    """Update one payment link with the raw JSON body."""
    if not has_credentials():
        return _missing_credentials("update payment links")
    try:
        payload = await request.json()
        return _data(await get_payment_link_uc().update(link_id, payload))
    except Exception as e:
        return _error(e)


# --------------------------------- chat ---------------------------------


@router.post("/chat", responses=ERROR_RESPONSES)
async def chat(request: Request):
    """Server-Sent Events stream of one tools-enabled assistant turn.

    Emits events:
    - event: text  data: {delta}
    - event: step  data: {phase,name,arguments|result|error}
    - event: final data: {text}
    - event: error data: {error}
    - event: done  data: {}
    """
    if not settings.openai_api_key:
        return JSONResponse(
            status_code=500,
            content={"error": "OPENAI_API_KEY is not configured for the agent runtime."},
        )
    if not has_credentials():
        return _missing_credentials("enable the payments agent")
    try:
        try:
            body = ChatRequest.model_validate(await request.json())
        except ValidationError as e:
            raise RequestShapeError(f"Invalid chat request: {e.errors()[0]['msg']}")
        # Provision the toolkit before streaming so failures keep a proper status code
        await container.get_toolkit_adapter().get_client()
        chat_adapter = get_chat_adapter()
    except Exception as e:
        return _error(e)

    messages = [m.model_dump(exclude_none=True) for m in body.messages]
    return StreamingResponse(
        chat_adapter.stream_chat(messages, system_message=body.system_message),
        media_type="text/event-stream",
    )
