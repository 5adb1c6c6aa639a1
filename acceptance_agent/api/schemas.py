"""
Pydantic models for API requests and responses.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class DataResponse(BaseModel):
    """Schema for successful responses."""

    data: Any = Field(..., description="Toolkit result (record, list or raw envelope)")


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: str = Field(..., description="Error message")
    data: Optional[List[Any]] = Field(
        None, description="Empty list on list endpoints when credentials are missing"
    )


class InvoiceActionRequest(BaseModel):
    """Schema for the invoice send/cancel action request."""

    action: Optional[Any] = Field(None, description="Either 'send' or 'cancel'")


class ChatMessage(BaseModel):
    """Schema for one chat turn."""

    role: str = Field(..., description="system, user or assistant")
    content: Optional[Any] = Field(None, description="Text content or content parts")
    parts: Optional[List[Any]] = Field(None, description="UI message parts")


class ChatRequest(BaseModel):
    """Schema for the chat request."""

    messages: List[ChatMessage] = Field(..., description="Conversation history")
    system_message: Optional[str] = Field(
        None, description="Optional system message override"
    )


class HealthResponse(BaseModel):
    """Schema for the health response."""

    status: str = Field(..., description="Always 'ok' when the service answers")
    credentials_configured: bool = Field(
        ..., description="Whether the Visa Acceptance credentials are set"
    )
    environment: str = Field(..., description="SANDBOX or PRODUCTION")
