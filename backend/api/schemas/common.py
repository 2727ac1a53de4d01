"""Request/response schemas used across the API."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Human-readable error message")
    request_id: Optional[str] = None


class SubmissionFailure(BaseModel):
    success: bool = False
    error: str
    details: str = ""


class SubmissionResponse(BaseModel):
    """Result of a completed wizard."""

    success: bool = True
    message: str = Field(description="User-visible confirmation")
    record: dict[str, Any]


class BusinessResponse(BaseModel):
    id: str
    user_id: str
    name: str
    category: str
    description: Optional[str] = None
    address: Optional[str] = None
    goals: Optional[str] = None
    help_needed: Optional[str] = None
    created_at: Optional[str] = None


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    response: str
    viaFallback: bool = False
