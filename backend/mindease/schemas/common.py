"""
MindEase Backend — Shared Response Schemas
============================================

What:  Response envelopes reused across resource groups, plus the error and
       health formats.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Upper bound of the INTEGER id columns; larger ids are rejected as bad input
MAX_RECORD_ID = 2**31 - 1


class MessageResponse(BaseModel):
    """Plain acknowledgement: {"message": "..."}."""
    message: str = Field(description="Human-readable result")


class SuccessResponse(BaseModel):
    """Discussion-style acknowledgement: {"success": true}."""
    success: bool = Field(default=True)


class CreatedResponse(SuccessResponse):
    """Acknowledgement carrying the new record's id."""
    id: int = Field(description="Identifier of the created record")


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "validation_error",
            "message": "All fields are required",
            "details": {"field": "email"},
            "request_id": "3f9a1c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
