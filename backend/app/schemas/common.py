"""
DogAdopt Backend — Shared Response Envelope
=============================================

What:  Every response, success or failure, is wrapped in
       {success, message?, data?, errors?}.
How:   Routes declare `response_model=ApiResponse[T]`; the global exception
       handlers build `ErrorResponse` bodies.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None, description="Human-readable outcome")
    data: Optional[T] = Field(default=None)


class ErrorResponse(BaseModel):
    """
    Failure envelope.

    Example:
        {
            "success": false,
            "message": "This dog has already been adopted.",
            "error": "conflict",
            "request_id": "1f2e3d4c"
        }
    """

    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error description")
    error: str = Field(description="Machine-readable error code (kind or auth failure)")
    errors: Optional[List[Dict[str, Any]]] = Field(
        default=None, description="Field-level validation failures"
    )
    detail: Optional[str] = Field(
        default=None, description="Internal error detail (non-production only)"
    )
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment name")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
