"""
TIL Backend — Shared Response Schemas
======================================

What:  Error envelope, health payload and the integer id path type used
       across all routers.
"""

from typing import Annotated, Optional

from fastapi import Path
from pydantic import BaseModel, Field

# Integer primary keys are int4 on Postgres
MAX_RESOURCE_ID = 2**31 - 1

# Out-of-range ids fail validation (400) before reaching the database
ResourceId = Annotated[int, Path(ge=1, le=MAX_RESOURCE_ID)]


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "acronym with ID '42' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
