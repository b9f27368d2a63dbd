"""
Transporter Backend — Shared Response Schemas
===============================================

What:  Error envelope, health check models, and the path-id type used across routes.
"""

from typing import Annotated, Optional

from fastapi import Path
from pydantic import BaseModel, Field

# Primary keys are INTEGER columns (int32 on PostgreSQL); anything outside
# this range cannot name a row and is rejected with 422 before a query runs.
MAX_RESOURCE_ID = 2_147_483_647

ResourceId = Annotated[
    int, Path(ge=1, le=MAX_RESOURCE_ID, description="Store-assigned identifier")
]


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for application errors.
    Why:   Clients need a consistent structure to parse errors programmatically.

    Example:
        {
            "error": "not_found",
            "message": "driver with ID '42' was not found",
            "request_id": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for load balancer and container probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
