"""
Vetlyst Backend — Shared Response Schemas
===========================================

What:  Error and health payloads used by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.
    Why:   Clients need a consistent structure to parse errors programmatically.

    Example:
        {
            "error": "validation_error",
            "message": "Missing required fields: petOwnerEmail, petOwnerPhone",
            "details": {"fields": ["petOwnerEmail", "petOwnerPhone"]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.

    Email is non-critical: submissions persist without it, so an email
    problem only degrades the service.
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    email: str = Field(description="Email provider: available, not_configured, circuit_open")
    uptime_seconds: float = Field(description="Seconds since service started")
