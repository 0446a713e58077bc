"""
NoteAssist Backend — Shared Response Schemas
=============================================

What:  Error envelope, health check and liveness payloads shared by all routers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "Note not found",
            "request_id": "3f9c2a1b"
        }
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[list] = Field(default=None, description="Field-level validation problems")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class StatusResponse(BaseModel):
    """Liveness payload of GET /api/test."""
    status: str = Field(description="Fixed liveness message")


class HealthResponse(BaseModel):
    """
    Health check response showing service and dependency status.

    A backend that cannot reach its database is effectively down, so the
    check covers the dependency chain, not just the process.
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    ai_provider: str = Field(description="Configured AI provider name")
    ai: str = Field(description="AI provider status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
