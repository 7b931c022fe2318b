"""Pydantic models for JSON responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response reporting what the rendering context has loaded."""

    status: str = Field(..., description="Overall status: ready or not_ready")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(..., description="Current server timestamp")
    languages: dict[str, int] = Field(..., description="Number of loaded messages per language")
    templates: int = Field(..., description="Number of templates available")


class ErrorResponse(BaseModel):
    """Body written when a page fails to render."""

    error: str
