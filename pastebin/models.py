"""
Pydantic models for request/response validation.
"""
from typing import Optional
from pydantic import BaseModel, Field

# Ten years
MAX_TTL_SECONDS = 10 * 365 * 24 * 60 * 60


class PasteCreate(BaseModel):
    """Schema for creating a new paste."""
    content: str = Field(..., description="Text content (required, non-empty)")
    ttl_seconds: Optional[int] = Field(
        None, ge=1, le=MAX_TTL_SECONDS, description="Optional TTL in seconds (at most ten years)"
    )


class PasteResponse(BaseModel):
    """Schema for paste creation response."""
    id: str = Field(..., description="Paste slug")
    url: str = Field(..., description="Shareable URL to view the paste")
    expires_at: str = Field(..., description="Expiry timestamp (ISO 8601, UTC)")


class PasteView(BaseModel):
    """Schema for viewing/fetching a paste."""
    content: str = Field(..., description="Paste text content")
    expires_at: str = Field(..., description="Expiry timestamp (ISO 8601)")


class StatsResponse(BaseModel):
    """Schema for the store statistics response."""
    count: int = Field(..., description="Pastes currently held, including expired ones not yet reaped")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
