"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class PageInfo(BaseModel):
    """Offset pagination block returned by list endpoints."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    has_more: bool


class MessageResponse(BaseModel):
    """Plain acknowledgement for mutations without a richer payload."""

    message: str
