"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error payload returned for every gallery failure."""

    detail: str
    code: str = Field(..., description="Stable machine-readable error code.")
    fields: dict[str, str] | None = Field(
        default=None,
        description="Per-field messages for rejected submissions.",
    )
