"""Submission-related Pydantic schemas."""

from datetime import datetime
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vibe_gallery.db.time import as_utc

_URL_FIELDS = ("external_link", "thumbnail_ref")


class SubmissionCreate(BaseModel):
    """Schema for creating or replacing the caller's submission."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200, description="Project title")
    description: str = Field(..., min_length=1, max_length=5000)
    prompt_text: str = Field(..., min_length=1, max_length=10000, description="Prompt used to build the project")
    external_link: str = Field(..., min_length=1, description="Public project URL")
    thumbnail_ref: str = Field(..., min_length=1, description="Thumbnail image URL")

    @field_validator(*_URL_FIELDS)
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise ValueError("must be a valid URL (include http:// or https://)")
        return value


class SubmissionResponse(BaseModel):
    """Schema for submission information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    author_name: str
    title: str
    description: str
    prompt_text: str
    external_link: str
    thumbnail_ref: str
    vote_count: int
    voters: list[str]
    order_index: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
