"""Profile-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ProfileResponse(BaseModel):
    """Schema for the signed-in user's profile."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    avatar_ref: str
    voted_submission_ids: list[str]
    votes_used: int
    votes_remaining: int = Field(..., ge=0)
