# src/vibe_gallery/api/v1/endpoints/users.py
"""Profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from vibe_gallery.schemas.user import ProfileResponse
from vibe_gallery.services.profiles import to_profile_response

from ..dependencies import CurrentProfileDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(profile: CurrentProfileDep) -> ProfileResponse:
    """Return the caller's profile with their active votes and remaining budget."""
    return to_profile_response(profile)
