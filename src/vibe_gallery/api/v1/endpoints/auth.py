# src/vibe_gallery/api/v1/endpoints/auth.py
"""Session endpoints reacting to identity-provider sign-in and sign-out."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from vibe_gallery.schemas.user import ProfileResponse
from vibe_gallery.services.profiles import to_profile_response

from ..dependencies import CurrentIdentityDep, CurrentProfileDep

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/session", response_model=ProfileResponse)
async def open_session(profile: CurrentProfileDep) -> ProfileResponse:
    """Identity became available: make sure the profile exists and return it."""
    return to_profile_response(profile)


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(identity: CurrentIdentityDep) -> Response:
    """Identity was cleared on the client; nothing is held server-side."""
    logger.debug("Session closed for %s", identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
