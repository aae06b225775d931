# src/vibe_gallery/api/v1/endpoints/leaderboard.py
"""Leaderboard endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Query

from vibe_gallery.schemas.submission import SubmissionResponse
from vibe_gallery.services.views import MAX_LEADERBOARD_LIMIT, leaderboard, to_submission_response

from ..dependencies import SessionDep

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/", response_model=list[SubmissionResponse])
async def get_leaderboard(
    db: SessionDep,
    limit: int | None = Query(None, ge=1, le=MAX_LEADERBOARD_LIMIT),
) -> list[SubmissionResponse]:
    """Return submissions ranked by votes; ties keep submission order."""
    return [to_submission_response(submission) for submission in leaderboard(db, limit)]
