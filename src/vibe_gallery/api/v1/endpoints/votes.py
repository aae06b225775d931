# src/vibe_gallery/api/v1/endpoints/votes.py
"""Vote endpoints for the gallery API."""

from __future__ import annotations

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from vibe_gallery.schemas.vote import VoteResponse

from ..dependencies import CurrentProfileDep, LedgerDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/{submission_id}", response_model=VoteResponse)
async def toggle_vote(
    submission_id: str,
    profile: CurrentProfileDep,
    ledger: LedgerDep,
) -> VoteResponse:
    """Vote for a submission, or retract the vote if the caller already holds one."""
    outcome = await run_in_threadpool(ledger.cast_or_retract_vote, profile.user_id, submission_id)
    return VoteResponse.model_validate(outcome)


@router.delete("/{submission_id}", response_model=VoteResponse)
async def retract_vote(
    submission_id: str,
    profile: CurrentProfileDep,
    ledger: LedgerDep,
) -> VoteResponse:
    """Retract the caller's vote; succeeds without change when none is held."""
    outcome = await run_in_threadpool(ledger.retract_vote, profile.user_id, submission_id)
    return VoteResponse.model_validate(outcome)
