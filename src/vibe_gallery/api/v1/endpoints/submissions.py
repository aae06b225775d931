# src/vibe_gallery/api/v1/endpoints/submissions.py
"""Submission endpoints: gallery listing and submit-or-replace."""

from __future__ import annotations

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from vibe_gallery.core.errors import SubmissionNotFoundError
from vibe_gallery.models import Submission
from vibe_gallery.schemas.submission import SubmissionCreate, SubmissionResponse
from vibe_gallery.services.views import gallery, to_submission_response

from ..dependencies import CurrentProfileDep, LedgerDep, SessionDep

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("/", response_model=list[SubmissionResponse])
async def list_submissions(db: SessionDep) -> list[SubmissionResponse]:
    """Return every submission, newest first."""
    return [to_submission_response(submission) for submission in gallery(db)]


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(submission_id: str, db: SessionDep) -> SubmissionResponse:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise SubmissionNotFoundError()
    return to_submission_response(submission)


@router.put("/me", response_model=SubmissionResponse)
async def submit_project(
    payload: SubmissionCreate,
    profile: CurrentProfileDep,
    ledger: LedgerDep,
) -> SubmissionResponse:
    """Create the caller's submission, or replace it and release its votes."""
    submission = await run_in_threadpool(ledger.submit, profile.user_id, payload)
    return to_submission_response(submission)
