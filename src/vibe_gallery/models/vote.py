# src/vibe_gallery/models/vote.py
"""Model capturing active votes on submissions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from vibe_gallery.db.session import Base
from vibe_gallery.db.time import utcnow


class SubmissionVote(Base):
    """One user's active vote on one submission.

    ``Submission.voters`` and ``UserProfile.voted_submission_ids`` are both
    read from these rows, so the two views of a vote can never disagree.
    """

    __tablename__ = "submission_vote"
    __table_args__ = (
        Index("ix_submission_vote_voter_user_id", "voter_user_id"),
    )

    submission_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("submission.id", ondelete="CASCADE"),
        primary_key=True,
    )

    voter_user_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("user_profile.user_id"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate votes from the same user.

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
