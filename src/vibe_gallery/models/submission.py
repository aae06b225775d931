# src/vibe_gallery/models/submission.py
"""SQLAlchemy model for gallery submissions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibe_gallery.db.session import Base
from vibe_gallery.db.time import utcnow

if TYPE_CHECKING:
    from .vote import SubmissionVote


class Submission(Base):
    """A project entered into the gallery.

    Each author owns at most one submission and its id is the author's user id,
    so resubmitting replaces the previous entry in place.
    """

    __tablename__ = "submission"
    __table_args__ = (
        CheckConstraint("vote_count >= 0", name="ck_submission_vote_count_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    author_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("user_profile.user_id"),
        unique=True,
        nullable=False,
    )
    author_name: Mapped[str] = mapped_column(Text, nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    prompt_text: Mapped[str] = mapped_column(Text, nullable=False)
    external_link: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_ref: Mapped[str] = mapped_column(Text, nullable=False)

    # Always equal to the number of submission_vote rows; recomputed in the same transaction.
    vote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Monotonic insertion sequence, reassigned when the submission is replaced.
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    votes: Mapped[list[SubmissionVote]] = relationship(
        "SubmissionVote",
        primaryjoin="Submission.id == SubmissionVote.submission_id",
        order_by="SubmissionVote.created_at",
        lazy="selectin",
        viewonly=True,
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def voters(self) -> list[str]:
        """Return user ids currently holding a vote on this submission."""
        return [vote.voter_user_id for vote in self.votes]
