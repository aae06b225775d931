# src/vibe_gallery/models/user.py
"""SQLAlchemy model for per-user gallery profiles."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibe_gallery.db.session import Base
from vibe_gallery.db.time import utcnow

if TYPE_CHECKING:
    from .vote import SubmissionVote

DEFAULT_DISPLAY_NAME = "Anonymous Coder"


class UserProfile(Base):
    """Profile keyed by the identity provider's stable user id.

    The set of submissions the user currently votes for is not stored here;
    it is read from ``submission_vote`` rows, which are the single record of
    an active vote.
    """

    __tablename__ = "user_profile"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_DISPLAY_NAME)
    avatar_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Compare-and-set counter; every ledger mutation touching this profile bumps it.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    votes: Mapped[list[SubmissionVote]] = relationship(
        "SubmissionVote",
        primaryjoin="UserProfile.user_id == SubmissionVote.voter_user_id",
        order_by="SubmissionVote.created_at",
        lazy="selectin",
        viewonly=True,
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def voted_submission_ids(self) -> list[str]:
        """Return ids of the submissions this user holds an active vote on."""
        return [vote.submission_id for vote in self.votes]

    @property
    def votes_used(self) -> int:
        return len(self.votes)

    def touch(self) -> None:
        """Mark the row dirty so the version counter advances on flush."""
        self.updated_at = utcnow()
