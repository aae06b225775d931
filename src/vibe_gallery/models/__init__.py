# src/vibe_gallery/models/__init__.py
"""SQLAlchemy models for the gallery."""

from .submission import Submission
from .user import UserProfile
from .vote import SubmissionVote

__all__ = [
    "Submission",
    "SubmissionVote",
    "UserProfile",
]
