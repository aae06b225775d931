"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse
from .submission import SubmissionCreate, SubmissionResponse
from .user import ProfileResponse
from .vote import VoteResponse

__all__ = [
    "ErrorResponse",
    "ProfileResponse",
    "SubmissionCreate", "SubmissionResponse",
    "VoteResponse",
]
