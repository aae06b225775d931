"""Error taxonomy shared by the services and the API layer."""

from __future__ import annotations


class GalleryError(Exception):
    """Base class for every failure surfaced by the gallery services."""

    code = "gallery_error"
    status_code = 500
    default_detail = "Something went wrong. Please try again."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class IdentityRequiredError(GalleryError):
    """Raised when an operation needs an authenticated identity."""

    code = "identity_required"
    status_code = 401
    default_detail = "Sign in to continue."


class SelfVoteError(GalleryError):
    code = "self_vote"
    status_code = 403
    default_detail = "You cannot vote for your own submission!"


class VoteBudgetExceededError(GalleryError):
    code = "vote_budget_exceeded"
    status_code = 409

    def __init__(self, max_votes: int) -> None:
        self.max_votes = max_votes
        super().__init__(f"You have used all {max_votes} votes!")


class ConflictRetryableError(GalleryError):
    """The underlying transaction lost a race with a concurrent writer."""

    code = "conflict"
    status_code = 503
    default_detail = "Vote failed. Please try again."


class StoreUnavailableError(GalleryError):
    """The backing store failed for a reason other than a lost race."""

    code = "store_unavailable"
    status_code = 503
    default_detail = "The gallery is temporarily unavailable. Please try again."


class ValidationError(GalleryError):
    """Submission content was rejected before touching the store.

    Attributes:
        fields: Mapping of field name to a human-readable problem.
    """

    code = "validation_error"
    status_code = 422

    def __init__(self, fields: dict[str, str]) -> None:
        self.fields = dict(fields)
        super().__init__("; ".join(f"{name}: {msg}" for name, msg in self.fields.items()))


class ProfileNotFoundError(GalleryError):
    code = "profile_not_found"
    status_code = 404
    default_detail = "User profile not found"


class SubmissionNotFoundError(GalleryError):
    code = "submission_not_found"
    status_code = 404
    default_detail = "Submission not found"


__all__ = [
    "ConflictRetryableError",
    "GalleryError",
    "IdentityRequiredError",
    "ProfileNotFoundError",
    "SelfVoteError",
    "StoreUnavailableError",
    "SubmissionNotFoundError",
    "ValidationError",
    "VoteBudgetExceededError",
]
