"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class VoteResponse(BaseModel):
    """Result of a vote toggle or retraction."""

    model_config = ConfigDict(from_attributes=True)

    submission_id: str
    voted: bool
    changed: bool
    vote_count: int
    votes_remaining: int
