"""Vote accounting for the gallery.

The ledger is the only code path that creates or removes ``submission_vote``
rows. Every operation runs as one database transaction per attempt:

1. read the profile, the submission and the vote rows in one session,
2. decide (self-vote, budget, toggle direction),
3. write the vote row and the recomputed ``vote_count``, bumping the
   ``version`` column of every parent row it depends on.

The version bump is a compare-and-set: if another transaction committed a
change to the same profile or submission after step 1, the UPDATE matches no
row, SQLAlchemy raises ``StaleDataError`` and the attempt is retried against
fresh state. Two votes by the same user therefore serialize on the profile
row, and the budget is always checked against the real vote set.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from vibe_gallery.core.errors import (
    ConflictRetryableError,
    GalleryError,
    ProfileNotFoundError,
    SelfVoteError,
    StoreUnavailableError,
    SubmissionNotFoundError,
    ValidationError,
    VoteBudgetExceededError,
)
from vibe_gallery.core.settings import settings
from vibe_gallery.db.time import utcnow
from vibe_gallery.models import Submission, SubmissionVote, UserProfile
from vibe_gallery.schemas.submission import SubmissionCreate
from vibe_gallery.services.changefeed import (
    SUBMISSIONS_TOPIC,
    ChangeFeed,
    get_change_feed,
    profile_topic,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors meaning "another writer got there first"; the attempt is safe to repeat.
_RETRYABLE_ERRORS = (StaleDataError, IntegrityError, OperationalError)


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a ledger vote operation.

    Attributes:
        submission_id: Submission the operation targeted.
        voted: Whether the caller holds a vote on it after the call.
        changed: False when the call was a no-op.
        vote_count: Submission tally after the call.
        votes_remaining: Caller's unused budget after the call.
    """

    submission_id: str
    voted: bool
    changed: bool
    vote_count: int
    votes_remaining: int


@dataclass(frozen=True)
class _SubmitResult:
    submission: Submission
    released_voters: list[str]


def validate_submission_content(data: SubmissionCreate | Mapping[str, Any]) -> SubmissionCreate:
    """Validate raw submission fields.

    Raises:
        ValidationError: With one message per offending field.
    """
    if isinstance(data, SubmissionCreate):
        return data
    try:
        return SubmissionCreate.model_validate(dict(data))
    except PydanticValidationError as err:
        fields: dict[str, str] = {}
        for error in err.errors():
            name = ".".join(str(part) for part in error["loc"]) or "content"
            fields.setdefault(name, error["msg"])
        raise ValidationError(fields) from err


class VoteLedger:
    """Transactional authority over votes and submissions."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        feed: ChangeFeed | None = None,
        *,
        max_votes: int | None = None,
        retry_attempts: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._feed = feed or get_change_feed()
        self.max_votes = settings.max_votes if max_votes is None else max_votes
        self.retry_attempts = max(
            1, settings.vote_retry_attempts if retry_attempts is None else retry_attempts
        )

    # --- Public operations ---------------------------------------------------------
    def cast_or_retract_vote(self, user_id: str, submission_id: str) -> VoteOutcome:
        """Vote for ``submission_id`` if the user has not yet, otherwise retract the vote.

        Raises:
            ProfileNotFoundError: Unknown user.
            SubmissionNotFoundError: Unknown submission.
            SelfVoteError: The user authored the submission.
            VoteBudgetExceededError: Casting would exceed the vote budget.
            ConflictRetryableError: Every attempt lost a race.
            StoreUnavailableError: The store failed for another reason.
        """
        outcome = self._run(
            "vote",
            lambda session: self._apply_toggle(session, user_id, submission_id),
        )
        if outcome.changed:
            self._publish(SUBMISSIONS_TOPIC, profile_topic(user_id))
        return outcome

    def retract_vote(self, user_id: str, submission_id: str) -> VoteOutcome:
        """Remove the user's vote on ``submission_id``; a no-op when none is held."""
        outcome = self._run(
            "retract",
            lambda session: self._apply_retract(session, user_id, submission_id),
        )
        if outcome.changed:
            self._publish(SUBMISSIONS_TOPIC, profile_topic(user_id))
        return outcome

    def submit(
        self,
        user_id: str,
        content: SubmissionCreate | Mapping[str, Any],
    ) -> Submission:
        """Create the user's submission or replace the existing one.

        Replacing releases every vote held on the previous version in the same
        transaction, so each former voter gets the budget slot back.
        """
        validated = validate_submission_content(content)
        result = self._run(
            "submit",
            lambda session: self._apply_submit(session, user_id, validated),
        )
        if result.released_voters:
            logger.info(
                "Submission %s replaced; released %d vote(s)",
                result.submission.id,
                len(result.released_voters),
            )
        self._publish(
            SUBMISSIONS_TOPIC,
            profile_topic(user_id),
            *(profile_topic(voter) for voter in result.released_voters),
        )
        return result.submission

    # --- Transaction plumbing ------------------------------------------------------
    def _run(self, operation: str, work: Callable[[Session], T]) -> T:
        last_error: SQLAlchemyError | None = None
        for attempt in range(1, self.retry_attempts + 1):
            session = self._session_factory(expire_on_commit=False)
            try:
                with session.begin():
                    return work(session)
            except GalleryError:
                raise
            except _RETRYABLE_ERRORS as err:
                last_error = err
                logger.warning(
                    "%s attempt %d/%d lost a race: %s",
                    operation,
                    attempt,
                    self.retry_attempts,
                    type(err).__name__,
                )
            except SQLAlchemyError as err:
                logger.error("%s failed in the store: %s", operation, err, exc_info=True)
                raise StoreUnavailableError() from err
            finally:
                session.close()

        logger.error("%s gave up after %d attempts", operation, self.retry_attempts)
        raise ConflictRetryableError() from last_error

    def _publish(self, *topics: str) -> None:
        for topic in dict.fromkeys(topics):
            self._feed.publish(topic)

    # --- Attempts ------------------------------------------------------------------
    def _load(self, session: Session, user_id: str, submission_id: str) -> tuple[UserProfile, Submission]:
        profile = session.get(UserProfile, user_id)
        if profile is None:
            raise ProfileNotFoundError()
        submission = session.get(Submission, submission_id)
        if submission is None:
            raise SubmissionNotFoundError()
        return profile, submission

    def _apply_toggle(self, session: Session, user_id: str, submission_id: str) -> VoteOutcome:
        profile, submission = self._load(session, user_id, submission_id)
        if submission.author_id == user_id:
            logger.info("Rejected self-vote by %s", user_id)
            raise SelfVoteError()

        held = _held_vote(profile, submission_id)
        if held is not None:
            return self._release(session, profile, submission, held)

        votes_used = profile.votes_used
        if votes_used >= self.max_votes:
            logger.info("Rejected vote by %s: budget of %d used", user_id, self.max_votes)
            raise VoteBudgetExceededError(self.max_votes)

        session.add(SubmissionVote(submission_id=submission.id, voter_user_id=user_id))
        vote_count = len(submission.votes) + 1
        self._write_tally(profile, submission, vote_count)
        return VoteOutcome(
            submission_id=submission.id,
            voted=True,
            changed=True,
            vote_count=vote_count,
            votes_remaining=self.max_votes - (votes_used + 1),
        )

    def _apply_retract(self, session: Session, user_id: str, submission_id: str) -> VoteOutcome:
        profile, submission = self._load(session, user_id, submission_id)
        held = _held_vote(profile, submission_id)
        if held is None:
            return VoteOutcome(
                submission_id=submission.id,
                voted=False,
                changed=False,
                vote_count=submission.vote_count,
                votes_remaining=max(self.max_votes - profile.votes_used, 0),
            )
        return self._release(session, profile, submission, held)

    def _release(
        self,
        session: Session,
        profile: UserProfile,
        submission: Submission,
        vote: SubmissionVote,
    ) -> VoteOutcome:
        session.delete(vote)
        vote_count = len(submission.votes) - 1
        if vote_count < 0:  # pragma: no cover - guarded by the vote rows themselves
            logger.error("Vote count for %s would drop below zero", submission.id)
            vote_count = 0
        self._write_tally(profile, submission, vote_count)
        return VoteOutcome(
            submission_id=submission.id,
            voted=False,
            changed=True,
            vote_count=vote_count,
            votes_remaining=max(self.max_votes - (profile.votes_used - 1), 0),
        )

    @staticmethod
    def _write_tally(profile: UserProfile, submission: Submission, vote_count: int) -> None:
        submission.vote_count = vote_count
        profile.touch()

    def _apply_submit(self, session: Session, user_id: str, content: SubmissionCreate) -> _SubmitResult:
        profile = session.get(UserProfile, user_id)
        if profile is None:
            raise ProfileNotFoundError()

        submission = session.get(Submission, user_id)
        released: list[str] = []
        if submission is None:
            submission = Submission(id=user_id, author_id=user_id, vote_count=0)
            session.add(submission)
        else:
            released = submission.voters
            for vote in submission.votes:
                session.delete(vote)
            if released:
                # Former voters' budgets change, so their rows must conflict with racing votes.
                voters = session.scalars(
                    select(UserProfile).where(UserProfile.user_id.in_(released))
                )
                for voter in voters:
                    voter.touch()
            submission.vote_count = 0

        submission.author_name = profile.display_name
        submission.title = content.title
        submission.description = content.description
        submission.prompt_text = content.prompt_text
        submission.external_link = content.external_link
        submission.thumbnail_ref = content.thumbnail_ref
        submission.order_index = _next_order_index(session)
        submission.created_at = utcnow()

        session.flush()
        session.refresh(submission)
        return _SubmitResult(submission=submission, released_voters=released)


def _held_vote(profile: UserProfile, submission_id: str) -> SubmissionVote | None:
    for vote in profile.votes:
        if vote.submission_id == submission_id:
            return vote
    return None


def _next_order_index(session: Session) -> int:
    """Return one past the highest insertion index; collisions surface as IntegrityError."""
    current = session.scalar(select(func.max(Submission.order_index)))
    return (current or 0) + 1
