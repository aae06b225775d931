"""Read-only projections of the gallery: leaderboard, gallery and profile views.

The plain views return lazy iterables bound to a session; iterating again
re-runs the query. The live variants push a full snapshot to a callback on
subscribe and again after every committed change to their topic.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from threading import Lock
from typing import Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, sessionmaker

from vibe_gallery.core.settings import settings
from vibe_gallery.models import Submission, UserProfile
from vibe_gallery.schemas.submission import SubmissionResponse
from vibe_gallery.schemas.user import ProfileResponse
from vibe_gallery.services.changefeed import (
    SUBMISSIONS_TOPIC,
    ChangeFeed,
    Subscription,
    get_change_feed,
    profile_topic,
)
from vibe_gallery.services.profiles import to_profile_response

logger = logging.getLogger(__name__)

MAX_LEADERBOARD_LIMIT = 100

S = TypeVar("S")


class SubmissionQuery:
    """Lazy, restartable sequence of submissions backed by a SELECT."""

    def __init__(self, session: Session, statement: Select[tuple[Submission]]) -> None:
        self._session = session
        self._statement = statement

    def __iter__(self) -> Iterator[Submission]:
        # Refresh rows already in the identity map so a second pass sees new tallies.
        statement = self._statement.execution_options(populate_existing=True)
        yield from self._session.scalars(statement)


def leaderboard_statement(limit: int | None = None) -> Select[tuple[Submission]]:
    """Submissions by vote count, ties in insertion order.

    ``limit`` is capped at ``MAX_LEADERBOARD_LIMIT``; zero selects nothing.

    Raises:
        ValueError: If ``limit`` is negative.
    """
    size = settings.leaderboard_default_limit if limit is None else limit
    if size < 0:
        raise ValueError(f"leaderboard limit must be non-negative, got {size}")
    size = min(size, MAX_LEADERBOARD_LIMIT)
    return (
        select(Submission)
        .order_by(Submission.vote_count.desc(), Submission.order_index.asc())
        .limit(size)
    )


def gallery_statement() -> Select[tuple[Submission]]:
    """All submissions, newest first."""
    return select(Submission).order_by(
        Submission.created_at.desc(),
        Submission.order_index.desc(),
    )


def leaderboard(session: Session, limit: int | None = None) -> SubmissionQuery:
    return SubmissionQuery(session, leaderboard_statement(limit))


def gallery(session: Session) -> SubmissionQuery:
    return SubmissionQuery(session, gallery_statement())


def to_submission_response(submission: Submission) -> SubmissionResponse:
    """Convert a Submission ORM instance to an API schema."""
    return SubmissionResponse.model_validate(submission)


def profile_snapshot(session: Session, user_id: str) -> ProfileResponse | None:
    profile = session.get(UserProfile, user_id)
    if profile is None:
        return None
    return to_profile_response(profile)


class LiveViews:
    """Subscriptions that re-deliver full snapshots after every change."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        feed: ChangeFeed | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._feed = feed or get_change_feed()

    def subscribe_leaderboard(
        self,
        callback: Callable[[list[SubmissionResponse]], None],
        limit: int | None = None,
    ) -> Subscription:
        statement = leaderboard_statement(limit)
        return self._live(SUBMISSIONS_TOPIC, lambda session: _render(session, statement), callback)

    def subscribe_gallery(
        self,
        callback: Callable[[list[SubmissionResponse]], None],
    ) -> Subscription:
        statement = gallery_statement()
        return self._live(SUBMISSIONS_TOPIC, lambda session: _render(session, statement), callback)

    def subscribe_profile(
        self,
        user_id: str,
        callback: Callable[[ProfileResponse | None], None],
    ) -> Subscription:
        return self._live(
            profile_topic(user_id),
            lambda session: profile_snapshot(session, user_id),
            callback,
        )

    def _live(
        self,
        topic: str,
        render: Callable[[Session], S],
        callback: Callable[[S], None],
    ) -> Subscription:
        subscription: Subscription | None = None
        # Held across render and callback so snapshots arrive in commit order.
        ordering = Lock()

        def deliver(_topic: str) -> None:
            with ordering:
                with self._session_factory() as session:
                    snapshot = render(session)
                # The handle may have been disposed while the snapshot was rendering.
                if subscription is not None and subscription.active:
                    callback(snapshot)

        subscription = self._feed.subscribe(topic, deliver)
        try:
            deliver(topic)
        except Exception:
            subscription.unsubscribe()
            raise
        return subscription


def _render(session: Session, statement: Select[tuple[Submission]]) -> list[SubmissionResponse]:
    return [to_submission_response(row) for row in session.scalars(statement)]


_CLOSED = object()


class SnapshotStream(Generic[S]):
    """Async iterator over the snapshots of one live subscription.

    The subscription is opened lazily on first iteration, so each new stream
    starts with a fresh snapshot. Only the newest undelivered snapshot is
    kept; a slow consumer skips intermediate states. ``aclose`` unsubscribes
    and ends iteration.
    """

    def __init__(self, opener: Callable[[Callable[[S], None]], Subscription]) -> None:
        self._opener = opener
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=1)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._subscription: Subscription | None = None
        self._closed = False

    def __aiter__(self) -> SnapshotStream[S]:
        return self

    async def __anext__(self) -> S:
        if self._closed:
            raise StopAsyncIteration
        if self._subscription is None:
            self._loop = asyncio.get_running_loop()
            self._subscription = await asyncio.to_thread(self._opener, self._push)
            if self._closed:
                # Closed while the subscription was still opening.
                self._subscription.unsubscribe()
                raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    def _push(self, snapshot: S) -> None:
        if self._closed or self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._offer, snapshot)

    def _offer(self, item: object) -> None:
        """Replace any pending item; runs on the event loop."""
        if self._closed and item is not _CLOSED:
            return
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(item)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
        self._offer(_CLOSED)

    async def __aenter__(self) -> SnapshotStream[S]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
