"""In-process change notifications for live gallery views.

The ledger publishes a topic after every committed mutation. Subscribers
receive only the topic name and re-read whatever state they render, so a
delivery always reflects the latest committed data rather than a diff.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from threading import Lock
from typing import Final

logger = logging.getLogger(__name__)

SUBMISSIONS_TOPIC: Final[str] = "submissions"


def profile_topic(user_id: str) -> str:
    """Return the topic published when a user's vote set changes."""
    return f"profile:{user_id}"


class Subscription:
    """Disposable handle returned by :meth:`ChangeFeed.subscribe`."""

    def __init__(self, feed: ChangeFeed, topic: str, callback: Callable[[str], None]) -> None:
        self.topic = topic
        self._feed = feed
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop all further deliveries. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._feed._remove(self)

    def _deliver(self, topic: str) -> None:
        if self._active:
            self._callback(topic)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class ChangeFeed:
    """Thread-safe topic registry fanning notifications out to subscribers."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._subscribers: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, topic: str, callback: Callable[[str], None]) -> Subscription:
        subscription = Subscription(self, topic, callback)
        with self._lock:
            self._subscribers[topic].append(subscription)
        return subscription

    def publish(self, topic: str) -> int:
        """Notify every active subscriber of ``topic``.

        Returns:
            Number of subscribers that were notified.
        """
        with self._lock:
            subscribers = list(self._subscribers.get(topic, ()))

        delivered = 0
        for subscription in subscribers:
            if not subscription.active:
                continue
            try:
                subscription._deliver(topic)
            except Exception:
                logger.exception("Subscriber for topic %s failed", topic)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, ()))

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.topic)
            if not subscribers:
                return
            try:
                subscribers.remove(subscription)
            except ValueError:
                return
            if not subscribers:
                del self._subscribers[subscription.topic]


_CHANGE_FEED = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return _CHANGE_FEED
