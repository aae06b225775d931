# src/vibe_gallery/services/__init__.py
"""Business logic services for the gallery."""

from .changefeed import ChangeFeed, Subscription, get_change_feed
from .ledger import VoteLedger, VoteOutcome
from .views import LiveViews, SnapshotStream

__all__ = [
    "ChangeFeed",
    "LiveViews",
    "SnapshotStream",
    "Subscription",
    "VoteLedger",
    "VoteOutcome",
    "get_change_feed",
]
