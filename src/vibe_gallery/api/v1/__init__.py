# src/vibe_gallery/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    leaderboard_router,
    live_router,
    submissions_router,
    system_router,
    users_router,
    votes_router,
)

__all__ = [
    "auth_router",
    "submissions_router",
    "votes_router",
    "leaderboard_router",
    "live_router",
    "system_router",
    "users_router",
]
