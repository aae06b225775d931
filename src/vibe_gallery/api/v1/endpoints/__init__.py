# src/vibe_gallery/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .leaderboard import router as leaderboard_router
from .live import router as live_router
from .submissions import router as submissions_router
from .system import router as system_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "leaderboard_router",
    "live_router",
    "submissions_router",
    "system_router",
    "users_router",
    "votes_router",
]
