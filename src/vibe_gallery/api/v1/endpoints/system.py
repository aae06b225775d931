# src/vibe_gallery/api/v1/endpoints/system.py
"""System endpoints for the gallery API."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text

from vibe_gallery.core.settings import settings

from ..dependencies import SessionDep

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def health(db: SessionDep) -> dict[str, str]:
    """Report liveness and database reachability."""
    db.execute(text("SELECT 1"))
    return {"status": "ok"}


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return the public voting rules; secrets and connection strings are excluded."""
    return {
        "app": {"name": settings.app_name, "version": settings.app_version},
        "voting": {
            "max_votes": settings.max_votes,
            "leaderboard_default_limit": settings.leaderboard_default_limit,
        },
    }
