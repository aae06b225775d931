"""Helpers for creating and reading user profiles."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from vibe_gallery.core.errors import ProfileNotFoundError
from vibe_gallery.core.security import Identity
from vibe_gallery.core.settings import settings
from vibe_gallery.models import UserProfile
from vibe_gallery.models.user import DEFAULT_DISPLAY_NAME
from vibe_gallery.schemas.user import ProfileResponse

__all__ = [
    "ensure_profile",
    "get_profile",
    "to_profile_response",
]

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: str) -> UserProfile:
    """Return the profile for ``user_id`` or raise ProfileNotFoundError."""
    profile = db.get(UserProfile, user_id)
    if profile is None:
        raise ProfileNotFoundError()
    return profile


def ensure_profile(db: Session, identity: Identity) -> UserProfile:
    """Return the caller's profile, creating it with an empty vote set on first sight.

    Display metadata is refreshed from the identity on later sign-ins.
    """
    display_name = identity.display_name or DEFAULT_DISPLAY_NAME
    avatar_ref = identity.avatar_ref or ""

    profile = db.get(UserProfile, identity.user_id)
    if profile is None:
        profile = UserProfile(
            user_id=identity.user_id,
            display_name=display_name,
            avatar_ref=avatar_ref,
        )
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            # Another request created it first.
            db.rollback()
            return get_profile(db, identity.user_id)
        logger.info("Created profile for %s", identity.user_id)
        db.refresh(profile)
        return profile

    if profile.display_name != display_name or profile.avatar_ref != avatar_ref:
        profile.display_name = display_name
        profile.avatar_ref = avatar_ref
        profile.touch()
        try:
            db.commit()
        except StaleDataError:
            # A concurrent vote bumped the row; the metadata refresh can wait for next sign-in.
            db.rollback()
            return get_profile(db, identity.user_id)
        db.refresh(profile)
    return profile


def to_profile_response(profile: UserProfile, max_votes: int | None = None) -> ProfileResponse:
    """Convert a UserProfile ORM instance to an API schema."""
    budget = settings.max_votes if max_votes is None else max_votes
    return ProfileResponse(
        user_id=profile.user_id,
        display_name=profile.display_name,
        avatar_ref=profile.avatar_ref,
        voted_submission_ids=profile.voted_submission_ids,
        votes_used=profile.votes_used,
        votes_remaining=max(budget - profile.votes_used, 0),
    )
