"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vibe_gallery.core.errors import IdentityRequiredError
from vibe_gallery.core.security import Identity, decode_access_token
from vibe_gallery.db.session import SessionFactoryDep, get_db
from vibe_gallery.models import UserProfile
from vibe_gallery.services.ledger import VoteLedger
from vibe_gallery.services.profiles import ensure_profile
from vibe_gallery.services.views import LiveViews

# Missing credentials are reported as IdentityRequiredError rather than a bare 403.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity:
    """Return the identity carried by the bearer token.

    Raises:
        IdentityRequiredError: If no token was sent or it is invalid.
    """
    if credentials is None:
        raise IdentityRequiredError()
    return decode_access_token(credentials.credentials)


CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]


def get_current_profile(identity: CurrentIdentityDep, db: SessionDep) -> UserProfile:
    """Return the caller's profile, creating it on first sight."""
    return ensure_profile(db, identity)


CurrentProfileDep = Annotated[UserProfile, Depends(get_current_profile)]


def get_ledger(factory: SessionFactoryDep) -> VoteLedger:
    """Return a vote ledger bound to the request's session factory."""
    return VoteLedger(factory)


def get_live_views(factory: SessionFactoryDep) -> LiveViews:
    return LiveViews(factory)


LedgerDep = Annotated[VoteLedger, Depends(get_ledger)]
LiveViewsDep = Annotated[LiveViews, Depends(get_live_views)]
