"""Identity tokens issued by the sign-in provider."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from vibe_gallery.core.errors import IdentityRequiredError
from vibe_gallery.core.settings import settings


@dataclass(frozen=True)
class Identity:
    """Authenticated user identity as supplied by the identity provider."""

    user_id: str
    display_name: str | None = None
    avatar_ref: str | None = None


def create_access_token(identity: Identity, expires_minutes: int | None = None) -> str:
    """Create a signed bearer token carrying the identity claims."""
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    to_encode: dict[str, object] = {
        "sub": identity.user_id,
        "exp": datetime.now(UTC) + timedelta(minutes=minutes),
    }
    if identity.display_name:
        to_encode["name"] = identity.display_name
    if identity.avatar_ref:
        to_encode["picture"] = identity.avatar_ref
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> Identity:
    """Validate a bearer token and return the identity it carries.

    Raises:
        IdentityRequiredError: If the token is expired, malformed or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise IdentityRequiredError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not subject:
        raise IdentityRequiredError("Could not validate credentials")
    return Identity(
        user_id=str(subject),
        display_name=payload.get("name"),
        avatar_ref=payload.get("picture"),
    )
