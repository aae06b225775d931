# tests/test_security.py
"""Tests for bearer token issuing and validation."""

import pytest
from jose import jwt

from vibe_gallery.core.errors import IdentityRequiredError
from vibe_gallery.core.security import Identity, create_access_token, decode_access_token
from vibe_gallery.core.settings import settings


def test_token_carries_identity_claims() -> None:
    identity = Identity(user_id="alice", display_name="Alice", avatar_ref="https://example.com/a.png")

    assert decode_access_token(create_access_token(identity)) == identity


def test_token_without_profile_claims() -> None:
    decoded = decode_access_token(create_access_token(Identity(user_id="alice")))

    assert decoded.user_id == "alice"
    assert decoded.display_name is None
    assert decoded.avatar_ref is None


def test_expired_token_is_rejected() -> None:
    token = create_access_token(Identity(user_id="alice"), expires_minutes=-1)

    with pytest.raises(IdentityRequiredError):
        decode_access_token(token)


def test_token_signed_with_other_key_is_rejected() -> None:
    token = jwt.encode({"sub": "alice"}, "some-other-key", algorithm=settings.jwt_algorithm)

    with pytest.raises(IdentityRequiredError):
        decode_access_token(token)


def test_token_without_subject_is_rejected() -> None:
    token = jwt.encode({"name": "Alice"}, settings.secret_key, algorithm=settings.jwt_algorithm)

    with pytest.raises(IdentityRequiredError):
        decode_access_token(token)
