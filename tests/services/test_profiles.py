# tests/services/test_profiles.py
"""Tests for profile creation and projection."""

from __future__ import annotations

import pytest

from vibe_gallery.core.errors import ProfileNotFoundError
from vibe_gallery.core.security import Identity
from vibe_gallery.models.user import DEFAULT_DISPLAY_NAME
from vibe_gallery.services.profiles import ensure_profile, get_profile, to_profile_response


def test_first_sight_creates_empty_profile(db_session):
    profile = ensure_profile(db_session, Identity(user_id="alice"))

    assert profile.display_name == DEFAULT_DISPLAY_NAME
    assert profile.avatar_ref == ""
    assert profile.voted_submission_ids == []


def test_later_sign_in_keeps_votes_and_refreshes_metadata(session_factory, ledger, make_user, make_submission):
    target = make_submission("bob")
    make_user("alice", "Alice")
    ledger.cast_or_retract_vote("alice", target)

    with session_factory() as session:
        profile = ensure_profile(
            session,
            Identity(user_id="alice", display_name="Alice L.", avatar_ref="https://example.com/a.png"),
        )

        assert profile.display_name == "Alice L."
        assert profile.avatar_ref == "https://example.com/a.png"
        assert profile.voted_submission_ids == [target]


def test_get_profile_unknown(db_session):
    with pytest.raises(ProfileNotFoundError):
        get_profile(db_session, "ghost")


def test_profile_response_reports_remaining_budget(session_factory, ledger, make_user, make_submission):
    targets = [make_submission(f"author-{i}") for i in range(2)]
    make_user("alice")
    for target in targets:
        ledger.cast_or_retract_vote("alice", target)

    with session_factory() as session:
        response = to_profile_response(get_profile(session, "alice"), max_votes=5)

    assert response.votes_used == 2
    assert response.votes_remaining == 3
    assert response.voted_submission_ids == targets
