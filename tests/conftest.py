# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from pathlib import Path
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from vibe_gallery.api.v1.dependencies import get_ledger, get_live_views
from vibe_gallery.core.security import Identity, create_access_token
from vibe_gallery.db.session import Base, get_session_factory
from vibe_gallery.main import app as fastapi_app
from vibe_gallery.models import Submission, UserProfile
from vibe_gallery.services.changefeed import ChangeFeed
from vibe_gallery.services.ledger import VoteLedger
from vibe_gallery.services.profiles import ensure_profile
from vibe_gallery.services.views import LiveViews

MAX_VOTES = 5

SAMPLE_CONTENT: dict[str, str] = {
    "title": "Prompt Golf",
    "description": "Shortest prompt that builds a working todo app.",
    "prompt_text": "build a todo app, make it vibe",
    "external_link": "https://example.com/prompt-golf",
    "thumbnail_ref": "https://example.com/prompt-golf.png",
}


@pytest.fixture()
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    # File-backed so separate sessions get separate connections.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'gallery.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def feed() -> ChangeFeed:
    """A private change feed so tests never see each other's notifications."""
    return ChangeFeed()


@pytest.fixture()
def ledger(session_factory: sessionmaker[Session], feed: ChangeFeed) -> VoteLedger:
    return VoteLedger(session_factory, feed, max_votes=MAX_VOTES, retry_attempts=3)


@pytest.fixture()
def live_views(session_factory: sessionmaker[Session], feed: ChangeFeed) -> LiveViews:
    return LiveViews(session_factory, feed)


@pytest.fixture()
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    session_factory: sessionmaker[Session],
    ledger: VoteLedger,
    live_views: LiveViews,
) -> Iterator[None]:
    overrides: dict[Callable[..., Any], Callable[[], Any]] = {
        get_session_factory: lambda: session_factory,
        get_ledger: lambda: ledger,
        get_live_views: lambda: live_views,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def auth_headers(user_id: str, display_name: str | None = None) -> dict[str, str]:
    """Return bearer headers for ``user_id``."""
    token = create_access_token(Identity(user_id=user_id, display_name=display_name))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for() -> Callable[..., dict[str, str]]:
    return auth_headers


@pytest.fixture()
def make_user(session_factory: sessionmaker[Session]) -> Callable[..., str]:
    """Create (or reuse) a profile and return its id."""

    def _make(user_id: str, display_name: str | None = None) -> str:
        with session_factory() as session:
            ensure_profile(session, Identity(user_id=user_id, display_name=display_name))
        return user_id

    return _make


@pytest.fixture()
def make_submission(ledger: VoteLedger, make_user: Callable[..., str]) -> Callable[..., str]:
    """Create a submission authored by ``author_id`` and return its id."""

    def _make(author_id: str, **overrides: str) -> str:
        make_user(author_id, f"Author {author_id}")
        content = {**SAMPLE_CONTENT, "title": f"{author_id} project", **overrides}
        return ledger.submit(author_id, content).id

    return _make


@pytest.fixture()
def check_invariants(session_factory: sessionmaker[Session]) -> Callable[[], None]:
    """Assert the budget, tally, self-vote and cross-entity invariants on committed state."""

    def _check() -> None:
        with session_factory() as session:
            profiles = {p.user_id: p for p in session.scalars(select(UserProfile))}
            submissions = {s.id: s for s in session.scalars(select(Submission))}

            for profile in profiles.values():
                assert profile.votes_used <= MAX_VOTES
                for submission_id in profile.voted_submission_ids:
                    assert profile.user_id in submissions[submission_id].voters

            for submission in submissions.values():
                assert submission.vote_count == len(submission.voters)
                assert submission.author_id not in submission.voters
                for voter in submission.voters:
                    assert submission.id in profiles[voter].voted_submission_ids

    return _check


@pytest.fixture()
def sample_content() -> dict[str, str]:
    return dict(SAMPLE_CONTENT)
