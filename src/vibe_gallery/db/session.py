"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from vibe_gallery.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import vibe_gallery.models  # noqa: E402,F401

# Request sessions cross threads between the threadpool and the event loop.
_connect_args = (
    {"check_same_thread": False}
    if settings.effective_database_url.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def get_session_factory() -> sessionmaker[Session]:
    """Return the session factory used for transactional work."""
    return SessionLocal


SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]


def get_db(factory: SessionFactoryDep) -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = factory()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
