# src/vibe_gallery/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, get_db, get_session_factory

__all__ = ["get_db", "get_session_factory", "SessionLocal"]
