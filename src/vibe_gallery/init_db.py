# src/vibe_gallery/init_db.py
"""Create the gallery tables on the configured database.

Production deployments should run the Alembic migrations instead; this is a
shortcut for local SQLite setups.
"""

import logging

from vibe_gallery.core.settings import settings
from vibe_gallery.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized at %s", settings.effective_database_url)


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    init_db()
