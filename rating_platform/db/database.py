"""Database connection helpers and initialization."""

import logging
import os
import sqlite3
from contextlib import contextmanager

from rating_platform.core import logging_config  # noqa: F401 – registers TRACE
from rating_platform.core.config import settings

logger = logging.getLogger(__name__)

# Extract the file path from the DATABASE_URL (strip "sqlite:///")
DB_PATH = settings.DATABASE_URL.replace("sqlite:///", "")


def _ensure_directory(path: str) -> None:
    db_dir = os.path.dirname(path) or "."
    os.makedirs(db_dir, exist_ok=True)
    logger.trace("Database directory ensured at %s", db_dir)


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection with row factory."""
    logger.trace("Opening database connection to %s", DB_PATH)
    conn = sqlite3.connect(
        DB_PATH,
        timeout=settings.DB_BUSY_TIMEOUT_SECONDS,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def like_pattern(text: str) -> str:
    """Substring pattern for ``LIKE ? ESCAPE '\\'`` with wildcards taken literally."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@contextmanager
def get_db():
    """Context manager that yields a database connection and auto-commits/rolls back."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
        logger.trace("Database transaction committed")
    except Exception:
        logger.warning("Database transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()
        logger.trace("Database connection closed")


def init_db() -> None:
    """Initialize the database by creating all tables."""
    logger.info("Initializing database schema at %s", DB_PATH)
    _ensure_directory(DB_PATH)
    from rating_platform.db import schema

    schema.create_tables()
