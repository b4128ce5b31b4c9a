"""
SQLite access for the stock tracker.

The store holds a single ``stocks`` table. Every request opens its own
connection through ``get_db``; the repository's batch savepoints nest inside
the transaction that ``get_db`` commits or rolls back.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager

from toystock.core.config import settings
import toystock.core.logging_config  # noqa: F401  registers Logger.trace

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite:///"


def sqlite_path(url: str) -> str:
    """Return the file path of a ``sqlite:///`` URL."""
    if not url.startswith(SQLITE_PREFIX):
        raise ValueError(f"DATABASE_URL must start with {SQLITE_PREFIX!r}, got {url!r}")
    return url[len(SQLITE_PREFIX):]


DB_PATH = sqlite_path(settings.DATABASE_URL)

os.makedirs(os.path.dirname(DB_PATH) or ".", exist_ok=True)
logger.info("Stock database at %s", DB_PATH)


def get_connection() -> sqlite3.Connection:
    """Open a connection whose rows support access by column name."""
    logger.trace("Opening database connection to %s", DB_PATH)
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db():
    """Yield a connection; commit when the block succeeds, roll back when it raises."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
        logger.trace("Stock transaction committed")
    except Exception:
        logger.error("Stock transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Create the ``stocks`` table and its index when missing."""
    logger.info("Initializing stock database schema")
    from toystock.db import schema
    schema.create_tables()
