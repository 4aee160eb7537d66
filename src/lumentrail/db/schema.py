"""Database schema initialization."""

from __future__ import annotations

import sqlite3

from lumentrail.db.migrations import current_version, run_migrations
from lumentrail.db.store import StorageError


def initialize(conn: sqlite3.Connection) -> None:
    """Initialize the database schema via the migration runner (idempotent).

    Raises:
        StorageError: If the file is not a usable SQLite database or a
            migration fails.
    """
    try:
        run_migrations(conn)
    except sqlite3.Error as exc:
        raise StorageError(f"Cannot migrate database: {exc}") from exc


def schema_version(conn: sqlite3.Connection) -> int:
    """Return the applied schema version, wrapping SQLite failures."""
    try:
        return current_version(conn)
    except sqlite3.Error as exc:
        raise StorageError(f"Cannot read schema version: {exc}") from exc
