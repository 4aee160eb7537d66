"""SQLite connection layer for the LumenTrail store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from lumentrail.db.store import StorageError

_BUSY_TIMEOUT_S = 5.0


class Database:
    """Per-project SQLite database holding items and chunks."""

    def __init__(self, db_path: Path | str) -> None:
        """Store the database path. Call connect() to open the connection.

        Args:
            db_path: Path to the SQLite database file (created with its parent
                directory if missing).
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> sqlite3.Connection:
        """Open a connection shareable across threads and return it.

        The Repository serialises access to the connection with its own lock,
        so ``check_same_thread`` is disabled here.

        Raises:
            StorageError: If the file cannot be opened as a SQLite database.
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(
                self.db_path, timeout=_BUSY_TIMEOUT_S, check_same_thread=False
            )
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open '{self.db_path}': {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA journal_mode = WAL")
        except sqlite3.Error as exc:
            conn.close()
            raise StorageError(f"Cannot open '{self.db_path}': {exc}") from exc
        return conn

    def __enter__(self) -> sqlite3.Connection:
        """Open the database and return the connection (context manager support)."""
        self._conn = self.connect()
        return self._conn

    def __exit__(self, *args: object) -> None:
        """Close the connection when leaving the context manager."""
        if self._conn:
            self._conn.close()
            self._conn = None
