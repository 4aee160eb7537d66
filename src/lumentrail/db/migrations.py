"""Forward-only migration runner for the LumenTrail schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

# chunks.item_id is a logical reference only: the orchestrator keeps it
# consistent, the engine does not enforce it.
_V1_SQL = """
CREATE TABLE IF NOT EXISTS items (
    id              TEXT PRIMARY KEY,
    source          TEXT NOT NULL,
    title           TEXT NOT NULL,
    author          TEXT,
    timestamp       TEXT,
    content         TEXT NOT NULL,
    metadata        TEXT,
    permissions     TEXT
);

CREATE TABLE IF NOT EXISTS chunks (
    chunk_id        TEXT PRIMARY KEY,
    item_id         TEXT NOT NULL,
    text            TEXT NOT NULL,
    start           INTEGER,
    end             INTEGER,
    citations       TEXT
);

CREATE INDEX IF NOT EXISTS chunks_text_idx ON chunks(text);
"""

_V2_SQL = """
CREATE INDEX IF NOT EXISTS chunks_item_idx ON chunks(item_id, start);
CREATE INDEX IF NOT EXISTS items_timestamp_idx ON items(timestamp);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
    (2, _V2_SQL),
]


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    current = row[0] if row[0] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()


def current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration version (0 for a fresh database)."""
    conn.execute(_CREATE_SCHEMA_VERSION)
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] if row[0] is not None else 0
