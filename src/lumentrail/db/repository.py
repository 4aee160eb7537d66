"""Repository pattern for all LumenTrail database operations.

Single interface for: items, chunks, substring lookup, browse views and the
chunk → item provenance join. Implements the ``Store`` protocol.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator

from lumentrail.db.models import (
    Chunk,
    ChunkRow,
    ChunkSummary,
    ExplainResult,
    Item,
    ItemSummary,
)
from lumentrail.db.store import StorageError


class Repository:
    """Data access layer for items and chunks.

    Wraps an open sqlite3.Connection. Every statement runs under a re-entrant
    lock, so one Repository may be shared by the watcher, batch ingestion and
    readers running on different threads. The connection is owned by the
    caller and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see lumentrail.db.schema.initialize).
        """
        self._conn = conn
        self._lock = threading.RLock()
        self._depth = 0

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed writes as one atomic unit.

        Commits when the outermost block exits cleanly; any exception rolls
        the whole unit back. Nested blocks join the enclosing transaction.

        Raises:
            StorageError: If SQLite fails; the transaction has been rolled back.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            self._depth = 1
            try:
                yield
                self._conn.commit()
            except sqlite3.Error as exc:
                self._conn.rollback()
                raise StorageError(f"Transaction rolled back: {exc}") from exc
            except BaseException:
                self._conn.rollback()
                raise
            finally:
                self._depth = 0

    @contextmanager
    def _reading(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
            except sqlite3.Error as exc:
                raise StorageError(f"Read failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def upsert_item(self, item: Item) -> None:
        """Insert or replace an item by primary key ``id``.

        Args:
            item: Item dataclass instance to persist. ``metadata`` and
                ``permissions`` are stored as JSON text.
        """
        with self.transaction():
            self._conn.execute(
                """
                INSERT OR REPLACE INTO items
                    (id, source, title, author, timestamp, content, metadata, permissions)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.source,
                    item.title,
                    item.author,
                    item.timestamp,
                    item.content,
                    json.dumps(item.metadata or {}),
                    json.dumps(item.permissions or []),
                ),
            )

    def get_item(self, item_id: str) -> Item | None:
        """Return an item by ID, or None if not found.

        ``permissions`` is write-only and comes back empty.
        """
        with self._reading() as conn:
            row = conn.execute(
                """
                SELECT id, source, title, author, timestamp, content, metadata
                FROM items WHERE id = ?
                """,
                (item_id,),
            ).fetchone()
        return _row_to_item(row) if row else None

    def list_items(self, limit: int = 50) -> list[ItemSummary]:
        """Return item summaries, most recent ``timestamp`` first (NULLs last)."""
        with self._reading() as conn:
            rows = conn.execute(
                """
                SELECT id, source, title, timestamp
                FROM items
                ORDER BY timestamp IS NULL, timestamp DESC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()
        return [
            ItemSummary(id=r["id"], source=r["source"], title=r["title"], timestamp=r["timestamp"])
            for r in rows
        ]

    def count_items(self) -> int:
        with self._reading() as conn:
            return conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]

    def count_items_by_source(self) -> dict[str, int]:
        """Return ``{source: item_count}`` for every source present."""
        with self._reading() as conn:
            rows = conn.execute(
                "SELECT source, COUNT(*) AS n FROM items GROUP BY source ORDER BY source"
            ).fetchall()
        return {r["source"]: r["n"] for r in rows}

    # ------------------------------------------------------------------
    # Chunks
    # ------------------------------------------------------------------

    def upsert_chunks(self, chunks: Iterable[Chunk]) -> None:
        """Insert or replace chunks by primary key ``chunk_id``."""
        with self.transaction():
            self._conn.executemany(
                """
                INSERT OR REPLACE INTO chunks (chunk_id, item_id, text, start, end, citations)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        c.chunk_id,
                        c.item_id,
                        c.text,
                        c.start,
                        c.end,
                        json.dumps(c.citations or []),
                    )
                    for c in chunks
                ],
            )

    def delete_chunks_by_item(self, item_id: str) -> int:
        """Delete every chunk owned by *item_id*. Returns the number removed."""
        with self.transaction():
            cur = self._conn.execute("DELETE FROM chunks WHERE item_id = ?", (item_id,))
        return cur.rowcount

    def list_chunks(self, item_id: str, limit: int = 50) -> list[ChunkSummary]:
        """Return the chunks of *item_id* in ascending ``start`` order."""
        with self._reading() as conn:
            rows = conn.execute(
                """
                SELECT chunk_id, text, start, end
                FROM chunks
                WHERE item_id = ?
                ORDER BY start ASC
                LIMIT ?
                """,
                (item_id, limit),
            ).fetchall()
        return [
            ChunkSummary(chunk_id=r["chunk_id"], text=r["text"], start=r["start"], end=r["end"])
            for r in rows
        ]

    def count_chunks(self, item_id: str | None = None) -> int:
        """Return the number of chunks, optionally restricted to one item."""
        with self._reading() as conn:
            if item_id is None:
                return conn.execute("SELECT COUNT(*) FROM chunks").fetchone()[0]
            return conn.execute(
                "SELECT COUNT(*) FROM chunks WHERE item_id = ?", (item_id,)
            ).fetchone()[0]

    # ------------------------------------------------------------------
    # Lexical lookup
    # ------------------------------------------------------------------

    def find_by_substring(self, needle: str, candidate_pool_size: int) -> list[ChunkRow]:
        """Return up to *candidate_pool_size* chunks whose text contains *needle*.

        Literal, case-sensitive match (``instr``, so ``%`` and ``_`` carry no
        wildcard meaning). Rows come back in storage order; callers rank them.
        """
        with self._reading() as conn:
            rows = conn.execute(
                """
                SELECT chunk_id, item_id, text
                FROM chunks
                WHERE instr(text, ?) > 0
                LIMIT ?
                """,
                (needle, candidate_pool_size),
            ).fetchall()
        return [ChunkRow(chunk_id=r["chunk_id"], item_id=r["item_id"], text=r["text"]) for r in rows]

    # ------------------------------------------------------------------
    # Provenance
    # ------------------------------------------------------------------

    def get_chunk_with_item(self, chunk_id: str) -> ExplainResult | None:
        """Join a chunk to its owning item, or return None if no such chunk."""
        with self._reading() as conn:
            row = conn.execute(
                """
                SELECT chunks.chunk_id AS chunk_id,
                       chunks.item_id AS item_id,
                       chunks.text AS text,
                       items.title AS title,
                       items.timestamp AS timestamp,
                       items.metadata AS metadata
                FROM chunks
                JOIN items ON items.id = chunks.item_id
                WHERE chunks.chunk_id = ?
                LIMIT 1
                """,
                (chunk_id,),
            ).fetchone()
        if row is None:
            return None
        return ExplainResult(
            chunk_id=row["chunk_id"],
            item_id=row["item_id"],
            text=row["text"],
            title=row["title"],
            timestamp=row["timestamp"],
            metadata=row["metadata"],
        )


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------

def _row_to_item(row: sqlite3.Row) -> Item:
    return Item(
        id=row["id"],
        source=row["source"],
        title=row["title"],
        author=row["author"],
        timestamp=row["timestamp"],
        content=row["content"],
        metadata=json.loads(row["metadata"]) if row["metadata"] else {},
    )
