"""Ingestion orchestrator: external record → one Item + N Chunks, atomically.

Sources:
  files      → ingest_file()  (.txt / .md only, checked before any read)
  connectors → ingest_record() with the records produced by sync()

The item row, the removal of the item's previous chunks and the new chunk
rows are written in a single store transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from lumentrail.db.models import SOURCE_TYPES, Chunk, Item, chunk_id_for
from lumentrail.db.store import Store
from lumentrail.ingest.chunker import DEFAULT_MAX_LENGTH, DEFAULT_OVERLAP, chunk_text

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset([".txt", ".md"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class IngestionError(ValueError):
    """Raised when a single record or file cannot be ingested."""


class UnsupportedExtension(IngestionError):
    """Raised when a file's extension is not in SUPPORTED_EXTENSIONS."""

    def __init__(self, path: Path | str) -> None:
        self.path = str(path)
        self.extension = Path(path).suffix.lower()
        super().__init__(f"Unsupported file type {self.extension!r}: {self.path}")


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class IngestRecord:
    """One external document as handed to the orchestrator.

    Attributes:
        id: Stable identifier; re-ingesting the same id overwrites the item.
        source: One of files | slack | drive | notion.
        title: Display title.
        content: Full raw text.
        author: Optional author name.
        timestamp: Optional ISO-8601 string (mtime for files, sync time for
            connector items).
        metadata: Opaque mapping, stored as JSON.
        permissions: Opaque strings, stored but never evaluated.
    """

    id: str
    source: str
    title: str
    content: str
    author: str | None = None
    timestamp: str | None = None
    metadata: dict[str, Any] | None = None
    permissions: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngestRecord:
        """Build a record from a ``{id, source, title, content, ...}`` mapping."""
        missing = [k for k in ("id", "source", "title", "content") if k not in data]
        if missing:
            raise IngestionError(f"Record is missing required field(s): {', '.join(missing)}")
        return cls(
            id=str(data["id"]),
            source=str(data["source"]),
            title=str(data["title"]),
            content=str(data["content"]),
            author=data.get("author"),
            timestamp=data.get("timestamp"),
            metadata=dict(data["metadata"]) if data.get("metadata") is not None else None,
            permissions=list(data["permissions"]) if data.get("permissions") is not None else None,
        )


@dataclass
class IngestResult:
    ok: bool
    item_id: str
    chunk_count: int


@dataclass
class BatchReport:
    """Aggregate outcome of a multi-file ingestion."""

    indexed: int = 0
    skipped: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)  # (path, reason)

    @property
    def total(self) -> int:
        return self.indexed + self.skipped


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def ingest_record(
    store: Store,
    record: IngestRecord | Mapping[str, Any],
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    overlap: int = DEFAULT_OVERLAP,
) -> IngestResult:
    """Chunk *record* and write its item and chunks in one transaction.

    Any chunks stored for the same item id by an earlier ingestion are
    removed in the same transaction, so the stored chunk set always matches
    the latest content.

    Raises:
        IngestionError: If the record is malformed or names an unknown source.
        StorageError: If the write fails; nothing from this call is visible.
    """
    if not isinstance(record, IngestRecord):
        record = IngestRecord.from_dict(record)
    _validate(record)

    item = Item(
        id=record.id,
        source=record.source,
        title=record.title,
        content=record.content,
        author=record.author,
        timestamp=record.timestamp,
        metadata=dict(record.metadata or {}),
        permissions=list(record.permissions or []),
    )
    chunks = [
        Chunk(
            chunk_id=chunk_id_for(item.id, index),
            item_id=item.id,
            text=span.text,
            start=span.start,
            end=span.end,
        )
        for index, span in enumerate(chunk_text(item.content, max_length, overlap))
    ]

    with store.transaction():
        store.delete_chunks_by_item(item.id)
        store.upsert_item(item)
        store.upsert_chunks(chunks)

    return IngestResult(ok=True, item_id=item.id, chunk_count=len(chunks))


def ingest_file(
    store: Store,
    path: Path | str,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    overlap: int = DEFAULT_OVERLAP,
) -> IngestResult:
    """Ingest one local text file as a ``files`` item.

    Raises:
        UnsupportedExtension: If the suffix is not .txt / .md (file untouched).
        IngestionError: If the file cannot be read.
        StorageError: If the write fails.
    """
    p = Path(path)
    if p.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedExtension(p)

    resolved = p.resolve()
    try:
        stat = resolved.stat()
        content = resolved.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise IngestionError(f"Cannot read {p}: {exc}") from exc

    record = IngestRecord(
        id=file_item_id(resolved),
        source="files",
        title=resolved.name,
        content=content,
        timestamp=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        metadata={"path": str(resolved), "size": stat.st_size},
    )
    return ingest_record(store, record, max_length=max_length, overlap=overlap)


def ingest_paths(
    store: Store,
    paths: Iterable[Path | str],
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    overlap: int = DEFAULT_OVERLAP,
    on_result: Callable[[Path, IngestResult | IngestionError], None] | None = None,
) -> BatchReport:
    """Ingest every path in *paths*, counting per-file failures as skipped.

    *on_result* is called once per path with its ``IngestResult`` or the
    ``IngestionError`` that skipped it. ``StorageError`` is not caught: a
    broken store aborts the batch.
    """
    report = BatchReport()
    for path in paths:
        outcome: IngestResult | IngestionError
        try:
            outcome = ingest_file(store, path, max_length=max_length, overlap=overlap)
        except IngestionError as exc:
            report.skipped += 1
            report.failures.append((str(path), str(exc)))
            outcome = exc
        else:
            report.indexed += 1
        if on_result is not None:
            on_result(Path(path), outcome)
    return report


def file_item_id(path: Path | str) -> str:
    """Return the item id for a local file (``files:<absolute path>``)."""
    return f"files:{Path(path).resolve()}"


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _validate(record: IngestRecord) -> None:
    if not record.id:
        raise IngestionError("Record id must not be empty")
    if record.source not in SOURCE_TYPES:
        raise IngestionError(
            f"Unknown source {record.source!r} for record {record.id!r} "
            f"(expected one of: {', '.join(sorted(SOURCE_TYPES))})"
        )
