"""Domain models for the LumenTrail store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SOURCE_TYPES: frozenset[str] = frozenset(["files", "slack", "drive", "notion"])


def chunk_id_for(item_id: str, index: int) -> str:
    """Return the deterministic chunk id for position *index* of *item_id*."""
    return f"{item_id}:chunk:{index}"


@dataclass
class Item:
    id: str
    source: str  # files | slack | drive | notion
    title: str
    content: str
    author: str | None = None
    timestamp: str | None = None  # ISO-8601
    metadata: dict[str, Any] = field(default_factory=dict)
    permissions: list[str] = field(default_factory=list)  # stored, never evaluated


@dataclass
class Chunk:
    chunk_id: str
    item_id: str
    text: str
    start: int | None = None
    end: int | None = None
    citations: list[str] = field(default_factory=list)


@dataclass
class ItemSummary:
    id: str
    source: str
    title: str
    timestamp: str | None


@dataclass
class ChunkSummary:
    chunk_id: str
    text: str
    start: int | None
    end: int | None


@dataclass
class ChunkRow:
    """A chunk candidate as returned by the substring filter."""

    chunk_id: str
    item_id: str
    text: str


@dataclass
class ExplainResult:
    """A chunk joined to its owning item.

    ``metadata`` is the item's serialized JSON text, returned as stored.
    """

    chunk_id: str
    item_id: str
    text: str
    title: str
    timestamp: str | None
    metadata: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunkId": self.chunk_id,
            "itemId": self.item_id,
            "text": self.text,
            "title": self.title,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
        }
