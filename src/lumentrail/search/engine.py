"""Lexical search: literal substring filter in the store, frequency re-rank.

  candidates = store.find_by_substring(query, limit * CANDIDATE_POOL_FACTOR)
  score(c)   = non-overlapping, case-insensitive occurrences of query in c.text

Ranking is a stable sort on score, so ties keep the store's order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lumentrail.db.store import Store

DEFAULT_LIMIT = 20
CANDIDATE_POOL_FACTOR = 5


@dataclass
class SearchResult:
    """A matching chunk and its occurrence count.

    Attributes:
        chunk_id: Deterministic chunk id (``{item_id}:chunk:{index}``).
        item_id: Owning item.
        text: Chunk text.
        score: Case-insensitive, non-overlapping occurrences of the query.
    """

    chunk_id: str
    item_id: str
    text: str
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunkId": self.chunk_id,
            "itemId": self.item_id,
            "text": self.text,
            "score": self.score,
        }


def search(store: Store, query: str, limit: int = DEFAULT_LIMIT) -> list[SearchResult]:
    """Return up to *limit* chunks containing *query*, best-first.

    A blank query returns ``[]`` without touching the store. No match is not
    an error.

    Raises:
        ValueError: If ``limit < 1``.
        StorageError: If the candidate lookup fails.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if not query.strip():
        return []

    rows = store.find_by_substring(query, limit * CANDIDATE_POOL_FACTOR)
    scored = [
        SearchResult(
            chunk_id=row.chunk_id,
            item_id=row.item_id,
            text=row.text,
            score=count_occurrences(row.text, query),
        )
        for row in rows
    ]
    scored.sort(key=lambda r: r.score, reverse=True)
    return scored[:limit]


def count_occurrences(text: str, needle: str) -> int:
    """Count non-overlapping, case-insensitive occurrences of *needle* in *text*."""
    if not needle.strip():
        return 0
    haystack = text.lower()
    target = needle.lower()
    count = 0
    index = haystack.find(target)
    while index != -1:
        count += 1
        index = haystack.find(target, index + len(target))
    return count
