"""Storage interface the ingestion, search and explain layers depend on."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Iterable, Protocol, runtime_checkable

from lumentrail.db.models import Chunk, ChunkRow, ChunkSummary, ExplainResult, Item, ItemSummary


class StorageError(RuntimeError):
    """Raised when the underlying persistence layer fails.

    The in-flight transaction has been rolled back when this is raised.
    """


@runtime_checkable
class Store(Protocol):
    """Structural interface over the item/chunk store.

    ``Repository`` is the SQLite implementation; tests may supply any object
    with the same methods.
    """

    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one atomic unit (commit on success, rollback on error)."""
        ...

    def upsert_item(self, item: Item) -> None: ...

    def upsert_chunks(self, chunks: Iterable[Chunk]) -> None: ...

    def delete_chunks_by_item(self, item_id: str) -> int: ...

    def find_by_substring(self, needle: str, candidate_pool_size: int) -> list[ChunkRow]: ...

    def list_items(self, limit: int = 50) -> list[ItemSummary]: ...

    def list_chunks(self, item_id: str, limit: int = 50) -> list[ChunkSummary]: ...

    def get_chunk_with_item(self, chunk_id: str) -> ExplainResult | None: ...
