"""Provenance resolution: chunk id → chunk text + owning item context."""

from __future__ import annotations

from lumentrail.db.models import ExplainResult
from lumentrail.db.store import Store


def explain(store: Store, chunk_id: str) -> ExplainResult | None:
    """Return the chunk joined to its item, or None when no such chunk exists.

    The chunk and item are read in one statement. The returned metadata is
    the item's raw JSON text.
    """
    if not chunk_id:
        return None
    return store.get_chunk_with_item(chunk_id)
