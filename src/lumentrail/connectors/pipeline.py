"""Connector sync pipeline: connect → sync → ingest every returned record."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from lumentrail.connectors.registry import ConnectorDefinition, ConnectorError, connect, sync
from lumentrail.db.store import Store
from lumentrail.ingest.chunker import DEFAULT_MAX_LENGTH, DEFAULT_OVERLAP
from lumentrail.ingest.orchestrator import ingest_record


def sync_connectors(
    store: Store,
    connectors: Iterable[ConnectorDefinition],
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    overlap: int = DEFAULT_OVERLAP,
    now: datetime | None = None,
) -> dict[str, int]:
    """Sync each connector into *store* and return ``{connector_id: items_ingested}``.

    Raises:
        ConnectorError: If a connector reports it is not connected. Connectors
            processed before it stay ingested.
        IngestionError: If a connector emits an invalid record.
        StorageError: If a write fails.
    """
    counts: dict[str, int] = {}
    for defn in connectors:
        status = connect(defn, now=now)
        if not status.connected:
            raise ConnectorError(
                f"Connector {defn.id} failed to connect"
                + (f": {status.error}" if status.error else ""),
                connector_id=defn.id,
            )
        result = sync(defn, now=now)
        for record in result.items:
            ingest_record(store, record, max_length=max_length, overlap=overlap)
        counts[defn.id] = len(result.items)
    return counts
