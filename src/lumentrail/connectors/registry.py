"""Mock third-party connectors as a tagged registry of plain records.

Each ConnectorDefinition carries its identity and fixed fixture documents.
connect() and sync() are plain functions over a definition; sync() stamps
every record with the sync time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from lumentrail.ingest.orchestrator import IngestRecord


class ConnectorError(RuntimeError):
    """Raised when a connector is unknown or fails to connect."""

    def __init__(self, message: str, connector_id: str | None = None) -> None:
        super().__init__(message)
        self.connector_id = connector_id


@dataclass(frozen=True)
class Fixture:
    """One document a mock connector returns on sync (timestamp added at sync)."""

    id: str
    title: str
    content: str
    author: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConnectorDefinition:
    id: str
    name: str
    source: str  # slack | drive | notion
    description: str
    fixtures: tuple[Fixture, ...] = ()


@dataclass
class ConnectorStatus:
    id: str
    name: str
    source: str
    connected: bool
    last_sync: str | None = None
    item_count: int | None = None
    error: str | None = None


@dataclass
class ConnectorResult:
    items: list[IngestRecord] = field(default_factory=list)


SLACK = ConnectorDefinition(
    id="slack",
    name="Slack",
    source="slack",
    description="Channels, threads, and DMs from Slack.",
    fixtures=(
        Fixture(
            id="slack:channel:research:1",
            title="#research / kickoff",
            content=(
                "Kickoff notes: align on the local-first architecture and "
                "prioritize Slack + Notion."
            ),
            author="alice",
            metadata={"channel": "research"},
        ),
        Fixture(
            id="slack:dm:design:2",
            title="DM / design sync",
            content=(
                "Design sync: emphasize provenance, show citations inline, "
                "and keep the UI calm."
            ),
            author="ben",
            metadata={"dm": True},
        ),
    ),
)

NOTION = ConnectorDefinition(
    id="notion",
    name="Notion",
    source="notion",
    description="Pages and databases from Notion.",
    fixtures=(
        Fixture(
            id="notion:page:strategy",
            title="Strategy Doc",
            content=(
                "LumenTrail strategy: unify knowledge with trustworthy citations "
                "and rapid connectors."
            ),
            author="cara",
            metadata={"page": "strategy"},
        ),
    ),
)

DRIVE = ConnectorDefinition(
    id="drive",
    name="Google Drive",
    source="drive",
    description="Docs, PDFs, and slides from Drive.",
    fixtures=(
        Fixture(
            id="drive:doc:vision",
            title="Vision Doc",
            content=(
                "Vision: build a personal research OS with clear provenance "
                "and fast retrieval."
            ),
            author="dev",
            metadata={"docId": "vision"},
        ),
    ),
)

_REGISTRY: tuple[ConnectorDefinition, ...] = (SLACK, NOTION, DRIVE)


def get_connector_registry() -> list[ConnectorDefinition]:
    """Return every registered connector, in registration order."""
    return list(_REGISTRY)


def get_connector(connector_id: str) -> ConnectorDefinition:
    """Return the connector registered under *connector_id*.

    Raises:
        ConnectorError: If no connector has that id.
    """
    for defn in _REGISTRY:
        if defn.id == connector_id:
            return defn
    known = ", ".join(d.id for d in _REGISTRY)
    raise ConnectorError(
        f"Unknown connector {connector_id!r} (known: {known})", connector_id=connector_id
    )


def connect(defn: ConnectorDefinition, now: datetime | None = None) -> ConnectorStatus:
    """Return the connection status of *defn*. Mock connectors always connect."""
    return ConnectorStatus(
        id=defn.id,
        name=defn.name,
        source=defn.source,
        connected=True,
        last_sync=_isoformat(now),
        item_count=len(defn.fixtures),
    )


def sync(defn: ConnectorDefinition, now: datetime | None = None) -> ConnectorResult:
    """Return the connector's documents as ingestible records stamped with *now*."""
    stamp = _isoformat(now)
    return ConnectorResult(
        items=[
            IngestRecord(
                id=f.id,
                source=defn.source,
                title=f.title,
                content=f.content,
                author=f.author,
                timestamp=stamp,
                metadata=dict(f.metadata),
            )
            for f in defn.fixtures
        ]
    )


def _isoformat(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()
