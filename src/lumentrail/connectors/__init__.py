"""Mock third-party connectors (Slack, Notion, Google Drive)."""

from lumentrail.connectors.pipeline import sync_connectors
from lumentrail.connectors.registry import (
    ConnectorDefinition,
    ConnectorError,
    ConnectorResult,
    ConnectorStatus,
    Fixture,
    connect,
    get_connector,
    get_connector_registry,
    sync,
)

__all__ = [
    "ConnectorDefinition",
    "ConnectorError",
    "ConnectorResult",
    "ConnectorStatus",
    "Fixture",
    "connect",
    "get_connector",
    "get_connector_registry",
    "sync",
    "sync_connectors",
]
