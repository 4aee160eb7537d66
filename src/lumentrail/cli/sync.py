"""lumentrail sync / connectors — pull documents from mock connectors."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from lumentrail.cli.common import load_cli_config, open_repo, resolve_db
from lumentrail.cli.errors import err_connector_failed, err_storage, err_unknown_connector
from lumentrail.connectors.pipeline import sync_connectors
from lumentrail.connectors.registry import (
    ConnectorDefinition,
    ConnectorError,
    connect,
    get_connector,
    get_connector_registry,
)
from lumentrail.db.store import StorageError
from lumentrail.ingest.orchestrator import IngestionError

console = Console()


def sync_cmd(
    connector: Annotated[
        list[str] | None,
        typer.Option("--connector", "-c", help="Connector id to sync (repeatable). Default: all."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database (created if missing)."),
    ] = None,
) -> None:
    """Connect to each connector and ingest the items it returns."""
    cfg = load_cli_config(console)
    selected = _select(connector or [])

    conn, repo = open_repo(resolve_db(db, cfg), console, create=True)
    try:
        counts = sync_connectors(
            repo,
            selected,
            max_length=cfg.chunker.max_length,
            overlap=cfg.chunker.overlap,
        )
    except ConnectorError as exc:
        console.print(err_connector_failed(exc.connector_id or "?", str(exc)))
        raise typer.Exit(1)
    except IngestionError as exc:
        console.print(f"[red]Error:[/] Connector emitted an invalid record: {exc}")
        raise typer.Exit(1)
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    for connector_id, n in counts.items():
        console.print(f"  [green]✓[/] {connector_id}: {n} item(s)")
    console.print(
        f"\n[bold]Connectors:[/] {len(counts)}  |  [bold]Items:[/] {sum(counts.values())}"
    )


def connectors_cmd() -> None:
    """List the available connectors and their connection status."""
    table = Table(title="Connectors")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Source")
    table.add_column("Status")
    table.add_column("Items", justify="right")
    table.add_column("Description", style="dim")

    for defn in get_connector_registry():
        status = connect(defn)
        table.add_row(
            defn.id,
            defn.name,
            defn.source,
            "[green]connected[/]" if status.connected else f"[red]{status.error or 'offline'}[/]",
            str(status.item_count if status.item_count is not None else "—"),
            defn.description,
        )
    console.print(table)


def _select(ids: list[str]) -> list[ConnectorDefinition]:
    if not ids:
        return get_connector_registry()
    selected: list[ConnectorDefinition] = []
    for connector_id in ids:
        try:
            selected.append(get_connector(connector_id))
        except ConnectorError:
            known = [d.id for d in get_connector_registry()]
            console.print(err_unknown_connector(connector_id, known))
            raise typer.Exit(1)
    return selected

