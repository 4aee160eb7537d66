"""lumentrail items / chunks — browse what has been ingested."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lumentrail.cli.common import load_cli_config, open_repo, resolve_db
from lumentrail.cli.errors import err_storage
from lumentrail.db.store import StorageError

console = Console()

_DEFAULT_LIMIT = 50


def items_cmd(
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Maximum number of items."),
    ] = _DEFAULT_LIMIT,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
) -> None:
    """List ingested items, most recent first."""
    cfg = load_cli_config(console)
    conn, repo = open_repo(resolve_db(db, cfg), console)
    try:
        items = repo.list_items(limit=limit)
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    if not items:
        console.print("[yellow]No items ingested yet.[/]")
        return

    table = Table(title="Items")
    table.add_column("ID", style="cyan", overflow="fold")
    table.add_column("Source")
    table.add_column("Title", style="bold")
    table.add_column("Timestamp", style="dim")
    for it in items:
        table.add_row(escape(it.id), it.source, escape(it.title), escape(it.timestamp or "—"))
    console.print(table)


def chunks_cmd(
    item_id: Annotated[str, typer.Argument(help="Item id (see `lumentrail items`).")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Maximum number of chunks."),
    ] = _DEFAULT_LIMIT,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
) -> None:
    """List the chunks of one item in document order."""
    cfg = load_cli_config(console)
    conn, repo = open_repo(resolve_db(db, cfg), console)
    try:
        chunks = repo.list_chunks(item_id, limit=limit)
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    if not chunks:
        console.print(f"[yellow]No chunks for item[/] '{escape(item_id)}'.")
        return

    table = Table(title=f"Chunks of {escape(item_id)}")
    table.add_column("Chunk ID", style="cyan", overflow="fold")
    table.add_column("Span", justify="right")
    table.add_column("Chars", justify="right")
    for c in chunks:
        table.add_row(escape(c.chunk_id), escape(f"[{c.start}, {c.end})"), str(len(c.text)))
    console.print(table)
