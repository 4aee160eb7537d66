"""lumentrail search / explain — lexical search and chunk provenance."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lumentrail.cli.common import load_cli_config, open_repo, resolve_db
from lumentrail.cli.errors import err_chunk_not_found, err_storage
from lumentrail.db.store import StorageError
from lumentrail.search.engine import search
from lumentrail.search.explain import explain

console = Console()

_PREVIEW_CHARS = 160


def search_cmd(
    query: Annotated[str, typer.Argument(help="Literal text to search for.")],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Maximum number of results."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print results as JSON."),
    ] = False,
) -> None:
    """Search chunk text for QUERY, ranked by occurrence count."""
    cfg = load_cli_config(console)
    query = query.strip()
    n = limit if limit is not None else cfg.search.limit

    if not query:
        if as_json:
            console.print_json(data={"query": query, "results": []})
        else:
            console.print("[yellow]Empty query — nothing to search.[/]")
        return

    conn, repo = open_repo(resolve_db(db, cfg), console)
    try:
        results = search(repo, query, limit=n)
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    if as_json:
        console.print_json(data={"query": query, "results": [r.to_dict() for r in results]})
        return

    if not results:
        console.print(f"[yellow]No results for[/] '{escape(query)}'.")
        return

    table = Table(title=f"Results for '{escape(query)}'")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Chunk ID", style="cyan", overflow="fold")
    table.add_column("Text")
    for r in results:
        table.add_row(str(r.score), escape(r.chunk_id), escape(_preview(r.text)))
    console.print(table)


def explain_cmd(
    chunk_id: Annotated[str, typer.Argument(help="Chunk id from a search result.")],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON."),
    ] = False,
) -> None:
    """Show where a chunk came from: its text, item title, timestamp and metadata."""
    cfg = load_cli_config(console)
    chunk_id = chunk_id.strip()

    conn, repo = open_repo(resolve_db(db, cfg), console)
    try:
        result = explain(repo, chunk_id)
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    if result is None:
        console.print(err_chunk_not_found(chunk_id))
        raise typer.Exit(1)

    if as_json:
        console.print_json(data={"ok": True, "result": result.to_dict()})
        return

    lines = [
        f"Title:      [bold]{escape(result.title)}[/]",
        f"Item:       {escape(result.item_id)}",
        f"Timestamp:  {escape(result.timestamp or '—')}",
        f"Metadata:   {escape(_pretty_metadata(result.metadata))}",
        "",
        escape(result.text),
    ]
    console.print(Panel("\n".join(lines), title=f"[bold]{escape(result.chunk_id)}[/]", expand=False))


def _preview(text: str) -> str:
    flat = " ".join(text.split())
    if len(flat) <= _PREVIEW_CHARS:
        return flat
    return flat[: _PREVIEW_CHARS - 1] + "…"


def _pretty_metadata(raw: str | None) -> str:
    if not raw:
        return "{}"
    try:
        return json.dumps(json.loads(raw), sort_keys=True)
    except json.JSONDecodeError:
        return raw
