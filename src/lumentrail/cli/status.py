"""lumentrail status — database location and what it holds."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel

from lumentrail.cli.common import load_cli_config, open_repo, resolve_db
from lumentrail.cli.errors import err_storage
from lumentrail.db.schema import schema_version
from lumentrail.db.store import StorageError

console = Console()


def status_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
) -> None:
    """Show database path, schema version, and item/chunk counts per source."""
    cfg = load_cli_config(console)
    db_path = resolve_db(db, cfg)

    if not db_path.exists():
        console.print(
            Panel(
                f"Database:  {db_path} [yellow]✗ missing[/]\n"
                "  Run:  lumentrail init",
                title="[bold]LumenTrail[/]",
                expand=False,
            )
        )
        return

    conn, repo = open_repo(db_path, console)
    try:
        version = schema_version(conn)
        by_source = repo.count_items_by_source()
        total_items = repo.count_items()
        total_chunks = repo.count_chunks()
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    size_mb = db_path.stat().st_size / (1024 * 1024)
    lines = [
        f"Database:  {db_path} ({size_mb:.1f} MB, schema v{version})",
        f"Items: [bold]{total_items:,}[/]  |  Chunks: [bold]{total_chunks:,}[/]",
        f"Chunker:   {cfg.chunker.max_length} chars, {cfg.chunker.overlap} overlap",
    ]
    if by_source:
        lines.append("")
        lines.extend(f"  {source:<8} {n:>6,} items" for source, n in by_source.items())
    console.print(Panel("\n".join(lines), title="[bold]LumenTrail[/]", expand=False))
