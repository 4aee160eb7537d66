"""lumentrail watch — keep the store in sync with a directory.

Polls PATH every --interval seconds and ingests files that were added or
modified since the previous poll. Files already present when the watch
starts are not re-ingested; run `lumentrail ingest` for that.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from lumentrail.cli.common import load_cli_config, open_repo, resolve_db
from lumentrail.cli.errors import err_path_not_found, err_storage
from lumentrail.db.store import StorageError
from lumentrail.ingest.orchestrator import IngestionError, UnsupportedExtension, ingest_file
from lumentrail.ingest.scan import DirectoryWatcher

console = Console()


def watch_cmd(
    path: Annotated[Path, typer.Argument(help="Directory to watch.")],
    interval: Annotated[
        float | None,
        typer.Option("--interval", min=0.01, help="Seconds between polls."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database (created if missing)."),
    ] = None,
    max_polls: Annotated[
        int | None,
        typer.Option("--max-polls", hidden=True, help="Stop after N polls (for testing)."),
    ] = None,
) -> None:
    """Watch PATH and ingest files as they are added or changed."""
    if not path.is_dir():
        console.print(err_path_not_found(str(path)))
        raise typer.Exit(1)

    cfg = load_cli_config(console)
    watcher = DirectoryWatcher(path, ignore=cfg.watch.ignore)
    every = interval if interval is not None else cfg.watch.interval

    conn, repo = open_repo(resolve_db(db, cfg), console, create=True)
    console.print(f"[bold]Watching[/] {path} [dim](every {every:g}s, Ctrl+C to stop)[/]")
    indexed = 0
    try:
        for changed in watcher.watch(interval=every, max_polls=max_polls):
            try:
                result = ingest_file(
                    repo,
                    changed,
                    max_length=cfg.chunker.max_length,
                    overlap=cfg.chunker.overlap,
                )
            except UnsupportedExtension:
                continue
            except IngestionError as exc:
                console.print(f"  [red]✗[/] {changed}: {exc}")
                continue
            indexed += 1
            console.print(f"  [green]✓[/] {changed} [dim]({result.chunk_count} chunks)[/]")
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/]")
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    console.print(f"[bold]Indexed:[/] {indexed}")
