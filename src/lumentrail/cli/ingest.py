"""lumentrail ingest — index local files into the store.

Each --path is a file or a directory (scanned recursively). Only .txt and
.md files are ingested; every other file is counted as skipped. Re-ingesting
a file replaces its item and its chunks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from lumentrail.cli.common import load_cli_config, open_repo, resolve_db
from lumentrail.cli.errors import err_no_path, err_path_not_found, err_storage, warn_skipped
from lumentrail.db.store import StorageError
from lumentrail.ingest.orchestrator import IngestionError, IngestResult, ingest_paths
from lumentrail.ingest.scan import scan_directory

console = Console()


def ingest_cmd(
    path: Annotated[
        list[Path] | None,
        typer.Option("--path", "-p", help="File or directory to ingest (repeatable)."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database (created if missing)."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", help="Glob pattern to exclude (repeatable)."),
    ] = None,
) -> None:
    """Ingest files or directories into the LumenTrail store."""
    paths = path or []
    excludes = exclude or []

    if not paths:
        console.print(err_no_path())
        raise typer.Exit(1)

    for p in paths:
        if not p.exists():
            console.print(err_path_not_found(str(p)))
            raise typer.Exit(1)

    cfg = load_cli_config(console)
    files = [f for p in paths for f in scan_directory(p, exclude=excludes)]

    if not files:
        console.print("[yellow]No files found to ingest.[/]")
        raise typer.Exit(0)

    conn, repo = open_repo(resolve_db(db, cfg), console, create=True)
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            transient=True,
            console=console,
        ) as prog:
            task = prog.add_task("Ingesting…", total=len(files))

            def _show(f: Path, outcome: IngestResult | IngestionError) -> None:
                if isinstance(outcome, IngestionError):
                    prog.console.print(f"  [dim]↷ {f.name}: {outcome}[/]")
                else:
                    prog.console.print(
                        f"  [green]✓[/] {f.name} [dim]({outcome.chunk_count} chunks)[/]"
                    )
                prog.advance(task)

            report = ingest_paths(
                repo,
                files,
                max_length=cfg.chunker.max_length,
                overlap=cfg.chunker.overlap,
                on_result=_show,
            )
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    console.print(
        f"\n[bold]Indexed:[/] {report.indexed}  |  [bold]Skipped:[/] {report.skipped}"
    )
    if report.skipped:
        console.print(warn_skipped(report.skipped))
