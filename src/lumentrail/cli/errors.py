"""LumenTrail rich error messages: cause plus action.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from lumentrail.cli.errors import err_no_db
    console.print(err_no_db(str(db)))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_db(db_path: str = "data/lumentrail.db") -> str:
    """No database at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  lumentrail init  or  lumentrail ingest --path <dir>"
    )


def err_no_path() -> str:
    """`lumentrail ingest` called without --path."""
    return (
        "[red]Error:[/] No --path specified.\n"
        "  Use:  lumentrail ingest --path <file-or-directory>"
    )


def err_path_not_found(path: str) -> str:
    """Ingest/watch target does not exist."""
    return (
        f"[red]Error:[/] Path not found: '{path}'\n"
        "  Use an existing file or directory."
    )


def err_storage(detail: str) -> str:
    """The SQLite store failed; the in-flight write was rolled back."""
    return (
        f"[red]Error:[/] Storage failure — the operation was rolled back.\n"
        f"  {detail}\n"
        "  Check disk space and permissions, then re-run the command."
    )


def err_config(detail: str) -> str:
    """Configuration file contains an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {detail}\n"
        "  Fix the value in lumentrail.yaml or ~/.lumentrail/config.yaml and re-run."
    )


def err_chunk_not_found(chunk_id: str) -> str:
    """explain: no chunk with that id."""
    return (
        f"[yellow]Chunk not found:[/] '{chunk_id}'\n"
        "  Run:  lumentrail search <query>  to list valid chunk ids."
    )


def err_unknown_connector(connector_id: str, known: list[str]) -> str:
    """sync: connector id not in the registry."""
    return (
        f"[red]Error:[/] Unknown connector '{connector_id}'.\n"
        f"  Known connectors: {', '.join(known) if known else '(none)'}\n"
        "  Run:  lumentrail connectors"
    )


def err_connector_failed(connector_id: str, detail: str) -> str:
    """sync: connector reported connected=False."""
    return (
        f"[red]Error:[/] Connector '{connector_id}' failed: {detail}\n"
        "  Re-run:  lumentrail sync --connector " + connector_id
    )


def warn_skipped(count: int) -> str:
    """Batch ingestion skipped some files."""
    return (
        f"[yellow]⚠[/] {count} file(s) skipped.\n"
        "  Only .txt and .md files are ingested; use --exclude to silence others."
    )
