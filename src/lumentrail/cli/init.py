"""lumentrail init — create the database and a starter lumentrail.yaml.

Creates (inside DIR, default: current directory):
  lumentrail.yaml      — project config (store / chunker / search / watch)
  data/lumentrail.db   — empty store with schema migrated

and ~/.lumentrail/config.yaml with global defaults when it does not exist.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from lumentrail.cli.errors import err_storage
from lumentrail.config import DEFAULT_DB_PATH, PROJECT_CONFIG_NAME, ensure_global_config
from lumentrail.db.connection import Database
from lumentrail.db.schema import initialize
from lumentrail.db.store import StorageError
from lumentrail.ingest.chunker import DEFAULT_MAX_LENGTH, DEFAULT_OVERLAP
from lumentrail.ingest.scan import DEFAULT_IGNORED
from lumentrail.search.engine import DEFAULT_LIMIT

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
) -> None:
    """Initialize a LumenTrail project: config file and empty database."""
    project_dir = project_dir.resolve()
    project_dir.mkdir(parents=True, exist_ok=True)

    cfg_path = project_dir / PROJECT_CONFIG_NAME
    if cfg_path.exists():
        console.print(f"  [dim]↷ {PROJECT_CONFIG_NAME} already exists — kept[/]")
    else:
        cfg_path.write_text(_starter_yaml(), encoding="utf-8")
        console.print(f"  [green]✓[/] {PROJECT_CONFIG_NAME}")

    db_path = project_dir / DEFAULT_DB_PATH
    existed = db_path.exists()
    try:
        with Database(db_path) as conn:
            initialize(conn)
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    if existed:
        console.print(f"  [dim]↷ {DEFAULT_DB_PATH} already exists — schema up to date[/]")
    else:
        console.print(f"  [green]✓[/] {DEFAULT_DB_PATH}")

    global_cfg = ensure_global_config()
    console.print(f"  [green]✓[/] {global_cfg} (global config)")

    console.print(f"\n[bold green]✓ LumenTrail initialized in {project_dir}[/]")
    console.print("  Next:  lumentrail ingest --path <dir>   or   lumentrail sync")


def _starter_yaml() -> str:
    ignore = "\n".join(f"    - \"{pat}\"" for pat in DEFAULT_IGNORED)
    return (
        "# LumenTrail project configuration.\n"
        "# LUMENTRAIL_DB_PATH overrides store.path.\n"
        "\n"
        "store:\n"
        f"  path: {DEFAULT_DB_PATH}\n"
        "\n"
        "chunker:\n"
        f"  max_length: {DEFAULT_MAX_LENGTH}\n"
        f"  overlap: {DEFAULT_OVERLAP}\n"
        "\n"
        "search:\n"
        f"  limit: {DEFAULT_LIMIT}\n"
        "\n"
        "watch:\n"
        "  interval: 1.0\n"
        "  ignore:\n"
        f"{ignore}\n"
    )
