"""LumenTrail CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from lumentrail.cli.browse import chunks_cmd, items_cmd
from lumentrail.cli.ingest import ingest_cmd
from lumentrail.cli.init import init_cmd
from lumentrail.cli.search import explain_cmd, search_cmd
from lumentrail.cli.status import status_cmd
from lumentrail.cli.sync import connectors_cmd, sync_cmd
from lumentrail.cli.watch import watch_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("lumentrail")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"lumentrail {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="lumentrail",
    help=(
        "LumenTrail — local-first knowledge search with provenance.\n\n"
        "  lumentrail ingest   Index .txt / .md files.\n"
        "  lumentrail search   Find chunks by literal text.\n"
        "  lumentrail explain  Trace a chunk back to its source."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """LumenTrail — local-first knowledge search with provenance."""


app.command("init")(init_cmd)
app.command("ingest")(ingest_cmd)
app.command("sync")(sync_cmd)
app.command("connectors")(connectors_cmd)
app.command("search")(search_cmd)
app.command("explain")(explain_cmd)
app.command("items")(items_cmd)
app.command("chunks")(chunks_cmd)
app.command("watch")(watch_cmd)
app.command("status")(status_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed LumenTrail version."""
    typer.echo(f"lumentrail {_installed_version()}")


if __name__ == "__main__":
    app()
