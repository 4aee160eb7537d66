"""Helpers shared by the CLI commands: config + database resolution."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import typer
from rich.console import Console

from lumentrail.cli.errors import err_config, err_no_db, err_storage
from lumentrail.config import ConfigError, LumenTrailConfig, load_config
from lumentrail.db.connection import Database
from lumentrail.db.repository import Repository
from lumentrail.db.schema import initialize
from lumentrail.db.store import StorageError


def load_cli_config(console: Console) -> LumenTrailConfig:
    """Load config for the current directory, exiting 1 on invalid values."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)


def resolve_db(db: Path | None, cfg: LumenTrailConfig) -> Path:
    """--db flag wins over configuration."""
    return db if db is not None else cfg.db_path


def open_repo(
    db_path: Path, console: Console, *, create: bool = False
) -> tuple[sqlite3.Connection, Repository]:
    """Open (or, with *create*, create) the database and run migrations.

    Exits 1 with an actionable message when the database is missing and
    *create* is False, or when the file is not a usable SQLite database.
    The caller closes the returned connection.
    """
    if not create and not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)
    try:
        conn = Database(db_path).connect()
    except StorageError as exc:
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    try:
        initialize(conn)
    except StorageError as exc:
        conn.close()
        console.print(err_storage(str(exc)))
        raise typer.Exit(1)
    return conn, Repository(conn)
