"""LumenTrail database layer."""

from lumentrail.db.connection import Database
from lumentrail.db.migrations import MIGRATIONS, run_migrations
from lumentrail.db.repository import Repository
from lumentrail.db.schema import initialize
from lumentrail.db.store import StorageError, Store

__all__ = [
    "Database",
    "Repository",
    "Store",
    "StorageError",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
