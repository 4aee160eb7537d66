"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from lumentrail.db.connection import Database
from lumentrail.db.repository import Repository
from lumentrail.db.schema import initialize


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / "lumentrail.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def repo(tmp_db):
    return Repository(tmp_db)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep user config and LUMENTRAIL_DB_PATH out of every test."""
    monkeypatch.delenv("LUMENTRAIL_DB_PATH", raising=False)
    monkeypatch.setattr("lumentrail.config._GLOBAL_CONFIG_PATH", tmp_path / "global-config.yaml")
