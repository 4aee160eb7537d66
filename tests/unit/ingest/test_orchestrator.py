"""Tests for the ingestion orchestrator."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from lumentrail.db.store import StorageError
from lumentrail.ingest.orchestrator import (
    BatchReport,
    IngestionError,
    IngestRecord,
    UnsupportedExtension,
    file_item_id,
    ingest_file,
    ingest_paths,
    ingest_record,
)


def _record(id="notion:page:strategy", content="LumenTrail strategy: unify knowledge.", **kw):
    return IngestRecord(
        id=id,
        source=kw.pop("source", "notion"),
        title=kw.pop("title", "Strategy Doc"),
        content=content,
        **kw,
    )


# ------------------------------------------------------------------
# ingest_record
# ------------------------------------------------------------------

def test_ingest_record_writes_item_and_chunks(repo):
    result = ingest_record(repo, _record(author="cara", metadata={"page": "strategy"}))
    assert result.ok is True
    assert result.item_id == "notion:page:strategy"
    assert result.chunk_count == 1

    item = repo.get_item("notion:page:strategy")
    assert item.author == "cara"
    assert item.metadata == {"page": "strategy"}
    chunks = repo.list_chunks("notion:page:strategy")
    assert [c.chunk_id for c in chunks] == ["notion:page:strategy:chunk:0"]


def test_ingest_record_accepts_mapping(repo):
    result = ingest_record(
        repo,
        {
            "id": "slack:dm:design:2",
            "source": "slack",
            "title": "DM / design sync",
            "content": "Design sync: emphasize provenance.",
            "author": "ben",
            "metadata": {"dm": True},
        },
    )
    assert result.item_id == "slack:dm:design:2"
    assert repo.get_item("slack:dm:design:2").metadata == {"dm": True}


def test_ingest_record_mapping_missing_fields():
    with pytest.raises(IngestionError, match="content"):
        IngestRecord.from_dict({"id": "x", "source": "files", "title": "t"})


def test_ingest_record_unknown_source(repo):
    with pytest.raises(IngestionError, match="Unknown source"):
        ingest_record(repo, _record(source="email"))
    assert repo.count_items() == 0


def test_ingest_record_empty_id(repo):
    with pytest.raises(IngestionError):
        ingest_record(repo, _record(id=""))


def test_ingest_record_chunk_indices_dense_and_ordered(repo):
    content = "\n\n".join(f"Paragraph {n}. " + "text " * 120 for n in range(8))
    result = ingest_record(repo, _record(content=content))
    chunks = repo.list_chunks(result.item_id, limit=100)
    assert len(chunks) == result.chunk_count > 1
    assert [c.chunk_id for c in chunks] == [
        f"notion:page:strategy:chunk:{i}" for i in range(result.chunk_count)
    ]
    starts = [c.start for c in chunks]
    assert starts == sorted(starts)


def test_ingest_blank_content_creates_item_without_chunks(repo):
    result = ingest_record(repo, _record(content="   \n  "))
    assert result.chunk_count == 0
    assert repo.get_item(result.item_id) is not None
    assert repo.count_chunks(result.item_id) == 0


def test_ingest_twice_keeps_one_item_with_second_content(repo):
    ingest_record(repo, _record(content="first version"))
    ingest_record(repo, _record(content="second version"))
    assert repo.count_items() == 1
    assert repo.get_item("notion:page:strategy").content == "second version"
    chunks = repo.list_chunks("notion:page:strategy")
    assert [c.text for c in chunks] == ["second version"]


def test_reingest_with_fewer_chunks_removes_stale_chunks(repo):
    long_content = "y" * 3000
    assert ingest_record(repo, _record(content=long_content)).chunk_count == 3
    ingest_record(repo, _record(content="short now"))
    chunks = repo.list_chunks("notion:page:strategy")
    assert [c.chunk_id for c in chunks] == ["notion:page:strategy:chunk:0"]
    assert repo.find_by_substring("yyyy", 10) == []


def test_ingest_is_idempotent(repo):
    record = _record(content="z" * 2500, timestamp="2024-05-01T00:00:00+00:00")
    ingest_record(repo, record)
    first = repo.list_chunks(record.id)
    ingest_record(repo, record)
    assert repo.list_chunks(record.id) == first
    assert repo.count_items() == 1


def test_ingest_uses_chunker_settings(repo):
    result = ingest_record(repo, _record(content="q" * 1000), max_length=400, overlap=50)
    assert result.chunk_count == 3


def test_failed_chunk_write_leaves_no_item(repo):
    with patch.object(repo, "upsert_chunks", side_effect=sqlite3.OperationalError("disk full")):
        with pytest.raises(StorageError):
            ingest_record(repo, _record())
    assert repo.get_item("notion:page:strategy") is None
    assert repo.count_chunks() == 0


def test_failed_reingest_keeps_previous_version(repo):
    ingest_record(repo, _record(content="original text"))
    with patch.object(repo, "upsert_chunks", side_effect=sqlite3.OperationalError("disk full")):
        with pytest.raises(StorageError):
            ingest_record(repo, _record(content="replacement"))
    assert repo.get_item("notion:page:strategy").content == "original text"
    assert [c.text for c in repo.list_chunks("notion:page:strategy")] == ["original text"]


# ------------------------------------------------------------------
# ingest_file
# ------------------------------------------------------------------

def test_ingest_file_builds_files_item(repo, tmp_path):
    doc = tmp_path / "notes.md"
    doc.write_text("Alpha line.\n\nBeta line about alpha and Alpha again.", encoding="utf-8")

    result = ingest_file(repo, doc)

    item = repo.get_item(result.item_id)
    assert result.item_id == f"files:{doc.resolve()}"
    assert item.source == "files"
    assert item.title == "notes.md"
    assert item.metadata == {"path": str(doc.resolve()), "size": doc.stat().st_size}
    assert datetime.fromisoformat(item.timestamp).tzinfo is not None


def test_ingest_file_uppercase_extension_supported(repo, tmp_path):
    doc = tmp_path / "README.TXT"
    doc.write_text("upper case extension")
    assert ingest_file(repo, doc).chunk_count == 1


def test_ingest_file_unsupported_extension_checked_before_read(repo, tmp_path):
    missing = tmp_path / "does-not-exist.pdf"
    with pytest.raises(UnsupportedExtension) as info:
        ingest_file(repo, missing)
    assert info.value.extension == ".pdf"
    assert repo.count_items() == 0


def test_ingest_file_unreadable(repo, tmp_path):
    with pytest.raises(IngestionError, match="Cannot read"):
        ingest_file(repo, tmp_path / "missing.txt")


def test_ingest_file_same_path_overwrites(repo, tmp_path):
    doc = tmp_path / "a.txt"
    doc.write_text("one")
    ingest_file(repo, doc)
    doc.write_text("two")
    ingest_file(repo, doc)
    assert repo.count_items() == 1
    assert repo.get_item(file_item_id(doc)).content == "two"


def test_ingest_file_relative_and_absolute_paths_share_id(repo, tmp_path, monkeypatch):
    doc = tmp_path / "a.txt"
    doc.write_text("same file")
    monkeypatch.chdir(tmp_path)
    assert ingest_file(repo, Path("a.txt")).item_id == ingest_file(repo, doc).item_id


def test_ingest_file_invalid_utf8_replaced(repo, tmp_path):
    doc = tmp_path / "latin1.txt"
    doc.write_bytes(b"caf\xe9 au lait")
    result = ingest_file(repo, doc)
    assert "au lait" in repo.get_item(result.item_id).content


# ------------------------------------------------------------------
# ingest_paths
# ------------------------------------------------------------------

def test_ingest_paths_counts_indexed_and_skipped(repo, tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("alpha")
    (docs / "b.txt").write_text("beta")
    (docs / "c.pdf").write_bytes(b"%PDF")
    report = ingest_paths(repo, sorted(docs.iterdir()))
    assert isinstance(report, BatchReport)
    assert (report.indexed, report.skipped, report.total) == (2, 1, 3)
    assert report.failures[0][0].endswith("c.pdf")


def test_ingest_paths_reports_each_outcome(repo, tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("alpha")
    (docs / "c.pdf").write_bytes(b"%PDF")
    seen = []
    ingest_paths(
        repo,
        [docs / "a.md", str(docs / "c.pdf")],
        on_result=lambda path, outcome: seen.append((path.name, type(outcome).__name__)),
    )
    assert seen == [("a.md", "IngestResult"), ("c.pdf", "UnsupportedExtension")]


def test_ingest_paths_storage_error_aborts(repo, tmp_path):
    (tmp_path / "a.md").write_text("alpha")
    with patch.object(repo, "upsert_item", side_effect=sqlite3.OperationalError("locked")):
        with pytest.raises(StorageError):
            ingest_paths(repo, [tmp_path / "a.md"])


def test_metadata_serialized_in_store(repo, tmp_db):
    ingest_record(repo, _record(metadata={"page": "strategy"}))
    raw = tmp_db.execute("SELECT metadata FROM items").fetchone()[0]
    assert json.loads(raw) == {"page": "strategy"}
