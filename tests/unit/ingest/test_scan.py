"""Tests for directory scanning and the polling watcher."""

from __future__ import annotations

import os
import threading

from lumentrail.ingest.scan import DEFAULT_IGNORED, DirectoryWatcher, scan_directory


def _touch(path, text="x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


# ------------------------------------------------------------------
# scan_directory
# ------------------------------------------------------------------

def test_scan_directory_recursive_sorted(tmp_path):
    _touch(tmp_path / "b.md")
    _touch(tmp_path / "a.txt")
    _touch(tmp_path / "sub" / "deep" / "c.pdf")
    files = scan_directory(tmp_path)
    assert [f.relative_to(tmp_path).as_posix() for f in files] == [
        "a.txt", "b.md", "sub/deep/c.pdf",
    ]


def test_scan_directory_single_file(tmp_path):
    f = _touch(tmp_path / "only.md")
    assert scan_directory(f) == [f]


def test_scan_directory_missing_path(tmp_path):
    assert scan_directory(tmp_path / "nope") == []


def test_scan_directory_exclude_files_and_dirs(tmp_path):
    _touch(tmp_path / "keep.md")
    _touch(tmp_path / "draft.tmp")
    _touch(tmp_path / "node_modules" / "pkg" / "readme.md")
    files = scan_directory(tmp_path, exclude=["*.tmp", "node_modules"])
    assert [f.name for f in files] == ["keep.md"]


def test_scan_directory_does_not_follow_symlinked_dirs(tmp_path):
    target = tmp_path / "real"
    _touch(target / "doc.md")
    (tmp_path / "link").symlink_to(target, target_is_directory=True)
    files = scan_directory(tmp_path)
    assert [f.relative_to(tmp_path).as_posix() for f in files] == ["real/doc.md"]


# ------------------------------------------------------------------
# DirectoryWatcher
# ------------------------------------------------------------------

def test_first_poll_primes_without_reporting(tmp_path):
    _touch(tmp_path / "existing.md")
    watcher = DirectoryWatcher(tmp_path)
    assert watcher.poll() == []


def test_poll_reports_added_files(tmp_path):
    watcher = DirectoryWatcher(tmp_path)
    watcher.poll()
    new = _touch(tmp_path / "new.md")
    assert watcher.poll() == [new]
    assert watcher.poll() == []


def test_poll_reports_modified_files(tmp_path):
    doc = _touch(tmp_path / "doc.md", "one")
    watcher = DirectoryWatcher(tmp_path)
    watcher.poll()
    doc.write_text("two, longer")
    st = doc.stat()
    os.utime(doc, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
    assert watcher.poll() == [doc]


def test_poll_ignores_default_patterns(tmp_path):
    watcher = DirectoryWatcher(tmp_path)
    watcher.poll()
    _touch(tmp_path / ".git" / "HEAD")
    _touch(tmp_path / "data" / "lumentrail.db")
    _touch(tmp_path / ".DS_Store")
    kept = _touch(tmp_path / "notes" / "a.md")
    assert watcher.poll() == [kept]
    assert ".git" in DEFAULT_IGNORED


def test_poll_does_not_report_deletions(tmp_path):
    doc = _touch(tmp_path / "gone.md")
    watcher = DirectoryWatcher(tmp_path)
    watcher.poll()
    doc.unlink()
    assert watcher.poll() == []


def test_watch_stops_after_max_polls(tmp_path):
    watcher = DirectoryWatcher(tmp_path)
    assert list(watcher.watch(interval=0.01, max_polls=2)) == []


def test_watch_yields_changes_and_honours_stop_event(tmp_path):
    watcher = DirectoryWatcher(tmp_path)
    stop = threading.Event()
    seen = []
    gen = watcher.watch(interval=0.01, stop=stop)
    new = _touch(tmp_path / "late.md")
    for path in gen:
        seen.append(path)
        stop.set()
    assert seen == [new]
