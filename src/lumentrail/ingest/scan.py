"""File discovery: one-shot directory scan and a polling directory watcher.

Both only produce paths. Deciding whether a path is ingestible is the
orchestrator's job (see ingest_file / ingest_paths).
"""

from __future__ import annotations

import fnmatch
import threading
import time
from pathlib import Path
from typing import Iterable, Iterator

DEFAULT_IGNORED: tuple[str, ...] = (".git", "node_modules", ".DS_Store", "data")


def scan_directory(root: Path | str, exclude: Iterable[str] = ()) -> list[Path]:
    """Return every regular file under *root*, recursively, in sorted order.

    A file path yields itself. Entries whose name matches any glob in
    *exclude* are skipped (directories are not descended). Symlinked
    directories are not followed; unreadable directories are skipped.
    """
    patterns = tuple(exclude)
    p = Path(root)
    if p.is_file():
        return [p]
    if not p.is_dir():
        return []
    return _scan_dir(p, patterns)


def _scan_dir(directory: Path, exclude: tuple[str, ...]) -> list[Path]:
    files: list[Path] = []
    try:
        entries = sorted(directory.iterdir())
    except PermissionError:
        return []
    for entry in entries:
        if _matches(entry.name, exclude):
            continue
        if entry.is_file():
            files.append(entry)
        elif entry.is_dir() and not entry.is_symlink():
            files.extend(_scan_dir(entry, exclude))
    return files


def _matches(name: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatch(name, pat) for pat in patterns)


class DirectoryWatcher:
    """Poll a directory tree and report files that were added or modified.

    The first ``poll()`` records the current state and reports nothing, so
    files already present are not re-announced. Deletions are not reported.
    """

    def __init__(self, root: Path | str, ignore: Iterable[str] = DEFAULT_IGNORED) -> None:
        self.root = Path(root)
        self.ignore = tuple(ignore)
        self._snapshot: dict[Path, tuple[int, int]] | None = None

    def poll(self) -> list[Path]:
        """Return paths added or changed since the previous poll, sorted."""
        current = self._take_snapshot()
        previous = self._snapshot
        self._snapshot = current
        if previous is None:
            return []
        return sorted(path for path, sig in current.items() if previous.get(path) != sig)

    def watch(
        self,
        interval: float = 1.0,
        stop: threading.Event | None = None,
        max_polls: int | None = None,
    ) -> Iterator[Path]:
        """Return an iterator of changed paths, ending when *stop* is set or
        *max_polls* polls have run.

        Primes the snapshot before the first wait, so only changes made after
        the call are yielded.
        """
        if self._snapshot is None:
            self.poll()
        return self._watch(interval, stop, max_polls)

    def _watch(
        self,
        interval: float,
        stop: threading.Event | None,
        max_polls: int | None,
    ) -> Iterator[Path]:
        polls = 0
        while max_polls is None or polls < max_polls:
            if stop is not None:
                if stop.wait(interval):
                    return
            else:
                time.sleep(interval)
            polls += 1
            yield from self.poll()

    def _take_snapshot(self) -> dict[Path, tuple[int, int]]:
        snapshot: dict[Path, tuple[int, int]] = {}
        for path in scan_directory(self.root, exclude=self.ignore):
            try:
                st = path.stat()
            except OSError:
                continue
            snapshot[path] = (st.st_mtime_ns, st.st_size)
        return snapshot
