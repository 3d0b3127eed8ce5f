"""Thread-safe cache of parsed Go files keyed by absolute path.

An entry stays valid while the file's modification time is not after the
time recorded when it was parsed. Stale entries are reparsed and replaced
lazily on the next lookup; there is no other eviction besides ``clear`` and
``remove``.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

from goinspect.parsing.treesitter import GoParser, SourceFile

log = structlog.get_logger(__name__)


class ReadWriteLock:
    """Many readers or a single writer. Writers are preferred once waiting."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ParseCache:
    """Cache of :class:`SourceFile` entries, one per absolute path."""

    def __init__(self, parser: GoParser | None = None) -> None:
        self._parser = parser or GoParser()
        self._files: dict[Path, SourceFile] = {}
        self._lock = ReadWriteLock()

    def get_or_parse(self, path: Path | str) -> SourceFile:
        """Return the cached entry for path, parsing it if missing or stale.

        Raises:
            TargetError: If the file does not exist.
            ParseError: If the file cannot be read or produces no tree.
        """
        abs_path = Path(os.path.abspath(path))

        with self._lock.read_locked():
            cached = self._files.get(abs_path)

        if cached is not None:
            try:
                current_mtime = os.stat(abs_path).st_mtime_ns
            except OSError:
                current_mtime = None
            if current_mtime is not None and current_mtime <= cached.mtime_ns:
                log.debug("parse_cache_hit", path=str(abs_path))
                return cached
            log.debug("parse_cache_stale", path=str(abs_path))
        else:
            log.debug("parse_cache_miss", path=str(abs_path))

        parsed = self._parser.parse_path(abs_path)

        with self._lock.write_locked():
            self._files[abs_path] = parsed

        if parsed.has_errors:
            log.info("parse_partial_tree", path=str(abs_path), issues=len(parsed.issues))
        return parsed

    def clear(self) -> None:
        """Remove all cached files."""
        with self._lock.write_locked():
            self._files = {}

    def remove(self, path: Path | str) -> None:
        """Remove a specific file from the cache."""
        with self._lock.write_locked():
            self._files.pop(Path(os.path.abspath(path)), None)

    def stats(self) -> dict[str, Any]:
        """Return information about the cache state."""
        with self._lock.read_locked():
            files = sorted(str(p) for p in self._files)
        return {"cached_files": len(files), "files": files}

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock.read_locked():
            return Path(os.path.abspath(path)) in self._files
