"""Persistent trash index.

The index maps entry ids to TrashEntry records. It lives next to the
trashed objects as a JSON Lines file and is the source of truth for
original locations.

Every read loads the whole file fresh; every mutation rewrites the whole
file atomically (temporary file in the same directory + os.replace()).
Mutations run under locked(), which serializes threads with an RLock and
processes with an advisory flock on a sibling lock file.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from tempfile import NamedTemporaryFile

from trs.models.entry import TrashEntry
from trs.trash.errors import (
    ConcurrentModificationError,
    CorruptIndexError,
    DuplicateIdError,
    EntryNotFoundError,
)

logger = logging.getLogger(__name__)

# Upper bound for a single backoff sleep
MAX_BACKOFF_SECONDS = 2.0


class TrashIndex:
    """Manages the trash index file of one trash root.

    Storage location: <trash root>/.index.jsonl

    Attributes:
        root: Trash root directory containing the index.
    """

    INDEX_FILENAME = ".index.jsonl"
    LOCK_FILENAME = ".index.lock"

    def __init__(
        self,
        root: Path,
        *,
        lock_retries: int = 10,
        lock_backoff: float = 0.05,
    ) -> None:
        """Initialize TrashIndex.

        Args:
            root: Trash root directory. Created on first mutation.
            lock_retries: Retries after losing the lock race to another process.
            lock_backoff: Initial delay between retries in seconds (doubles each time).
        """
        self.root = root
        self._lock_retries = lock_retries
        self._lock_backoff = lock_backoff
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._lock_fd: int | None = None

    @property
    def index_path(self) -> Path:
        """Path to the index file."""
        return self.root / self.INDEX_FILENAME

    @property
    def lock_path(self) -> Path:
        """Path to the advisory lock file."""
        return self.root / self.LOCK_FILENAME

    # =========================================================================
    # Locking
    # =========================================================================

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the index lock for a read-modify-write cycle.

        Reentrant: nested use from the same thread only takes the file
        lock once.

        Raises:
            ConcurrentModificationError: If another process holds the lock
                after all retries.
        """
        with self._thread_lock:
            if self._depth == 0:
                self._lock_fd = self._acquire_file_lock()
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0 and self._lock_fd is not None:
                    fcntl.flock(self._lock_fd, fcntl.LOCK_UN)
                    os.close(self._lock_fd)
                    self._lock_fd = None

    def _acquire_file_lock(self) -> int:
        """Take the advisory lock, retrying with exponential backoff.

        Returns:
            File descriptor holding the lock.

        Raises:
            ConcurrentModificationError: If the lock stays contended.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        delay = self._lock_backoff
        for attempt in range(self._lock_retries + 1):
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                if attempt == self._lock_retries:
                    break
                logger.debug(
                    "Index lock busy, retrying in %.2fs (attempt %d/%d)",
                    delay,
                    attempt + 1,
                    self._lock_retries,
                )
                time.sleep(delay)
                delay = min(delay * 2, MAX_BACKOFF_SECONDS)
            else:
                return fd

        os.close(fd)
        msg = (
            f"Trash index {self.index_path} is locked by another trs process "
            f"(gave up after {self._lock_retries} retries)"
        )
        raise ConcurrentModificationError(msg)

    # =========================================================================
    # Reading
    # =========================================================================

    def load(self) -> dict[str, TrashEntry]:
        """Read all entries from disk.

        Returns:
            Mapping of id to entry, in insertion order. Empty if the
            index file does not exist.

        Raises:
            CorruptIndexError: If any line fails to parse or an id repeats.
        """
        if not self.index_path.exists():
            return {}

        entries: dict[str, TrashEntry] = {}
        try:
            with self.index_path.open(encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entry = TrashEntry.from_json_line(line)
                    except (json.JSONDecodeError, KeyError, ValueError) as e:
                        raise self._corrupt(f"line {line_num}: {e}") from e
                    if entry.id in entries:
                        raise self._corrupt(f"line {line_num}: duplicate id {entry.id!r}")
                    entries[entry.id] = entry
        except UnicodeDecodeError as e:
            raise self._corrupt(f"not valid UTF-8: {e}") from e

        return entries

    def _corrupt(self, detail: str) -> CorruptIndexError:
        msg = (
            f"Trash index {self.index_path} is corrupt ({detail}). "
            f"Inspect the trash root {self.root} manually; trashed objects "
            "are stored there under their ids."
        )
        return CorruptIndexError(msg)

    def lookup(self, entry_id: str) -> TrashEntry | None:
        """Find an entry by id.

        Returns:
            TrashEntry if present, None otherwise.
        """
        return self.load().get(entry_id)

    def list(self) -> list[TrashEntry]:
        """All entries in the order they were trashed."""
        return list(self.load().values())

    def ids(self) -> set[str]:
        """Ids of all indexed entries."""
        return set(self.load())

    def __len__(self) -> int:
        return len(self.load())

    def __contains__(self, entry_id: object) -> bool:
        return isinstance(entry_id, str) and entry_id in self.load()

    # =========================================================================
    # Mutations
    # =========================================================================

    def insert(self, entry: TrashEntry) -> None:
        """Add an entry.

        Raises:
            DuplicateIdError: If the id is already indexed.
        """
        with self.locked():
            entries = self.load()
            if entry.id in entries:
                existing = entries[entry.id].original_path
                msg = f"Trash id {entry.id!r} is already indexed ({existing})"
                raise DuplicateIdError(msg)
            entries[entry.id] = entry
            self._write(entries.values())
        logger.debug("Indexed %s -> %s", entry.id, entry.original_path)

    def remove(self, entry_id: str) -> TrashEntry:
        """Remove an entry.

        Returns:
            The removed entry.

        Raises:
            EntryNotFoundError: If the id is not indexed.
        """
        with self.locked():
            entries = self.load()
            entry = entries.pop(entry_id, None)
            if entry is None:
                raise EntryNotFoundError(f"No trash entry with id {entry_id!r}")
            self._write(entries.values())
        logger.debug("Unindexed %s", entry_id)
        return entry

    def remove_many(self, entry_ids: Iterable[str]) -> list[TrashEntry]:
        """Remove several entries in a single rewrite.

        Ids that are not indexed are ignored.

        Returns:
            The entries that were removed.
        """
        wanted = set(entry_ids)
        with self.locked():
            entries = self.load()
            removed = [entries.pop(entry_id) for entry_id in list(entries) if entry_id in wanted]
            if removed:
                self._write(entries.values())
        return removed

    def clear(self) -> None:
        """Remove every entry."""
        with self.locked():
            self._write([])

    def _write(self, entries: Iterable[TrashEntry]) -> None:
        """Atomically replace the index file with the given entries.

        Raises:
            OSError: If the file cannot be written.
        """
        self.root.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.root,
                prefix=".index.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                for entry in entries:
                    f.write(entry.to_json_line() + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.index_path)
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise
