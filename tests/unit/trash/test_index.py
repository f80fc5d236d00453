"""Unit tests for the trash index.

Tests for persistence, locking, and corruption handling of TrashIndex.
"""

import fcntl
import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest
from trs.models.entry import TrashEntry
from trs.trash.errors import (
    ConcurrentModificationError,
    CorruptIndexError,
    DuplicateIdError,
    EntryNotFoundError,
)
from trs.trash.index import TrashIndex


def make_entry(entry_id: str, path: str = "/tmp/x") -> TrashEntry:
    return TrashEntry(id=entry_id, original_path=path, trashed_at="2026-03-01T12:30:00+00:00")


@pytest.fixture
def index(trash_root: Path) -> TrashIndex:
    return TrashIndex(trash_root, lock_retries=0)


class TestReading:
    """Tests for loading the index."""

    def test_missing_file_is_empty(self, index: TrashIndex) -> None:
        """A fresh trash root has no entries."""
        assert index.list() == []
        assert len(index) == 0

    def test_blank_lines_ignored(self, index: TrashIndex, trash_root: Path) -> None:
        """Empty lines between records are skipped."""
        trash_root.mkdir()
        index.index_path.write_text(
            make_entry("a-1").to_json_line() + "\n\n" + make_entry("b-2").to_json_line() + "\n"
        )
        assert [e.id for e in index.list()] == ["a-1", "b-2"]

    def test_lookup(self, index: TrashIndex) -> None:
        index.insert(make_entry("a-1", "/data/a"))
        found = index.lookup("a-1")
        assert found is not None
        assert found.original_path == "/data/a"
        assert index.lookup("missing") is None

    def test_contains(self, index: TrashIndex) -> None:
        index.insert(make_entry("a-1"))
        assert "a-1" in index
        assert "b-2" not in index
        assert 42 not in index


class TestCorruption:
    """Tests for corrupt index files."""

    def test_invalid_json(self, index: TrashIndex, trash_root: Path) -> None:
        """Garbage lines raise CorruptIndexError with the line number."""
        trash_root.mkdir()
        index.index_path.write_text(make_entry("a-1").to_json_line() + "\n{broken\n")

        with pytest.raises(CorruptIndexError, match="line 2"):
            index.list()

    def test_missing_field(self, index: TrashIndex, trash_root: Path) -> None:
        trash_root.mkdir()
        index.index_path.write_text('{"id": "a-1"}\n')

        with pytest.raises(CorruptIndexError):
            index.list()

    def test_duplicate_id(self, index: TrashIndex, trash_root: Path) -> None:
        """The same id on two lines is corruption."""
        trash_root.mkdir()
        line = make_entry("a-1").to_json_line()
        index.index_path.write_text(f"{line}\n{line}\n")

        with pytest.raises(CorruptIndexError, match="duplicate id"):
            index.list()

    def test_invalid_utf8(self, index: TrashIndex, trash_root: Path) -> None:
        trash_root.mkdir()
        index.index_path.write_bytes(b"\xff\xfe\x00garbage\n")

        with pytest.raises(CorruptIndexError, match="UTF-8"):
            index.list()

    def test_message_points_to_trash_root(self, index: TrashIndex, trash_root: Path) -> None:
        """The error tells the user where to look."""
        trash_root.mkdir()
        index.index_path.write_text("nope\n")

        with pytest.raises(CorruptIndexError, match="manually"):
            index.list()

    def test_mutation_refused_on_corrupt_index(self, index: TrashIndex, trash_root: Path) -> None:
        """A corrupt index is never overwritten."""
        trash_root.mkdir()
        index.index_path.write_text("nope\n")

        with pytest.raises(CorruptIndexError):
            index.insert(make_entry("a-1"))

        assert index.index_path.read_text() == "nope\n"


class TestMutations:
    """Tests for insert, remove, and clear."""

    def test_insert_persists(self, index: TrashIndex, trash_root: Path) -> None:
        """Inserted entries are visible to a fresh instance."""
        index.insert(make_entry("a-1"))
        index.insert(make_entry("b-2"))

        assert [e.id for e in TrashIndex(trash_root).list()] == ["a-1", "b-2"]

    def test_insert_duplicate(self, index: TrashIndex) -> None:
        index.insert(make_entry("a-1"))
        with pytest.raises(DuplicateIdError):
            index.insert(make_entry("a-1"))
        assert len(index) == 1

    def test_remove(self, index: TrashIndex) -> None:
        index.insert(make_entry("a-1"))
        index.insert(make_entry("b-2"))

        removed = index.remove("a-1")

        assert removed.id == "a-1"
        assert index.ids() == {"b-2"}

    def test_remove_missing(self, index: TrashIndex) -> None:
        with pytest.raises(EntryNotFoundError):
            index.remove("missing")

    def test_remove_many(self, index: TrashIndex) -> None:
        """Unknown ids are ignored; order of the rest is kept."""
        for entry_id in ("a-1", "b-2", "c-3"):
            index.insert(make_entry(entry_id))

        removed = index.remove_many(["c-3", "a-1", "zzz"])

        assert [e.id for e in removed] == ["a-1", "c-3"]
        assert [e.id for e in index.list()] == ["b-2"]

    def test_clear(self, index: TrashIndex) -> None:
        index.insert(make_entry("a-1"))
        index.clear()
        assert index.list() == []
        assert index.index_path.exists()

    def test_no_temp_files_left(self, index: TrashIndex, trash_root: Path) -> None:
        """Atomic rewrites leave no temporary files behind."""
        index.insert(make_entry("a-1"))
        index.remove("a-1")

        assert not list(trash_root.glob(".index.*.tmp"))

    def test_failed_write_keeps_old_index(self, index: TrashIndex, trash_root: Path) -> None:
        """If the rename fails the previous index stays intact."""
        index.insert(make_entry("a-1"))
        before = index.index_path.read_text()

        with (
            patch("trs.trash.index.os.replace", side_effect=OSError("disk full")),
            pytest.raises(OSError, match="disk full"),
        ):
            index.insert(make_entry("b-2"))

        assert index.index_path.read_text() == before
        assert not list(trash_root.glob(".index.*.tmp"))


class TestLocking:
    """Tests for inter-process and inter-thread locking."""

    def test_lock_file_created(self, index: TrashIndex) -> None:
        with index.locked():
            assert index.lock_path.exists()

    def test_reentrant(self, index: TrashIndex) -> None:
        """Nested locked() blocks in one thread do not deadlock."""
        with index.locked(), index.locked():
            index.insert(make_entry("a-1"))
        assert "a-1" in index

    def test_contended_lock_raises(self, index: TrashIndex, trash_root: Path) -> None:
        """A lock held by another process raises after the retries."""
        trash_root.mkdir()
        fd = os.open(index.lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            with pytest.raises(ConcurrentModificationError, match="locked"):
                index.insert(make_entry("a-1"))
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

        assert index.list() == []

    def test_retries_with_backoff(self, trash_root: Path) -> None:
        """Contention is retried the configured number of times."""
        index = TrashIndex(trash_root, lock_retries=3, lock_backoff=0.01)
        trash_root.mkdir()
        fd = os.open(index.lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            with (
                patch("trs.trash.index.time.sleep") as mock_sleep,
                pytest.raises(ConcurrentModificationError),
            ):
                index.clear()
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

        assert [call.args[0] for call in mock_sleep.call_args_list] == [0.01, 0.02, 0.04]

    def test_lock_released_after_block(self, index: TrashIndex, trash_root: Path) -> None:
        """Another descriptor can lock once the block is left."""
        with index.locked():
            pass

        fd = os.open(index.lock_path, os.O_RDWR)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        finally:
            os.close(fd)

    def test_concurrent_threads(self, trash_root: Path) -> None:
        """Parallel inserts from threads are all persisted."""
        index = TrashIndex(trash_root, lock_retries=50, lock_backoff=0.001)
        errors: list[Exception] = []

        def worker(n: int) -> None:
            try:
                for i in range(10):
                    index.insert(make_entry(f"t{n}-{i}"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(index) == 40
