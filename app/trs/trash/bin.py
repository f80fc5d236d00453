"""Trash bin operations.

A TrashBin is the handle every command works through: it owns the index
and the move engine of one trash root and runs trash, restore, and empty
as batches. Each item is processed under the index lock with interrupts
deferred, so an object and its index entry always change together.
Per-item failures are collected as results; only a corrupt or
unreachable index aborts a batch.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from trs.core.config import DEFAULT_LOCK_BACKOFF, DEFAULT_LOCK_RETRIES, TrsConfig
from trs.core.signals import deferred_interrupts
from trs.models.entry import TrashEntry, create_trash_entry
from trs.trash.encoder import unique_id
from trs.trash.errors import (
    EntryNotFoundError,
    FatalTrashError,
    IncompleteMoveError,
    ProtectedPathError,
    SourceNotFoundError,
    TrashError,
)
from trs.trash.index import TrashIndex
from trs.trash.mover import MoveEngine
from trs.trash.protected import protection_reason

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrashActionResult:
    """Result of a single trash, restore, or purge.

    Attributes:
        path: Path the operation was about (original location for trash
            and restore, original location or id for purge).
        success: Whether the operation completed successfully.
        entry_id: Trash entry id involved, if one was assigned or given.
        error: Error message if the operation failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing changed).
    """

    path: str
    success: bool
    entry_id: str | None = None
    error: str | None = None
    dry_run: bool = False


def absolute_path(path: str | Path) -> Path:
    """Make a path absolute without following a trailing symlink.

    The parent directory is resolved; the final component is kept as
    given so that trashing a symlink trashes the link, not its target.
    """
    path = Path(path).expanduser()
    absolute = Path(os.path.abspath(path))
    if absolute.parent == absolute:
        return absolute
    return absolute.parent.resolve() / absolute.name


class TrashBin:
    """Trash, restore, list, and empty for one trash root.

    Attributes:
        root: Trash root directory.
        index: Index of the trash root.
        mover: Move engine of the trash root.
    """

    def __init__(
        self,
        root: Path,
        *,
        index: TrashIndex | None = None,
        mover: MoveEngine | None = None,
        lock_retries: int = DEFAULT_LOCK_RETRIES,
        lock_backoff: float = DEFAULT_LOCK_BACKOFF,
    ) -> None:
        """Initialize the TrashBin.

        Args:
            root: Trash root directory. Created on first trash-in.
            index: Index to use. Defaults to the index inside root.
            mover: Move engine to use. Defaults to one moving into root.
            lock_retries: Index lock retries (only used for the default index).
            lock_backoff: Initial lock retry delay (only used for the default index).
        """
        self.root = root
        if index is None:
            index = TrashIndex(root, lock_retries=lock_retries, lock_backoff=lock_backoff)
        self.index = index
        self.mover = mover if mover is not None else MoveEngine(root)

    @classmethod
    def from_config(cls, config: TrsConfig, trash_dir: Path | None = None) -> TrashBin:
        """Create a TrashBin from user configuration.

        Args:
            config: Loaded configuration.
            trash_dir: Trash root override (e.g. from the command line).
        """
        return cls(
            config.effective_trash_dir(trash_dir),
            lock_retries=config.lock_retries,
            lock_backoff=config.lock_backoff_seconds,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def list(self) -> list[TrashEntry]:
        """Entries in the order they were trashed.

        Raises:
            CorruptIndexError: If the index cannot be parsed.
        """
        return self.index.list()

    def lookup(self, entry_id: str) -> TrashEntry | None:
        """Find an entry by id."""
        return self.index.lookup(entry_id)

    # =========================================================================
    # Trash-in
    # =========================================================================

    def trash(
        self, paths: Iterable[str | Path], *, dry_run: bool = False
    ) -> list[TrashActionResult]:
        """Move paths into the trash.

        Args:
            paths: Files, symlinks, or directories to trash.
            dry_run: Only report what would be trashed.

        Returns:
            One TrashActionResult per input path.

        Raises:
            FatalTrashError: If the index is corrupt or stays locked.
        """
        results: list[TrashActionResult] = []
        for path in paths:
            original = absolute_path(path)
            try:
                if dry_run:
                    self._check_trashable(original)
                    results.append(
                        TrashActionResult(path=str(original), success=True, dry_run=True)
                    )
                    continue
                entry = self.trash_one(original)
            except FatalTrashError:
                raise
            except (TrashError, OSError) as e:
                results.append(TrashActionResult(path=str(original), success=False, error=str(e)))
            else:
                results.append(
                    TrashActionResult(path=entry.original_path, success=True, entry_id=entry.id)
                )
        return results

    def trash_one(self, original: Path) -> TrashEntry:
        """Trash a single absolute path.

        The object is moved first and indexed second. If indexing fails
        the object is moved back.

        Returns:
            The new index entry.

        Raises:
            ProtectedPathError: If the path must not be trashed.
            SourceNotFoundError: If the path does not exist.
            IncompleteMoveError: If remnants were left at the original
                location (the complete copy is still indexed).
            TrashError: For other move or index failures.
        """
        self._check_trashable(original)
        is_directory = original.is_dir() and not original.is_symlink()

        with self.index.locked(), deferred_interrupts():
            taken = self.index.ids()
            entry_id = unique_id(
                original,
                lambda c: c in taken or os.path.lexists(self.mover.path_for(c)),
            )
            entry = create_trash_entry(entry_id, str(original), is_directory)

            try:
                trash_path = self.mover.trash_in(original, entry_id)
            except IncompleteMoveError:
                self.index.insert(entry)
                logger.warning("Trashed %s as %s with remnants left behind", original, entry_id)
                raise

            try:
                self.index.insert(entry)
            except (TrashError, OSError):
                logger.warning("Indexing %s failed, moving it back to %s", entry_id, original)
                try:
                    self.mover.restore_out(trash_path, original)
                except (TrashError, OSError) as rollback_error:
                    logger.error(
                        "Moving %s back failed, it stays unindexed at %s: %s",
                        original,
                        trash_path,
                        rollback_error,
                    )
                raise

        logger.info("Trashed %s as %s", original, entry_id)
        return entry

    def _check_trashable(self, original: Path) -> None:
        if not os.path.lexists(original):
            raise SourceNotFoundError(f"{original}: No such file or directory")
        reason = protection_reason(original, self.root)
        if reason is not None:
            raise ProtectedPathError(f"{original}: refusing to trash, {reason}")

    # =========================================================================
    # Restore
    # =========================================================================

    def restore(self, entry_ids: Iterable[str]) -> list[TrashActionResult]:
        """Move trashed objects back to their original locations.

        Args:
            entry_ids: Ids of the entries to restore.

        Returns:
            One TrashActionResult per id.

        Raises:
            FatalTrashError: If the index is corrupt or stays locked.
        """
        results: list[TrashActionResult] = []
        for entry_id in entry_ids:
            try:
                entry = self.restore_one(entry_id)
            except FatalTrashError:
                raise
            except (TrashError, OSError) as e:
                results.append(
                    TrashActionResult(path=entry_id, success=False, entry_id=entry_id, error=str(e))
                )
            else:
                results.append(
                    TrashActionResult(path=entry.original_path, success=True, entry_id=entry.id)
                )
        return results

    def restore_one(self, entry_id: str) -> TrashEntry:
        """Restore a single entry.

        The object is moved out first and unindexed second. If unindexing
        fails the object is moved back into the trash.

        Returns:
            The entry that was restored (no longer indexed).

        Raises:
            EntryNotFoundError: If the id is not indexed.
            RestoreTargetExistsError: If the original path is occupied.
            TrashError: For other move or index failures.
        """
        with self.index.locked(), deferred_interrupts():
            entry = self.index.lookup(entry_id)
            if entry is None:
                raise EntryNotFoundError(f"No trash entry with id {entry_id!r}")

            original = Path(entry.original_path)
            trash_path = self.mover.path_for(entry.id)
            try:
                self.mover.restore_out(trash_path, original)
            except IncompleteMoveError:
                self.index.remove(entry.id)
                logger.warning("Restored %s with remnants left in the trash root", original)
                raise

            try:
                self.index.remove(entry.id)
            except (TrashError, OSError):
                logger.warning("Unindexing %s failed, moving it back into the trash", entry.id)
                try:
                    self.mover.trash_in(original, entry.id)
                except (TrashError, OSError) as rollback_error:
                    logger.error(
                        "Moving %s back into the trash failed, entry %s is stale: %s",
                        original,
                        entry.id,
                        rollback_error,
                    )
                raise

        logger.info("Restored %s to %s", entry.id, original)
        return entry

    # =========================================================================
    # Empty
    # =========================================================================

    def empty(self, *, dry_run: bool = False) -> list[TrashActionResult]:
        """Permanently delete every trashed object and clear the index.

        Objects that are already missing count as purged and their stale
        entries are dropped. Entries whose object cannot be deleted stay
        indexed.

        Args:
            dry_run: Only report what would be deleted.

        Returns:
            One TrashActionResult per entry.

        Raises:
            FatalTrashError: If the index is corrupt or stays locked.
        """
        results: list[TrashActionResult] = []
        with self.index.locked():
            entries = self.index.list()
            if dry_run:
                return [
                    TrashActionResult(
                        path=e.original_path, success=True, entry_id=e.id, dry_run=True
                    )
                    for e in entries
                ]

            purged: list[str] = []
            try:
                for entry in entries:
                    # An interrupt surfaces only once the entry is marked purged
                    with deferred_interrupts():
                        results.append(self._purge_one(entry, purged))
            finally:
                if len(purged) == len(entries):
                    self.index.clear()
                else:
                    self.index.remove_many(purged)

            self.mover.sweep_staging()

        logger.info("Emptied trash: %d purged, %d failed", len(purged), len(entries) - len(purged))
        return results

    def _purge_one(self, entry: TrashEntry, purged: list[str]) -> TrashActionResult:
        """Delete one entry's object, appending its id to purged on success."""
        try:
            self.mover.delete(self.mover.path_for(entry.id))
        except SourceNotFoundError:
            logger.warning("Object for %s was already gone, dropping it", entry.id)
        except TrashError as e:
            return TrashActionResult(
                path=entry.original_path, success=False, entry_id=entry.id, error=str(e)
            )
        purged.append(entry.id)
        return TrashActionResult(path=entry.original_path, success=True, entry_id=entry.id)
