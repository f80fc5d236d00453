"""Filesystem relocation for trashed objects.

The MoveEngine moves objects into and out of the trash root and deletes
them for good. A move on one device is a single os.rename(). Across
devices the object is copied under a hidden staging name beside the
destination, the staging copy is renamed into place, and only then is
the source removed. A failed copy leaves the source untouched.

Staging copies of restores live beside the restore target, outside the
trash root, so sweep_staging() never sees them. A stale one is replaced
the next time the same object is moved across devices.
"""

import errno
import logging
import os
import shutil
from pathlib import Path

from trs.trash.errors import (
    DestinationExistsError,
    IncompleteMoveError,
    MoveError,
    PermissionDeniedError,
    RestoreTargetExistsError,
    SourceNotFoundError,
)

logger = logging.getLogger(__name__)

# Name prefix of in-flight copies during cross-device moves
STAGING_PREFIX = ".trs-partial-"


def _remove(path: Path) -> None:
    """Remove a file, symlink, or directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _describe(error: OSError, path: Path) -> str:
    reason = error.strerror or str(error)
    return f"{path}: {reason}"


class MoveEngine:
    """Moves objects between their original location and the trash root.

    Attributes:
        trash_root: Directory holding trashed objects.
    """

    def __init__(self, trash_root: Path) -> None:
        """Initialize the MoveEngine.

        Args:
            trash_root: Directory holding trashed objects. Created on first use.
        """
        self.trash_root = trash_root

    def path_for(self, entry_id: str) -> Path:
        """Location of an entry's object under the trash root."""
        return self.trash_root / entry_id

    def trash_in(self, original_path: Path, destination_id: str) -> Path:
        """Move an object into the trash root.

        Files, symlinks (as links), and whole directory trees are supported.

        Args:
            original_path: Absolute path of the object to trash.
            destination_id: Entry id naming the object under the trash root.

        Returns:
            Path of the object under the trash root.

        Raises:
            SourceNotFoundError: If original_path does not exist.
            PermissionDeniedError: If the source or trash root is not accessible.
            DestinationExistsError: If the trash path is already occupied.
            IncompleteMoveError: If a cross-device copy succeeded but the
                source could not be fully removed.
            MoveError: For any other filesystem failure.
        """
        if not os.path.lexists(original_path):
            raise SourceNotFoundError(f"{original_path}: No such file or directory")

        try:
            self.trash_root.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionDeniedError(_describe(e, self.trash_root)) from e
        except OSError as e:
            raise MoveError(_describe(e, self.trash_root)) from e

        trash_path = self.path_for(destination_id)
        if os.path.lexists(trash_path):
            raise DestinationExistsError(f"Trash path already occupied: {trash_path}")

        logger.debug("Moving %s into trash as %s", original_path, destination_id)
        self._relocate(original_path, trash_path)
        return trash_path

    def restore_out(self, trash_path: Path, original_path: Path) -> None:
        """Move a trashed object back to where it came from.

        Missing parent directories of original_path are created.

        Args:
            trash_path: Object under the trash root.
            original_path: Absolute path to restore to.

        Raises:
            SourceNotFoundError: If the trashed object is missing.
            RestoreTargetExistsError: If original_path is already occupied.
            PermissionDeniedError: If the target location is not writable.
            IncompleteMoveError: If a cross-device copy succeeded but the
                trashed object could not be fully removed.
            MoveError: For any other filesystem failure.
        """
        if not os.path.lexists(trash_path):
            raise SourceNotFoundError(f"{trash_path}: missing from the trash root")

        if os.path.lexists(original_path):
            raise RestoreTargetExistsError(
                f"{original_path}: already exists, refusing to overwrite"
            )

        try:
            original_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionDeniedError(_describe(e, original_path.parent)) from e
        except OSError as e:
            raise MoveError(_describe(e, original_path.parent)) from e

        logger.debug("Restoring %s to %s", trash_path.name, original_path)
        self._relocate(trash_path, original_path)

    def delete(self, trash_path: Path) -> None:
        """Permanently delete a trashed object.

        Irreversible. Only the empty operation calls this.

        Raises:
            SourceNotFoundError: If the object is already gone.
            PermissionDeniedError: If it cannot be removed.
            MoveError: For any other filesystem failure.
        """
        if not os.path.lexists(trash_path):
            raise SourceNotFoundError(f"{trash_path}: missing from the trash root")

        logger.debug("Deleting %s", trash_path)
        try:
            _remove(trash_path)
        except PermissionError as e:
            raise PermissionDeniedError(_describe(e, trash_path)) from e
        except OSError as e:
            raise MoveError(_describe(e, trash_path)) from e

    def sweep_staging(self) -> list[Path]:
        """Remove staging copies left behind by interrupted cross-device moves.

        Returns:
            The staging paths that were removed.
        """
        if not self.trash_root.is_dir():
            return []

        removed: list[Path] = []
        for path in self.trash_root.glob(f"{STAGING_PREFIX}*"):
            try:
                _remove(path)
            except OSError as e:
                logger.warning("Could not remove staging leftover %s: %s", path, e)
                continue
            logger.info("Removed staging leftover %s", path)
            removed.append(path)
        return removed

    def _relocate(self, source: Path, destination: Path) -> None:
        """Rename source to destination, copying across devices if needed."""
        try:
            os.rename(source, destination)
            return
        except FileNotFoundError as e:
            raise SourceNotFoundError(_describe(e, source)) from e
        except PermissionError as e:
            raise PermissionDeniedError(_describe(e, source)) from e
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise MoveError(_describe(e, source)) from e

        logger.debug("%s and %s are on different devices, copying", source, destination)
        self._copy_across(source, destination)

    def _copy_across(self, source: Path, destination: Path) -> None:
        """Copy-then-delete move between devices."""
        staging = destination.with_name(STAGING_PREFIX + destination.name)
        if os.path.lexists(staging):
            # Leftover of an earlier move of this object that never finished
            logger.warning("Removing stale partial copy %s", staging)
            try:
                _remove(staging)
            except OSError as e:
                raise MoveError(f"{staging}: could not remove stale partial copy: {e}") from e

        try:
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, staging, symlinks=True)
            else:
                shutil.copy2(source, staging, follow_symlinks=False)
            os.rename(staging, destination)
        except OSError as e:
            self._discard_staging(staging)
            if isinstance(e, PermissionError):
                raise PermissionDeniedError(_describe(e, source)) from e
            raise MoveError(f"{source}: copy to {destination} failed: {e}") from e

        try:
            _remove(source)
        except OSError as e:
            msg = (
                f"{source}: copied to {destination} but the original could not be "
                f"fully removed: {e.strerror or e}"
            )
            raise IncompleteMoveError(msg, destination) from e

    def _discard_staging(self, staging: Path) -> None:
        if not os.path.lexists(staging):
            return
        try:
            _remove(staging)
        except OSError as e:
            logger.warning("Could not remove partial copy %s: %s", staging, e)
