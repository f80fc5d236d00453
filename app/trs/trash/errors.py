"""Exceptions raised by the trash subsystem.

Per-item errors derive from TrashError and are collected per path by
TrashBin batch operations. FatalTrashError subclasses mean the index
itself is unusable and abort the whole invocation.
"""

from pathlib import Path


class TrashError(Exception):
    """Base exception for trash operations."""


class SourceNotFoundError(TrashError):
    """Raised when the object to move does not exist."""


class PermissionDeniedError(TrashError):
    """Raised when the filesystem refuses access to a path."""


class DestinationExistsError(TrashError):
    """Raised when the trash path for a new entry is already occupied."""


class RestoreTargetExistsError(TrashError):
    """Raised when something already occupies an entry's original path."""


class EntryNotFoundError(TrashError):
    """Raised when an id is not present in the trash index."""


class DuplicateIdError(TrashError):
    """Raised when inserting an id that is already indexed."""


class ProtectedPathError(TrashError):
    """Raised when asked to trash a path that must never be moved."""


class MoveError(TrashError):
    """Raised for filesystem failures not covered by a narrower error."""


class IncompleteMoveError(TrashError):
    """Raised when a cross-device move copied the object but left remnants.

    The copy under the trash root is complete; the original location
    could not be fully removed.

    Attributes:
        trash_path: Location of the complete copy under the trash root.
    """

    def __init__(self, message: str, trash_path: Path) -> None:
        super().__init__(message)
        self.trash_path = trash_path


class FatalTrashError(TrashError):
    """Base exception for errors that make the trash index unusable."""


class CorruptIndexError(FatalTrashError):
    """Raised when the index file cannot be parsed."""


class ConcurrentModificationError(FatalTrashError):
    """Raised when the index lock could not be acquired in time."""
