"""Trash subsystem: entry ids, the persistent index, moves, and the bin.

This package provides the path encoder, the trash index, the move engine,
and the TrashBin handle tying them together for one trash root.
"""

from trs.trash.bin import TrashActionResult, TrashBin, absolute_path
from trs.trash.encoder import encode, unique_id
from trs.trash.errors import (
    ConcurrentModificationError,
    CorruptIndexError,
    DestinationExistsError,
    DuplicateIdError,
    EntryNotFoundError,
    FatalTrashError,
    IncompleteMoveError,
    MoveError,
    PermissionDeniedError,
    ProtectedPathError,
    RestoreTargetExistsError,
    SourceNotFoundError,
    TrashError,
)
from trs.trash.index import TrashIndex
from trs.trash.mover import MoveEngine

__all__ = [
    "ConcurrentModificationError",
    "CorruptIndexError",
    "DestinationExistsError",
    "DuplicateIdError",
    "EntryNotFoundError",
    "FatalTrashError",
    "IncompleteMoveError",
    "MoveEngine",
    "MoveError",
    "PermissionDeniedError",
    "ProtectedPathError",
    "RestoreTargetExistsError",
    "SourceNotFoundError",
    "TrashActionResult",
    "TrashBin",
    "TrashError",
    "TrashIndex",
    "absolute_path",
    "encode",
    "unique_id",
]
