"""Trash entry model.

A TrashEntry links an object stored under the trash root back to the
location it was trashed from. Entries are persisted one per line in the
trash index.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import PurePath
from typing import Any


@dataclass(frozen=True, slots=True)
class TrashEntry:
    """Record of one object in the trash.

    Attributes:
        id: Unique identifier, also the object's name under the trash root.
        original_path: Absolute path the object occupied before trashing.
        trashed_at: When the object was trashed (ISO 8601 with timezone).
        is_directory: True for directory trees, False for files and symlinks.
    """

    id: str
    original_path: str
    trashed_at: str
    is_directory: bool = False

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "Trash entry ID cannot be empty"
            raise ValueError(msg)
        if not PurePath(self.original_path).is_absolute():
            msg = f"Original path must be absolute: {self.original_path!r}"
            raise ValueError(msg)
        if not self.trashed_at:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)

    @property
    def name(self) -> str:
        """Base name of the original path."""
        return PurePath(self.original_path).name

    @property
    def trashed_at_dt(self) -> datetime:
        """Trash timestamp as an aware datetime."""
        return datetime.fromisoformat(self.trashed_at.replace("Z", "+00:00"))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "original_path": self.original_path,
            "trashed_at": self.trashed_at,
            "is_directory": self.is_directory,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrashEntry:
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing entry data.

        Returns:
            TrashEntry instance.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If field values are invalid.
        """
        is_directory = data.get("is_directory", False)
        if not isinstance(is_directory, bool):
            msg = f"is_directory must be a boolean, got {is_directory!r}"
            raise ValueError(msg)
        return cls(
            id=str(data["id"]),
            original_path=str(data["original_path"]),
            trashed_at=str(data["trashed_at"]),
            is_directory=is_directory,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> TrashEntry:
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        data = json.loads(line.strip())
        if not isinstance(data, dict):
            msg = f"Expected a JSON object, got {type(data).__name__}"
            raise ValueError(msg)
        return cls.from_dict(data)


def create_trash_entry(entry_id: str, original_path: str, is_directory: bool) -> TrashEntry:
    """Factory function to create a TrashEntry stamped with the current time.

    Args:
        entry_id: Identifier assigned by the path encoder.
        original_path: Absolute path the object was trashed from.
        is_directory: Whether the object is a directory tree.

    Returns:
        New TrashEntry with a UTC timestamp.
    """
    return TrashEntry(
        id=entry_id,
        original_path=original_path,
        trashed_at=datetime.now(UTC).isoformat(),
        is_directory=is_directory,
    )
