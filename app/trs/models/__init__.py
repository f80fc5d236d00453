"""Data models for trs."""

from trs.models.entry import TrashEntry, create_trash_entry

__all__ = ["TrashEntry", "create_trash_entry"]
