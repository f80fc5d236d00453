"""Paths that must never be moved to the trash.

Trashing the filesystem root, the home directory, or the trash root (or
any directory containing it) would either be catastrophic or move the
index into itself.
"""

from pathlib import Path


def protection_reason(path: Path, trash_root: Path) -> str | None:
    """Check whether a path is protected from trashing.

    Both arguments should be absolute. The trash root is compared after
    resolving symlinks so an aliased trash root is still caught.

    Args:
        path: Absolute path about to be trashed.
        trash_root: Trash root of the bin doing the trashing.

    Returns:
        Human-readable reason if protected, None otherwise.
    """
    if path == Path(path.anchor):
        return "the filesystem root cannot be trashed"

    if path == Path.home():
        return "the home directory cannot be trashed"

    if path.is_symlink():
        # Trashing a link only moves the link itself
        return None

    resolved = path.resolve()
    root = trash_root.resolve()
    if resolved == root:
        return "the trash root cannot be trashed"
    if root.is_relative_to(resolved):
        return f"it contains the trash root {trash_root}"
    if resolved.is_relative_to(root):
        return "it is already inside the trash root"

    return None
