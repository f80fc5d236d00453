"""Trash entry identifiers.

Turns an absolute source path into a name that is safe to use as a
single directory entry under the trash root:

    <basename>-<first 12 hex chars of sha256(absolute path)>

The basename keeps listings readable; the digest keeps distinct paths
with the same basename apart. Trashing the same path again yields the
same base id, so a numeric suffix (-1, -2, ...) disambiguates.
"""

import hashlib
import os
from collections.abc import Callable
from pathlib import PurePath

# Upper bound for the basename part, in UTF-8 bytes
MAX_NAME_BYTES = 64

HASH_LENGTH = 12

# Used when nothing printable survives sanitizing
FALLBACK_NAME = "item"


def sanitize_name(name: str) -> str:
    """Make a basename safe for use inside a trash entry id.

    Path separators and NUL become underscores. Leading dots are stripped
    because dot-names under the trash root belong to the index. The result
    is truncated to MAX_NAME_BYTES without splitting a character.

    Args:
        name: Basename of the source path.

    Returns:
        Sanitized, non-empty name.
    """
    for sep in (os.sep, os.altsep, "\0"):
        if sep:
            name = name.replace(sep, "_")
    name = name.lstrip(".")
    encoded = name.encode("utf-8", errors="surrogateescape")[:MAX_NAME_BYTES]
    name = encoded.decode("utf-8", errors="ignore")
    return name or FALLBACK_NAME


def encode(original_path: str | PurePath) -> str:
    """Compute the base id for an absolute path.

    Deterministic: the same path always yields the same base id.

    Args:
        original_path: Absolute path of the object being trashed.

    Returns:
        Base identifier without a disambiguation suffix.

    Raises:
        ValueError: If the path is relative.
    """
    path = PurePath(original_path)
    if not path.is_absolute():
        msg = f"Cannot encode relative path: {original_path}"
        raise ValueError(msg)
    digest = hashlib.sha256(os.fsencode(str(path))).hexdigest()[:HASH_LENGTH]
    return f"{sanitize_name(path.name)}-{digest}"


def unique_id(original_path: str | PurePath, is_taken: Callable[[str], bool]) -> str:
    """Compute an id for a path that is not taken yet.

    Args:
        original_path: Absolute path of the object being trashed.
        is_taken: Predicate telling whether a candidate id is in use.

    Returns:
        The base id if free, else the base id with the lowest free suffix.
    """
    base = encode(original_path)
    if not is_taken(base):
        return base
    counter = 1
    while is_taken(f"{base}-{counter}"):
        counter += 1
    return f"{base}-{counter}"
