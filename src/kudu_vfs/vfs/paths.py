"""Canonical VFS path construction.

Every path sent to the Kudu VFS endpoints passes through ``normalize``. A
canonical path starts with exactly one slash and ends with a slash if and only
if it addresses a folder. The ``FilePath`` and ``FolderPath`` types carry that
distinction so downstream code never reshapes a path by hand.
"""

from __future__ import annotations

ROOT = "/"


class InvalidPathError(ValueError):
    """Raised when a file path is empty after trimming slashes."""


class FilePath(str):
    """Canonical path of a remote file (no trailing slash)."""

    __slots__ = ()


class FolderPath(str):
    """Canonical path of a remote folder (always ends with a slash)."""

    __slots__ = ()


def normalize(raw_path: str, is_folder: bool) -> str:
    """Convert a caller-supplied path into a canonical VFS path.

    Leading and trailing slashes are stripped before the canonical form is
    rebuilt. Doubled slashes inside the path are passed through unchanged.

    Args:
        raw_path: Logical path, with or without surrounding slashes.
        is_folder: True when the path addresses a folder.

    Returns:
        The canonical path string.

    Raises:
        InvalidPathError: If the path is empty and ``is_folder`` is False.
    """
    trimmed = raw_path.strip("/")
    if not trimmed:
        if is_folder:
            return ROOT
        raise InvalidPathError("a file path cannot be empty")
    if is_folder:
        return f"/{trimmed}/"
    return f"/{trimmed}"


def file_path(raw_path: str) -> FilePath:
    """Return the canonical ``FilePath`` for ``raw_path``."""
    return FilePath(normalize(raw_path, is_folder=False))


def folder_path(raw_path: str) -> FolderPath:
    """Return the canonical ``FolderPath`` for ``raw_path``."""
    return FolderPath(normalize(raw_path, is_folder=True))
