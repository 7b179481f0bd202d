"""Data models for Kudu VFS listings and command results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# VFS listing JSON field names
FIELD_NAME = "name"
FIELD_SIZE = "size"
FIELD_MTIME = "mtime"
FIELD_CRTIME = "crtime"
FIELD_MIME = "mime"
FIELD_HREF = "href"
FIELD_PATH = "path"

# Command response JSON field names
FIELD_OUTPUT = "Output"
FIELD_ERROR = "Error"
FIELD_EXIT_CODE = "ExitCode"

DIRECTORY_MIME = "inode/directory"


@dataclass
class VfsEntry:
    """Represents a single file or folder returned by a VFS folder listing."""

    name: str
    size: int
    mtime: str
    crtime: str
    mime: str
    href: str
    path: str

    @property
    def is_folder(self) -> bool:
        return self.mime == DIRECTORY_MIME

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> VfsEntry:
        """Map a raw listing item to a VfsEntry, tolerating missing or null fields."""
        return cls(
            name=raw.get(FIELD_NAME) or "",
            size=int(raw.get(FIELD_SIZE) or 0),
            mtime=raw.get(FIELD_MTIME) or "",
            crtime=raw.get(FIELD_CRTIME) or "",
            mime=raw.get(FIELD_MIME) or "",
            href=raw.get(FIELD_HREF) or "",
            path=raw.get(FIELD_PATH) or "",
        )


@dataclass
class CommandResult:
    """Output of a command executed on the remote host."""

    output: str
    error: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> CommandResult:
        return cls(
            output=raw.get(FIELD_OUTPUT) or "",
            error=raw.get(FIELD_ERROR) or "",
            exit_code=int(raw.get(FIELD_EXIT_CODE) or 0),
        )
