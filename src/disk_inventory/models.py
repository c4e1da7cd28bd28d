"""Data types shared by the scanner, the worker pool and the summarizer."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, NamedTuple


def _epoch_seconds(value: float | None) -> int:
    """Convert a stat timestamp to whole seconds, 0 when missing or pre-epoch."""
    if value is None or value < 0:
        return 0
    return int(value)


def extension_of(name: str) -> str:
    """Return the extension of a file name without the leading dot."""
    return os.path.splitext(name)[1][1:]


@dataclass(frozen=True)
class FileRecord:
    """Immutable metadata snapshot of one discovered file."""

    path: str
    size: int
    modified: int = 0
    accessed: int = 0
    created: int = 0
    extension: str = ""

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> FileRecord:
        """Build a record from a path and its (non-following) stat result.

        The creation time comes from ``st_birthtime``, which Windows, macOS and
        the BSDs report. Linux does not expose it through ``os.stat``, so
        ``created`` is 0 there.
        """
        return cls(
            path=path,
            size=max(int(st.st_size), 0),
            modified=_epoch_seconds(st.st_mtime),
            accessed=_epoch_seconds(st.st_atime),
            created=_epoch_seconds(getattr(st, "st_birthtime", None)),
            extension=extension_of(os.path.basename(path)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the consumer-facing field names."""
        return {
            "path": self.path,
            "size": self.size,
            "modified": self.modified,
            "accessed": self.accessed,
            "created": self.created,
            "ext": self.extension,
        }


@dataclass
class ScanProgress:
    """Point-in-time copy of a traversal's progress."""

    running: bool = False
    scanned_files: int = 0
    scanned_bytes: int = 0
    current_path: str | None = None
    skipped_entries: int = 0
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def elapsed(self) -> float | None:
        """Seconds between start and finish, or None until the traversal ends."""
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class FolderTotal(NamedTuple):
    """Total size of the files directly inside one directory."""

    directory: str
    size: int
