"""Aggregate file records into per-folder size totals."""

from __future__ import annotations

from collections import defaultdict
from pathlib import PurePath
from typing import TYPE_CHECKING

from .models import FolderTotal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import FileRecord


def parent_directory(path: str) -> str | None:
    """Return the directory containing ``path``, or None for degenerate paths.

    ``"/a/x.txt"`` gives ``"/a"``; ``"x.txt"``, ``"/"`` and ``""`` have no
    usable parent.
    """
    pure = PurePath(path)
    if not pure.name or pure.parent == PurePath("."):
        return None
    return str(pure.parent)


def summarize_by_folder(records: Iterable[FileRecord]) -> list[FolderTotal]:
    """Sum file sizes per parent directory.

    Args:
        records: Records to aggregate, e.g. a ``Scanner.results()`` snapshot.

    Returns:
        Totals sorted by descending size, ties broken by directory name.

    """
    totals: defaultdict[str, int] = defaultdict(int)
    for record in records:
        if (parent := parent_directory(record.path)) is not None:
            totals[parent] += record.size

    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [FolderTotal(directory, size) for directory, size in ordered]


def top_folders(records: Iterable[FileRecord], limit: int) -> list[FolderTotal]:
    """Return the ``limit`` largest folders."""
    if limit <= 0:
        return []
    return summarize_by_folder(records)[:limit]
