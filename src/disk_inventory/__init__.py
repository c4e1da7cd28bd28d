"""Background filesystem inventory with per-folder size summaries."""

from __future__ import annotations

from .models import FileRecord, FolderTotal, ScanProgress
from .path_filter import PathFilter
from .scanner import Scanner
from .summary import summarize_by_folder

__all__ = [
    "FileRecord",
    "FolderTotal",
    "PathFilter",
    "ScanProgress",
    "Scanner",
    "summarize_by_folder",
]
