"""Human-readable formatting helpers."""

from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(num: int) -> str:
    """Format a byte count using binary multiples, e.g. ``1536`` -> ``"1.50 KB"``."""
    if num < 1024:
        return f"{num} B"
    value = float(num)
    for unit in _UNITS[1:]:
        value /= 1024.0
        if value < 1024.0 or unit == _UNITS[-1]:
            return f"{value:.2f} {unit}"
    return f"{value:.2f} {_UNITS[-1]}"
