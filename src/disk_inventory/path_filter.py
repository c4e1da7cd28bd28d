"""Protected-location policy for filesystem traversal."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import PurePath

# Environment variables naming system and program directories
PROTECTED_LOCATION_HINTS: tuple[str, ...] = ("WINDIR", "ProgramFiles", "ProgramFiles(x86)")


def _normalize(path: str | os.PathLike[str]) -> PurePath:
    return PurePath(os.path.normcase(os.path.abspath(path)))


def is_within(path: str | os.PathLike[str], parent: str | os.PathLike[str]) -> bool:
    """Check whether ``path`` equals ``parent`` or lies beneath it.

    Comparison is component-wise, so ``/data2`` is not within ``/data``.
    """
    return _normalize(path).is_relative_to(_normalize(parent))


class PathFilter:
    """Answers whether a path belongs to a protected location.

    The filter knows nothing about the roots of a particular scan. Letting an
    explicitly requested root override protection is up to the traversal.
    """

    def __init__(self, protected: Iterable[str | os.PathLike[str]] = ()) -> None:
        """Initialize the filter.

        Args:
            protected: Locations that should not be scanned.

        """
        self._protected: tuple[PurePath, ...] = tuple(
            dict.fromkeys(_normalize(p) for p in protected if str(p))
        )

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        extra: Iterable[str | os.PathLike[str]] = (),
    ) -> PathFilter:
        """Build a filter from the platform's system-directory hints.

        Args:
            environ: Environment to read hints from. Uses ``os.environ`` if None.
            extra: Additional locations to protect.

        Returns:
            Filter protecting every hinted location that is set, plus ``extra``.

        """
        if environ is None:
            environ = os.environ
        hinted = [environ[name] for name in PROTECTED_LOCATION_HINTS if environ.get(name)]
        return cls([*hinted, *extra])

    @property
    def protected(self) -> tuple[PurePath, ...]:
        return self._protected

    def should_skip(self, path: str | os.PathLike[str]) -> bool:
        """Check if ``path`` is equal to or nested under a protected location."""
        if not self._protected:
            return False
        candidate = _normalize(path)
        return any(candidate.is_relative_to(location) for location in self._protected)

    def __repr__(self) -> str:
        return f"PathFilter({[str(p) for p in self._protected]!r})"
