"""Scan lifecycle and shared scan state."""

from __future__ import annotations

import dataclasses
import logging
import os
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from .models import FileRecord, ScanProgress
from .path_filter import PathFilter
from .walker import DEFAULT_BATCH_SIZE, TraversalPool

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .config import InventoryConfig


class ScanState:
    """Lock-guarded aggregate shared between the scanner and its workers.

    Every method holds the lock only long enough to copy or update fields.
    Cancellation is a separate event so workers can poll it without locking.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._records: list[FileRecord] = []
        self._progress = ScanProgress()
        self._roots: tuple[Path, ...] = ()

    def begin(self, roots: tuple[Path, ...]) -> bool:
        """Reset for a new traversal unless one is already running.

        Returns:
            True if the traversal was admitted, False if one is running.

        """
        with self._lock:
            if self._progress.running:
                return False
            self._roots = roots
            self._records.clear()
            self._cancel.clear()
            self._progress = ScanProgress(running=True, started_at=time.time())
            return True

    def add(self, record: FileRecord) -> None:
        with self._lock:
            self._records.append(record)
            self._progress.scanned_files += 1
            self._progress.scanned_bytes += record.size
            self._progress.current_path = record.path

    def record_skipped(self) -> None:
        with self._lock:
            self._progress.skipped_entries += 1

    def finish(self) -> None:
        with self._lock:
            self._progress.running = False
            self._progress.current_path = None
            self._progress.finished_at = time.time()

    def request_cancel(self) -> None:
        self._cancel.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._progress.running

    @property
    def roots(self) -> tuple[Path, ...]:
        with self._lock:
            return self._roots

    def snapshot(self) -> ScanProgress:
        with self._lock:
            return dataclasses.replace(self._progress)

    def records(self) -> list[FileRecord]:
        with self._lock:
            return list(self._records)


class Scanner:
    """Runs at most one background traversal and reports on it.

    ``start`` hands the traversal to a background thread and returns at once.
    ``status``, ``results`` and ``cancel`` may be called from any thread at
    any time; none of them waits for the traversal.
    """

    def __init__(
        self,
        config: InventoryConfig | None = None,
        *,
        path_filter: PathFilter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            config: Inventory configuration. Defaults are used if None.
            path_filter: Protected-location policy. Built from the environment
                and the configuration if None.
            logger: Logger instance. Uses the "disk-inventory" logger if None.

        """
        self.config = config
        self.logger = logger or logging.getLogger("disk-inventory")

        if path_filter is None:
            path_filter = self._build_filter(config)
        self.path_filter = path_filter

        self._state = ScanState()
        self._thread: threading.Thread | None = None

    @staticmethod
    def _build_filter(config: InventoryConfig | None) -> PathFilter:
        if config is None:
            return PathFilter.from_environment()
        if config.protect_system_paths:
            return PathFilter.from_environment(extra=config.extra_protected_paths)
        return PathFilter(config.extra_protected_paths)

    def start(self, roots: Iterable[str | os.PathLike[str]]) -> None:
        """Start a background traversal of ``roots``.

        Does nothing if a traversal is already running.
        """
        resolved = tuple(Path(os.path.abspath(os.path.expanduser(root))) for root in roots)

        if not self._state.begin(resolved):
            self.logger.debug("Scan already running, ignoring start request")
            return

        pool = TraversalPool(
            self._state,
            self.path_filter,
            max_workers=self.config.max_workers if self.config else None,
            batch_size=self.config.batch_size if self.config else DEFAULT_BATCH_SIZE,
            logger=self.logger,
        )
        self._thread = threading.Thread(
            target=self._run,
            args=(pool, resolved),
            name="disk-inventory-scan",
            daemon=True,
        )
        self.logger.info("Starting scan of %d root(s)", len(resolved))
        self._thread.start()

    def _run(self, pool: TraversalPool, roots: tuple[Path, ...]) -> None:
        pool.run(roots)
        progress = self._state.snapshot()
        self.logger.info(
            "Scan %s: %d files, %d bytes, %d skipped",
            "cancelled" if self._state.cancel_requested else "finished",
            progress.scanned_files,
            progress.scanned_bytes,
            progress.skipped_entries,
        )

    def status(self) -> ScanProgress:
        """Return a copy of the current progress."""
        return self._state.snapshot()

    def results(self) -> list[FileRecord]:
        """Return a copy of the records collected so far."""
        return self._state.records()

    def cancel(self) -> None:
        """Ask the running traversal to stop. Returns without waiting."""
        if self._state.running:
            self.logger.info("Scan cancellation requested")
        self._state.request_cancel()

    @property
    def is_running(self) -> bool:
        return self._state.running

    @property
    def roots(self) -> tuple[Path, ...]:
        """Roots of the current or most recent traversal."""
        return self._state.roots

    def wait(self, timeout: float | None = None) -> bool:
        """Block the caller until the background traversal ends.

        Args:
            timeout: Maximum time to wait in seconds.

        Returns:
            True if no traversal is running afterwards.

        """
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self._state.running
