"""Concurrent traversal of scan roots.

Discovery walks each root depth-first on the calling thread without following
symbolic links. Non-directory entries are handed to a thread pool in batches,
where their metadata is read and recorded into the shared scan state. Roots
are traversed one after another; entries within a root are processed in
parallel, so the order of recorded files is unspecified.
"""

from __future__ import annotations

import logging
import os
import stat
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING

from .models import FileRecord
from .path_filter import PathFilter, is_within

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

    from .scanner import ScanState

DEFAULT_BATCH_SIZE = 256


def read_file_record(entry: os.DirEntry[str]) -> FileRecord | None:
    """Read the metadata of a directory entry.

    Returns:
        The record, or None when the metadata could not be read (permission
        denied, entry removed mid-walk). Callers drop such entries.

    """
    try:
        st = entry.stat(follow_symlinks=False)
    except OSError:
        return None
    return FileRecord.from_stat(entry.path, st)


class TraversalPool:
    """Walks scan roots and funnels file records into a ``ScanState``."""

    def __init__(
        self,
        state: ScanState,
        path_filter: PathFilter,
        *,
        max_workers: int | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the pool.

        Args:
            state: Shared state receiving records and progress.
            path_filter: Protected-location policy.
            max_workers: Worker thread count. Executor default if None.
            batch_size: Entries handed to a worker per task.
            logger: Logger instance. Uses the "disk-inventory" logger if None.

        """
        self.state = state
        self.path_filter = path_filter
        self.max_workers = max_workers
        self.batch_size = max(1, batch_size)
        # Same worker count ThreadPoolExecutor picks when max_workers is None
        workers = max_workers or min(32, (os.cpu_count() or 1) + 4)
        self.max_pending = 2 * workers
        self.logger = logger or logging.getLogger("disk-inventory")

    def run(self, roots: Sequence[Path]) -> None:
        """Traverse every root, then mark the scan as finished.

        The scan state is finished exactly once, whether the traversal
        completes, is cancelled, or fails unexpectedly.
        """
        try:
            with ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="disk-inventory-worker",
            ) as executor:
                for root in roots:
                    if self.state.cancel_requested:
                        self.logger.debug("Cancelled before root: %s", root)
                        break
                    self._traverse_root(executor, root, roots)
        finally:
            self.state.finish()

    def is_excluded(self, path: str, roots: Sequence[Path]) -> bool:
        """Check whether a path falls in a protected location it may not enter.

        Requested roots override protection: a protected path is scanned when
        it is equal to or beneath any of them.
        """
        if not self.path_filter.should_skip(path):
            return False
        return not any(is_within(path, root) for root in roots)

    def _traverse_root(
        self,
        executor: ThreadPoolExecutor,
        root: Path,
        roots: Sequence[Path],
    ) -> None:
        # Root symlinks are followed; nothing below the root is.
        try:
            root_stat = root.stat()
        except OSError as e:
            self.logger.warning("Cannot access root %s: %s", root, e)
            return

        if stat.S_ISREG(root_stat.st_mode):
            self.state.add(FileRecord.from_stat(str(root), root_stat))
            return
        if not stat.S_ISDIR(root_stat.st_mode):
            return

        self.logger.debug("Traversing root: %s", root)
        pending: set[Future[None]] = set()
        batch: list[os.DirEntry[str]] = []

        for entry in self._discover(root, roots):
            batch.append(entry)
            if len(batch) >= self.batch_size:
                pending.add(executor.submit(self._process_batch, batch, roots))
                batch = []
                # Discovery waits for workers instead of queueing the whole tree
                if len(pending) > self.max_pending:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    self._report_failures(done, root)
        if batch:
            pending.add(executor.submit(self._process_batch, batch, roots))

        done, _ = wait(pending)
        self._report_failures(done, root)

    def _report_failures(self, done: set[Future[None]], root: Path) -> None:
        for future in done:
            if error := future.exception():
                self.logger.error("Worker failed under %s", root, exc_info=error)

    def _discover(self, root: Path, roots: Sequence[Path]) -> Iterator[os.DirEntry[str]]:
        """Yield every non-directory entry below ``root``, pruning protected subtrees."""
        stack: list[str] = [str(root)]

        while stack:
            if self.state.cancel_requested:
                return

            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except OSError as e:
                self.logger.debug("Cannot list %s: %s", directory, e)
                continue

            subdirs: list[str] = []
            for entry in entries:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    continue

                if not is_dir:
                    yield entry
                elif self.is_excluded(entry.path, roots):
                    self.logger.debug("Skipping protected directory: %s", entry.path)
                else:
                    subdirs.append(entry.path)

            # Reversed so the first subdirectory is walked first
            stack.extend(reversed(subdirs))

    def _process_batch(self, entries: list[os.DirEntry[str]], roots: Sequence[Path]) -> None:
        for entry in entries:
            if self.state.cancel_requested:
                return

            if self.is_excluded(entry.path, roots):
                continue

            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError:
                self.state.record_skipped()
                continue

            record = read_file_record(entry)
            if record is None:
                self.logger.debug("Could not read metadata: %s", entry.path)
                self.state.record_skipped()
                continue

            self.state.add(record)
