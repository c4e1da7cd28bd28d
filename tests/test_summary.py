"""Tests for per-folder summaries."""

from __future__ import annotations

import pytest

from disk_inventory.models import FileRecord
from disk_inventory.summary import parent_directory, summarize_by_folder, top_folders


def _records(*pairs: tuple[str, int]) -> list[FileRecord]:
    return [FileRecord(path=path, size=size) for path, size in pairs]


class TestParentDirectory:
    """Tests for parent extraction."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/a/x.txt", "/a"),
            ("/a/b/c/x.txt", "/a/b/c"),
            ("/x.txt", "/"),
            ("x.txt", None),
            ("/", None),
            ("", None),
        ],
    )
    def test_parent_directory(self, path: str, expected: str | None) -> None:
        """Test parent extraction, including degenerate paths."""
        assert parent_directory(path) == expected


class TestSummarizeByFolder:
    """Tests for summarize_by_folder."""

    def test_groups_and_sorts_descending(self) -> None:
        """Test the documented example."""
        records = _records(("/a/x.txt", 10), ("/a/y.txt", 5), ("/b/z.txt", 20))

        assert summarize_by_folder(records) == [("/b", 20), ("/a", 15)]

    def test_empty_input(self) -> None:
        """Test that no records give an empty summary."""
        assert summarize_by_folder([]) == []

    def test_only_immediate_parent_counts(self) -> None:
        """Test that sizes are not rolled up into ancestors."""
        records = _records(("/a/x", 1), ("/a/b/y", 2))

        assert summarize_by_folder(records) == [("/a/b", 2), ("/a", 1)]

    def test_degenerate_paths_excluded(self) -> None:
        """Test that paths without a parent are skipped, not errors."""
        records = _records(("loose.txt", 100), ("/", 7), ("/c/file", 3))

        assert summarize_by_folder(records) == [("/c", 3)]

    def test_ties_are_deterministic(self) -> None:
        """Test that equal totals are ordered by directory name."""
        records = _records(("/z/1", 5), ("/m/1", 5), ("/a/1", 5))

        assert summarize_by_folder(records) == [("/a", 5), ("/m", 5), ("/z", 5)]
        assert summarize_by_folder(reversed(records)) == summarize_by_folder(records)

    def test_zero_sized_files_listed(self) -> None:
        """Test that folders with only empty files still appear."""
        assert summarize_by_folder(_records(("/e/empty", 0))) == [("/e", 0)]

    def test_accepts_generator(self) -> None:
        """Test that any iterable of records is accepted."""
        records = (r for r in _records(("/a/x", 1), ("/a/y", 1)))

        assert summarize_by_folder(records) == [("/a", 2)]

    def test_result_entries_are_named(self) -> None:
        """Test access by field name."""
        (total,) = summarize_by_folder(_records(("/a/x", 4)))

        assert total.directory == "/a"
        assert total.size == 4


class TestTopFolders:
    """Tests for top_folders."""

    def test_limits_result(self) -> None:
        """Test that only the largest folders are returned."""
        records = _records(("/a/x", 1), ("/b/x", 3), ("/c/x", 2))

        assert top_folders(records, 2) == [("/b", 3), ("/c", 2)]

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, limit: int) -> None:
        """Test that a non-positive limit yields nothing."""
        assert top_folders(_records(("/a/x", 1)), limit) == []
