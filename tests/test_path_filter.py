"""Tests for the protected-location filter."""

from __future__ import annotations

from pathlib import Path

import pytest

from disk_inventory.path_filter import PathFilter, is_within


class TestIsWithin:
    """Tests for the is_within helper."""

    @pytest.mark.parametrize(
        "path,parent,expected",
        [
            ("/data", "/data", True),
            ("/data/a/b.txt", "/data", True),
            ("/data2/file", "/data", False),  # prefix of a name, not a component
            ("/", "/data", False),
            ("/data/../etc", "/data", False),
        ],
    )
    def test_component_wise(self, path: str, parent: str, expected: bool) -> None:
        """Test component-wise containment."""
        assert is_within(path, parent) is expected


class TestPathFilter:
    """Tests for PathFilter."""

    def test_empty_filter_skips_nothing(self, tmp_path: Path) -> None:
        """Test that a filter without locations allows everything."""
        path_filter = PathFilter()

        assert not path_filter.should_skip(tmp_path)
        assert path_filter.protected == ()

    def test_location_and_descendants_are_skipped(self, tmp_path: Path) -> None:
        """Test that protection covers the location and everything below it."""
        protected = tmp_path / "system"
        path_filter = PathFilter([protected])

        assert path_filter.should_skip(protected)
        assert path_filter.should_skip(protected / "drivers" / "x.sys")
        assert not path_filter.should_skip(tmp_path)
        assert not path_filter.should_skip(tmp_path / "system32")

    def test_nested_locations(self, tmp_path: Path) -> None:
        """Test that overlapping locations both protect their contents."""
        outer = tmp_path / "programs"
        inner = outer / "vendor"
        path_filter = PathFilter([outer, inner])

        assert path_filter.should_skip(inner / "app.exe")
        assert path_filter.should_skip(outer / "other.exe")
        assert not path_filter.should_skip(tmp_path / "free.txt")

    def test_duplicate_locations_collapse(self, tmp_path: Path) -> None:
        """Test that repeated locations are stored once."""
        path_filter = PathFilter([tmp_path / "sys", str(tmp_path / "sys")])

        assert len(path_filter.protected) == 1


class TestFromEnvironment:
    """Tests for discovery of protected locations."""

    def test_reads_hints(self, tmp_path: Path) -> None:
        """Test that every known hint is used."""
        environ = {
            "WINDIR": str(tmp_path / "Windows"),
            "ProgramFiles": str(tmp_path / "Program Files"),
            "ProgramFiles(x86)": str(tmp_path / "Program Files (x86)"),
            "HOME": str(tmp_path / "home"),
        }

        path_filter = PathFilter.from_environment(environ)

        assert len(path_filter.protected) == 3
        assert path_filter.should_skip(tmp_path / "Windows" / "notepad.exe")
        assert not path_filter.should_skip(tmp_path / "home" / "notes.txt")

    def test_missing_hints_yield_empty_filter(self) -> None:
        """Test that absent hints are not an error."""
        path_filter = PathFilter.from_environment({})

        assert path_filter.protected == ()

    def test_empty_hint_ignored(self) -> None:
        """Test that an empty variable does not protect the working directory."""
        path_filter = PathFilter.from_environment({"WINDIR": ""})

        assert path_filter.protected == ()

    def test_extra_locations(self, tmp_path: Path) -> None:
        """Test that configured extra locations are added."""
        path_filter = PathFilter.from_environment({}, extra=[tmp_path / "vault"])

        assert path_filter.should_skip(tmp_path / "vault" / "key")

    def test_defaults_to_process_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that os.environ is read when no mapping is given."""
        monkeypatch.setenv("WINDIR", str(tmp_path / "Windows"))
        monkeypatch.delenv("ProgramFiles", raising=False)
        monkeypatch.delenv("ProgramFiles(x86)", raising=False)

        path_filter = PathFilter.from_environment()

        assert path_filter.should_skip(tmp_path / "Windows")
