"""Tests for virtual path resolution."""

from __future__ import annotations

import pytest

from chrisvfs.exceptions import ResolutionError
from chrisvfs.paths import has_directory_hint, path_join, resolve_path, split_path


class TestResolvePath:
    """Tests for resolve_path."""

    def test_relative_path_joins_cwd(self) -> None:
        """Test that a relative path is resolved against cwd."""
        assert resolve_path("uploads", "/home/chris") == "/home/chris/uploads"

    def test_absolute_path_ignores_cwd(self) -> None:
        """Test that an absolute path is returned as is."""
        assert resolve_path("/etc/data", "/home/chris") == "/etc/data"

    def test_empty_path_returns_cwd(self) -> None:
        """Test that an empty path gives the working directory."""
        assert resolve_path("", "/home/chris") == "/home/chris"

    def test_dot_segments_collapse(self) -> None:
        """Test that . and .. are collapsed."""
        assert resolve_path("../alice/./feeds", "/home/chris") == "/home/alice/feeds"

    def test_parent_of_root_stays_root(self) -> None:
        """Test that .. never climbs above the root."""
        assert resolve_path("../../..", "/home") == "/"

    def test_repeated_slashes_collapse(self) -> None:
        """Test that doubled slashes are collapsed, including a leading //."""
        assert resolve_path("//home//chris", "/") == "/home/chris"

    def test_trailing_slash_is_kept(self) -> None:
        """Test that a trailing slash survives as a directory hint."""
        assert resolve_path("uploads/", "/home/chris") == "/home/chris/uploads/"

    def test_root_has_no_extra_slash(self) -> None:
        """Test that resolving to the root gives a single slash."""
        assert resolve_path("/", "/home/chris") == "/"
        assert resolve_path("../../", "/home/chris") == "/"

    def test_resolution_is_idempotent(self) -> None:
        """Test that resolving an already resolved path changes nothing."""
        cwd = "/home/chris"
        for path in ["a/b/../c", "/x//y/", "..", "", "./feeds/feed_1"]:
            once = resolve_path(path, cwd)
            assert resolve_path(once, cwd) == once

    def test_nul_byte_is_rejected(self) -> None:
        """Test that a NUL byte raises ResolutionError."""
        with pytest.raises(ResolutionError):
            resolve_path("bad\x00name", "/")


class TestSplitPath:
    """Tests for split_path."""

    def test_split_nested(self) -> None:
        assert split_path("/home/chris/notes.txt") == ("/home/chris", "notes.txt")

    def test_split_top_level(self) -> None:
        """Test that a top level entry has the root as parent."""
        assert split_path("/home") == ("/", "home")

    def test_split_root(self) -> None:
        assert split_path("/") == ("/", "")

    def test_split_ignores_trailing_slash(self) -> None:
        assert split_path("/home/chris/") == ("/home", "chris")


class TestPathJoin:
    """Tests for path_join."""

    def test_join_directory_and_name(self) -> None:
        """Test that joining gives parent + / + name with no doubled slash."""
        assert path_join("/home/chris/", "notes.txt") == "/home/chris/notes.txt"
        assert path_join("/", "home") == "/home"

    def test_join_collapses_dot_segments(self) -> None:
        assert path_join("/home/chris", "../alice") == "/home/alice"


def test_has_directory_hint() -> None:
    """Test that only a trailing slash counts as a directory hint."""
    assert has_directory_hint("dest/")
    assert not has_directory_hint("dest")
