"""Pytest fixtures for chrisvfs tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from helpers import FakeStore, dir_row, file_row, link_row

from chrisvfs.context import ChrisContext
from chrisvfs.models import ResourceKind


@pytest.fixture
def store() -> FakeStore:
    """Create an empty in-memory store."""
    return FakeStore()


@pytest.fixture
def populated_store() -> FakeStore:
    """Store holding a small home folder.

    /home/chris: uploads/ (dir), notes.txt (file), feed (link -> home/chris/feeds/feed_1)
    /home/chris/uploads: scan.dcm (file)
    """
    fake = FakeStore()
    fake.add(ResourceKind.DIRS, "/", dir_row(1, "home"))
    fake.add(ResourceKind.DIRS, "/home", dir_row(2, "home/chris"))
    fake.add(ResourceKind.DIRS, "/home/chris", dir_row(3, "home/chris/uploads"))
    fake.add(ResourceKind.FILES, "/home/chris", file_row(10, "home/chris/notes.txt", 42))
    fake.add(
        ResourceKind.LINKS,
        "/home/chris",
        link_row(20, "home/chris/feed.chrislink", "home/chris/feeds/feed_1"),
    )
    fake.add(ResourceKind.FILES, "/home/chris/uploads", file_row(11, "home/chris/uploads/scan.dcm", 2048))
    return fake


@pytest.fixture
def context(tmp_path: Path) -> ChrisContext:
    """Logged in context stored in a temp file."""
    ctx = ChrisContext(tmp_path / "context.json")
    ctx.set_session("http://cube.test/api/v1/", "chris", "test_token")
    return ctx


@pytest.fixture
def patch_cube_client_class() -> Any:
    """Patch CubeClient in the client module."""
    with patch("chrisvfs.client.CubeClient") as mock_class:
        mock_instance = AsyncMock()
        mock_instance.login.return_value = "access_token"
        mock_class.return_value = mock_instance
        yield mock_instance
