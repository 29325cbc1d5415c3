"""Tests for concurrent resource fetching."""

from __future__ import annotations

import asyncio

import pytest
from helpers import BarrierStore, FakeStore, SlowStore, dir_row, file_row, link_row

from chrisvfs.exceptions import SessionError, TransportError
from chrisvfs.fetcher import FetchPolicy, fetch_resources, list_kind
from chrisvfs.models import ResourceKind


@pytest.fixture
def mixed_store() -> FakeStore:
    fake = FakeStore()
    fake.add(ResourceKind.DIRS, "/data", dir_row(1, "data/d1"))
    fake.add(ResourceKind.FILES, "/data", file_row(2, "data/f1.txt", 10))
    fake.add(ResourceKind.LINKS, "/data", link_row(3, "data/l1.chrislink", "home/chris"))
    return fake


class TestFetchResources:
    """Tests for fetch_resources."""

    @pytest.mark.asyncio
    async def test_fetches_all_three_kinds(self, mixed_store: FakeStore) -> None:
        resources = await fetch_resources(mixed_store, "/data")

        assert [r["id"] for r in resources.dirs] == [1]
        assert [r["id"] for r in resources.files] == [2]
        assert [r["id"] for r in resources.links] == [3]
        assert resources.diagnostics == ()

    @pytest.mark.asyncio
    async def test_sends_limit_to_every_query(self, mixed_store: FakeStore) -> None:
        await fetch_resources(mixed_store, "/data", limit=50)

        assert sorted(k.value for k, _, _ in mixed_store.list_calls) == ["dirs", "files", "links"]
        assert all(limit == 50 for _, _, limit in mixed_store.list_calls)

    @pytest.mark.asyncio
    async def test_queries_run_concurrently(self) -> None:
        """Test that all three queries are in flight at the same time."""
        barrier = BarrierStore()

        resources = await asyncio.wait_for(fetch_resources(barrier, "/"), timeout=2)

        assert barrier.in_flight == 3
        assert resources.path == "/"

    @pytest.mark.asyncio
    async def test_all_or_nothing_propagates_failure(self, mixed_store: FakeStore) -> None:
        mixed_store.fail(ResourceKind.LINKS, TransportError("links unavailable"))

        with pytest.raises(TransportError) as exc_info:
            await fetch_resources(mixed_store, "/data", FetchPolicy.ALL_OR_NOTHING)

        assert exc_info.value.kind == "links"

    @pytest.mark.asyncio
    async def test_all_or_nothing_cancels_pending_queries(self) -> None:
        """Test that the first failure cancels the kinds still in flight."""
        slow = SlowStore(ResourceKind.DIRS, ResourceKind.LINKS)
        slow.fail(ResourceKind.FILES, TransportError("files down"))

        with pytest.raises(TransportError):
            await fetch_resources(slow, "/data")
        await asyncio.sleep(0)

        assert slow.cancelled == {ResourceKind.DIRS, ResourceKind.LINKS}

    @pytest.mark.asyncio
    async def test_best_effort_keeps_other_kinds(self, mixed_store: FakeStore) -> None:
        """Test that one failed kind is empty and reported exactly once."""
        mixed_store.fail(ResourceKind.FILES, TransportError("boom"))

        resources = await fetch_resources(mixed_store, "/data", FetchPolicy.BEST_EFFORT)

        assert [r["id"] for r in resources.dirs] == [1]
        assert resources.files == []
        assert [r["id"] for r in resources.links] == [3]
        assert len(resources.diagnostics) == 1
        assert resources.diagnostics[0].kind is ResourceKind.FILES
        assert resources.diagnostics[0].path == "/data"

    @pytest.mark.asyncio
    async def test_best_effort_all_failed(self, mixed_store: FakeStore) -> None:
        for kind in ResourceKind:
            mixed_store.fail(kind, TransportError(f"{kind.value} down"))

        resources = await fetch_resources(mixed_store, "/data", FetchPolicy.BEST_EFFORT)

        assert resources.dirs == resources.files == resources.links == []
        assert len(resources.diagnostics) == 3


class TestListKind:
    """Tests for list_kind error normalization."""

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_transport_error(self, store: FakeStore) -> None:
        store.fail(ResourceKind.DIRS, RuntimeError("socket closed"))

        with pytest.raises(TransportError, match="socket closed") as exc_info:
            await list_kind(store, ResourceKind.DIRS, "/", 10)

        assert exc_info.value.kind == "dirs"

    @pytest.mark.asyncio
    async def test_session_error_is_not_wrapped(self, store: FakeStore) -> None:
        store.fail(ResourceKind.FILES, SessionError("expired"))

        with pytest.raises(SessionError):
            await list_kind(store, ResourceKind.FILES, "/", 10)

    @pytest.mark.asyncio
    async def test_none_rows_become_empty_list(self, store: FakeStore) -> None:
        async def list_none(*args: object, **kwargs: object) -> None:
            return None

        store.list_resources = list_none  # type: ignore[method-assign]

        assert await list_kind(store, ResourceKind.LINKS, "/", 10) == []
