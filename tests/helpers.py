"""Shared test helpers for chrisvfs tests."""

from __future__ import annotations

import asyncio
from typing import Any

from chrisvfs.models import ResourceKind


def dir_row(id: int, path: str, owner: str | None = "chris", **extra: Any) -> dict[str, Any]:
    """Raw CUBE folder row."""
    row: dict[str, Any] = {"id": id, "path": path, "creation_date": "2024-01-02T03:04:05Z"}
    if owner:
        row["owner_username"] = owner
    row.update(extra)
    return row


def file_row(id: int, fname: str, fsize: int = 0, owner: str | None = "chris", **extra: Any) -> dict[str, Any]:
    """Raw CUBE file row."""
    row: dict[str, Any] = {
        "id": id,
        "fname": fname,
        "fsize": fsize,
        "creation_date": "2024-01-02T03:04:05Z",
    }
    if owner:
        row["owner_username"] = owner
    row.update(extra)
    return row


def link_row(id: int, fname: str, path: str, **extra: Any) -> dict[str, Any]:
    """Raw CUBE link row."""
    row: dict[str, Any] = {"id": id, "fname": fname, "path": path}
    row.update(extra)
    return row


class FakeStore:
    """In-memory ResourceStore that records every call."""

    def __init__(self) -> None:
        self.rows: dict[tuple[ResourceKind, str], list[dict[str, Any]]] = {}
        self.failures: dict[ResourceKind, Exception] = {}
        self.list_calls: list[tuple[ResourceKind, str, int]] = []
        self.moves: list[tuple[str, str]] = []
        self.copies: list[tuple[str, str]] = []
        self.deletes: list[tuple[int, ResourceKind]] = []
        self.uploads: list[tuple[bytes, str, str]] = []
        self.touched: list[str] = []
        self.folders: list[str] = []
        self.contents: dict[str, bytes] = {}
        self.mutation_result = True
        self.closed = False

    def add(self, kind: ResourceKind, parent: str, *rows: dict[str, Any]) -> None:
        self.rows.setdefault((kind, parent), []).extend(rows)

    def fail(self, kind: ResourceKind, error: Exception) -> None:
        self.failures[kind] = error

    async def list_resources(
        self,
        kind: ResourceKind,
        parent_path: str,
        *,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        self.list_calls.append((kind, parent_path, limit))
        await asyncio.sleep(0)
        if kind in self.failures:
            raise self.failures[kind]
        return list(self.rows.get((kind, parent_path), []))

    async def move_resource(self, src: str, dest: str) -> bool:
        self.moves.append((src, dest))
        return self.mutation_result

    async def copy_resource(self, src: str, dest: str) -> bool:
        self.copies.append((src, dest))
        return self.mutation_result

    async def delete_resource(self, resource_id: int, kind: ResourceKind) -> bool:
        self.deletes.append((resource_id, kind))
        return self.mutation_result

    async def touch_file(self, path: str) -> bool:
        self.touched.append(path)
        return self.mutation_result

    async def upload_file(self, content: bytes, remote_dir: str, filename: str) -> bool:
        self.uploads.append((content, remote_dir, filename))
        return self.mutation_result

    async def create_folder(self, path: str) -> bool:
        self.folders.append(path)
        return self.mutation_result

    async def file_content(self, path: str) -> bytes | None:
        return self.contents.get(path)

    async def close(self) -> None:
        self.closed = True


class BarrierStore(FakeStore):
    """FakeStore whose listings only return once all three kinds are in flight."""

    def __init__(self) -> None:
        super().__init__()
        self.in_flight = 0
        self.all_started = asyncio.Event()

    async def list_resources(
        self,
        kind: ResourceKind,
        parent_path: str,
        *,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        self.in_flight += 1
        if self.in_flight == 3:
            self.all_started.set()
        await self.all_started.wait()
        return await super().list_resources(kind, parent_path, limit=limit, offset=offset)


class SlowStore(FakeStore):
    """FakeStore whose ``slow`` kinds never return and record their cancellation."""

    def __init__(self, *slow: ResourceKind) -> None:
        super().__init__()
        self.slow = set(slow)
        self.cancelled: set[ResourceKind] = set()

    async def list_resources(
        self,
        kind: ResourceKind,
        parent_path: str,
        *,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        if kind in self.slow:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled.add(kind)
                raise
        return await super().list_resources(kind, parent_path, limit=limit, offset=offset)
