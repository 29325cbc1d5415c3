"""Existence checks for remote paths.

These are conservative: if the parent directory cannot be listed the error
propagates instead of being reported as "not found".
"""

from __future__ import annotations

from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT, KINDS, FetchPolicy, fetch_resources, list_kind
from chrisvfs.models import ExistenceResult, LinkRow, ResourceKind, ResourceRow, parse_row
from chrisvfs.paths import ensure_absolute, split_path
from chrisvfs.protocols import ResourceStore


def _matches(row: ResourceRow, name: str) -> bool:
    if isinstance(row, LinkRow):
        return name in (row.name, row.stored_name)
    return row.name == name


async def find_path(
    store: ResourceStore, path: str, *, limit: int = DEFAULT_PAGE_LIMIT
) -> ExistenceResult | None:
    """Look up the object at an absolute ``path``.

    Dirs are checked before files and files before links, so a directory
    wins when one name shows up under several kinds. Rows without an id are
    never returned.

    Returns:
        ExistenceResult, or None if nothing at the parent has that name

    Raises:
        TransportError: If any of the parent listings fails
    """
    parent, name = split_path(path)
    if not name:
        return None

    resources = await fetch_resources(store, parent, FetchPolicy.ALL_OR_NOTHING, limit=limit)
    for kind in KINDS:
        for raw in resources.rows(kind):
            row = parse_row(kind, raw)
            if row.id and _matches(row, name):
                return ExistenceResult(type=kind.item_type, id=row.id, name=name)
    return None


async def is_directory(store: ResourceStore, path: str, *, limit: int = DEFAULT_PAGE_LIMIT) -> bool:
    """True if ``path`` is an existing directory. The root always is."""
    parent, name = split_path(path)
    if not name:
        return True

    target = parent.rstrip("/") + "/" + name
    rows = await list_kind(store, ResourceKind.DIRS, parent, limit)
    for raw in rows:
        row = parse_row(ResourceKind.DIRS, raw)
        full = row.path or row.fname
        if (full and ensure_absolute(full) == target) or row.name == name:
            return True
    return False


async def file_exists(store: ResourceStore, path: str, *, limit: int = DEFAULT_PAGE_LIMIT) -> bool:
    """True if ``path`` is an existing regular file."""
    parent, name = split_path(path)
    if not name:
        return False

    target = parent.rstrip("/") + "/" + name
    rows = await list_kind(store, ResourceKind.FILES, parent, limit)
    for raw in rows:
        row = parse_row(ResourceKind.FILES, raw)
        if (row.fname and ensure_absolute(row.fname) == target) or row.name == name:
            return True
    return False

