"""Merged directory listings across dirs, files and links."""

from __future__ import annotations

import logging
from typing import Any

from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT, KINDS, FetchPolicy, fetch_resources
from chrisvfs.models import (
    UNKNOWN_OWNER,
    DirRow,
    LinkRow,
    ListingItem,
    ListingResult,
    ResourceKind,
    ResourceRow,
    parse_row,
)
from chrisvfs.paths import ROOT, resolve_path
from chrisvfs.protocols import ResourceStore
from chrisvfs.sorting import apply_sort

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "name"


def row_to_item(row: ResourceRow) -> ListingItem:
    """Build the listing view of one parsed row."""
    owner = row.owner or UNKNOWN_OWNER
    date = row.date or ""
    if isinstance(row, DirRow):
        return ListingItem(name=row.name, type="dir", size=0, owner=owner, date=date)
    if isinstance(row, LinkRow):
        return ListingItem(
            name=row.name,
            type="link",
            size=row.size,
            owner=owner,
            date=date,
            target=row.target,
        )
    return ListingItem(name=row.name, type="file", size=row.size, owner=owner, date=date)


def raw_to_item(kind: ResourceKind, raw: dict[str, Any]) -> ListingItem:
    """Parse a raw API row of ``kind`` and build its listing view."""
    return row_to_item(parse_row(kind, raw))


async def list_path(
    store: ResourceStore,
    path: str = "",
    *,
    cwd: str = ROOT,
    sort_field: str | None = DEFAULT_SORT_FIELD,
    reverse: bool = False,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> ListingResult:
    """List everything at ``path``.

    A kind that fails to list is reported in ``diagnostics`` and the other
    kinds are still returned. An empty directory gives an empty result; this
    function does not check that ``path`` exists.

    Args:
        store: Remote resource store
        path: Path to list, relative to ``cwd``
        cwd: Current virtual working directory
        sort_field: ListingItem field to sort by (``name`` by default)
        reverse: Reverse the sort
        limit: Page size for each query

    Returns:
        ListingResult with the merged, sorted items
    """
    resolved = resolve_path(path, cwd)
    target = resolved.rstrip("/") or ROOT
    resources = await fetch_resources(store, target, FetchPolicy.BEST_EFFORT, limit=limit)

    items: list[ListingItem] = []
    for kind in KINDS:
        items.extend(raw_to_item(kind, raw) for raw in resources.rows(kind))

    logger.debug(f"Listed {len(items)} item(s) at {target}")
    return ListingResult(
        path=target,
        items=apply_sort(items, sort_field or DEFAULT_SORT_FIELD, reverse),
        diagnostics=resources.diagnostics,
    )
