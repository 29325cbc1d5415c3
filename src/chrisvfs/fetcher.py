"""Concurrent retrieval of the three resource kinds at one path."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from chrisvfs.exceptions import ChrisVFSError, TransportError
from chrisvfs.models import FetchDiagnostic, ResourceKind, ResourceSet
from chrisvfs.protocols import ResourceStore

logger = logging.getLogger(__name__)

# Single page large enough for any ordinary directory
DEFAULT_PAGE_LIMIT = 1000

KINDS: tuple[ResourceKind, ...] = (ResourceKind.DIRS, ResourceKind.FILES, ResourceKind.LINKS)


class FetchPolicy(str, Enum):
    """How a fetch reacts when one of the three queries fails.

    ALL_OR_NOTHING fails the whole fetch. BEST_EFFORT treats the failed kind
    as empty and records a diagnostic.
    """

    ALL_OR_NOTHING = "all_or_nothing"
    BEST_EFFORT = "best_effort"


async def list_kind(
    store: ResourceStore, kind: ResourceKind, parent_path: str, limit: int
) -> list[dict[str, Any]]:
    """List one resource kind, normalizing any failure to TransportError."""
    try:
        rows = await store.list_resources(kind, parent_path, limit=limit, offset=0)
    except TransportError as e:
        if e.kind is None:
            e.kind = kind.value
        raise
    except ChrisVFSError:
        raise
    except Exception as e:
        raise TransportError(f"Failed to list {kind.value} at {parent_path}: {e}", kind=kind.value) from e
    return list(rows or [])


async def fetch_resources(
    store: ResourceStore,
    parent_path: str,
    policy: FetchPolicy = FetchPolicy.ALL_OR_NOTHING,
    *,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> ResourceSet:
    """List dirs, files and links under ``parent_path`` concurrently.

    Args:
        store: Remote resource store
        parent_path: Absolute path to list
        policy: Failure policy for the three queries
        limit: Page size sent with each query

    Returns:
        ResourceSet with the raw rows of each kind

    Raises:
        TransportError: Under ALL_OR_NOTHING, if any query fails
    """
    queries = [asyncio.ensure_future(list_kind(store, kind, parent_path, limit)) for kind in KINDS]

    if policy is FetchPolicy.ALL_OR_NOTHING:
        try:
            dirs, files, links = await asyncio.gather(*queries)
        except BaseException:
            # gather doesn't cancel the siblings of the first failure
            for query in queries:
                query.cancel()
            raise
        return ResourceSet(path=parent_path, dirs=dirs, files=files, links=links)

    outcomes = await asyncio.gather(*queries, return_exceptions=True)
    rows: dict[ResourceKind, list[dict[str, Any]]] = {}
    diagnostics: list[FetchDiagnostic] = []
    for kind, outcome in zip(KINDS, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning(f"Could not list {kind.value} at {parent_path}: {outcome}")
            diagnostics.append(FetchDiagnostic(kind=kind, path=parent_path, message=str(outcome)))
            rows[kind] = []
        else:
            rows[kind] = outcome

    return ResourceSet(
        path=parent_path,
        dirs=rows[ResourceKind.DIRS],
        files=rows[ResourceKind.FILES],
        links=rows[ResourceKind.LINKS],
        diagnostics=tuple(diagnostics),
    )
