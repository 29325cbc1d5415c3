"""Remove files, directories and links by path."""

from __future__ import annotations

import logging

from chrisvfs.exceptions import ChrisVFSError
from chrisvfs.existence import find_path
from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT
from chrisvfs.models import RemoveResult
from chrisvfs.paths import ROOT, resolve_path
from chrisvfs.protocols import ResourceStore

logger = logging.getLogger(__name__)


async def remove_path(
    store: ResourceStore,
    path: str,
    *,
    cwd: str = ROOT,
    recursive: bool = False,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> RemoveResult:
    """Delete the object at ``path``.

    Directories are only deleted with ``recursive=True``.
    """
    try:
        resolved = resolve_path(path, cwd).rstrip("/") or ROOT
        info = await find_path(store, resolved, limit=limit)
    except ChrisVFSError as e:
        return RemoveResult(success=False, path=path, type=None, error=str(e))

    if info is None:
        return RemoveResult(
            success=False,
            path=resolved,
            type=None,
            error=f"No such file or directory: {resolved}",
        )

    if info.type == "dir" and not recursive:
        return RemoveResult(
            success=False,
            path=resolved,
            type=info.type,
            error=(
                f"Cannot remove directory '{resolved}': is a directory "
                "(use -r for recursive delete)"
            ),
        )

    try:
        deleted = await store.delete_resource(info.id, info.kind)
    except ChrisVFSError as e:
        logger.error(f"Delete of {resolved} failed: {e}")
        return RemoveResult(success=False, path=resolved, type=info.type, error=str(e))

    if not deleted:
        return RemoveResult(
            success=False,
            path=resolved,
            type=info.type,
            error=f"Failed to delete {info.type}: {resolved}",
        )

    logger.info(f"Removed {info.type} {resolved}")
    return RemoveResult(success=True, path=resolved, type=info.type)
