"""Move/rename with shell style destination handling.

``mv a/file.txt b`` moves into ``b`` when ``b`` is a directory (or is
written ``b/``) and renames to ``b`` otherwise.
"""

from __future__ import annotations

import logging

from chrisvfs.exceptions import ChrisVFSError, ResolutionError
from chrisvfs.existence import file_exists, find_path, is_directory
from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT
from chrisvfs.models import MoveResult
from chrisvfs.paths import ROOT, has_directory_hint, path_join, resolve_path, split_path
from chrisvfs.protocols import ResourceStore

logger = logging.getLogger(__name__)


async def source_exists(store: ResourceStore, path: str, *, limit: int = DEFAULT_PAGE_LIMIT) -> bool:
    """True if ``path`` is an existing directory, file or link."""
    if await is_directory(store, path, limit=limit):
        return True
    if await file_exists(store, path, limit=limit):
        return True
    found = await find_path(store, path, limit=limit)
    return found is not None


async def move_destination(
    store: ResourceStore,
    src_path: str,
    dest_path: str,
    raw_dest: str,
    *,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> str:
    """Final path for moving ``src_path`` to ``dest_path``.

    Args:
        store: Remote resource store
        src_path: Resolved source path
        dest_path: Resolved destination path
        raw_dest: Destination exactly as the user typed it; a trailing ``/``
            marks it as a directory even if it doesn't exist yet
        limit: Page size for the directory check

    Returns:
        ``dest_path/<basename of src>`` if the destination is a directory,
        otherwise ``dest_path``
    """
    dest_is_dir = await is_directory(store, dest_path, limit=limit)
    if dest_is_dir or has_directory_hint(raw_dest):
        _, name = split_path(src_path)
        return path_join(dest_path, name)
    return dest_path.rstrip("/") or ROOT


async def move_path(
    store: ResourceStore,
    src: str,
    dest: str,
    *,
    cwd: str = ROOT,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> MoveResult:
    """Move or rename a remote file, directory or link.

    Args:
        store: Remote resource store
        src: Source path, relative to ``cwd``
        dest: Destination path, relative to ``cwd``
        cwd: Current virtual working directory
        limit: Page size for existence checks

    Returns:
        MoveResult; ``error`` explains a failure. The store's move is never
        called when the source can't be confirmed to exist.
    """
    try:
        src_path = resolve_path(src, cwd).rstrip("/") or ROOT
        dest_path = resolve_path(dest, cwd)
    except ResolutionError as e:
        return MoveResult(success=False, source=src, destination=dest, error=str(e))

    try:
        if not await source_exists(store, src_path, limit=limit):
            return MoveResult(
                success=False,
                source=src_path,
                destination=dest_path,
                error=f"Source not found: {src}",
            )
        final_dest = await move_destination(store, src_path, dest_path, dest, limit=limit)
        moved = await store.move_resource(src_path, final_dest)
    except ChrisVFSError as e:
        logger.error(f"Move of {src_path} failed: {e}")
        return MoveResult(success=False, source=src_path, destination=dest_path, error=str(e))

    if not moved:
        logger.error(f"Move of {src_path} to {final_dest} was rejected")
        return MoveResult(
            success=False,
            source=src_path,
            destination=final_dest,
            error=f"Failed to move {src_path} to {final_dest}",
        )

    logger.info(f"Moved {src_path} to {final_dest}")
    return MoveResult(success=True, source=src_path, destination=final_dest)
