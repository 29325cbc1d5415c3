"""Copy files and (with ``recursive``) directory trees inside ChRIS.

Destination handling matches ``mv``: copying into an existing directory (or
a destination written with a trailing ``/``) keeps the source basename.
"""

from __future__ import annotations

import logging

from chrisvfs.exceptions import ChrisVFSError, ResolutionError
from chrisvfs.existence import find_path
from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT
from chrisvfs.models import CopyResult
from chrisvfs.mover import move_destination
from chrisvfs.paths import ROOT, path_join, resolve_path
from chrisvfs.protocols import ResourceStore
from chrisvfs.walker import walk_tree

logger = logging.getLogger(__name__)


async def _ensure_folder(store: ResourceStore, path: str) -> None:
    try:
        await store.create_folder(path)
    except ChrisVFSError as e:
        # CUBE rejects creating a folder that already exists
        logger.warning(f"Could not create folder {path}: {e}")


async def _copy_tree(
    store: ResourceStore, src_path: str, dest_path: str, *, limit: int
) -> CopyResult:
    tree = await walk_tree(store, src_path, limit=limit)

    await _ensure_folder(store, dest_path)
    for entry in tree.dirs:
        await _ensure_folder(store, path_join(dest_path, entry.relative))

    copied = 0
    failed: list[str] = []
    for entry in tree.files:
        target = path_join(dest_path, entry.relative)
        try:
            ok = await store.copy_resource(entry.path, target)
        except ChrisVFSError as e:
            logger.error(f"Copy of {entry.path} failed: {e}")
            ok = False
        if ok:
            copied += 1
        else:
            failed.append(entry.path)

    for entry in tree.links:
        logger.warning(f"Skipping link {entry.path}: links can't be copied")
        failed.append(entry.path)

    if failed:
        return CopyResult(
            success=False,
            source=src_path,
            destination=dest_path,
            copied=copied,
            failed=tuple(failed),
            error=f"Failed to copy {len(failed)} item(s) from {src_path}",
        )
    logger.info(f"Copied {copied} file(s) from {src_path} to {dest_path}")
    return CopyResult(success=True, source=src_path, destination=dest_path, copied=copied)


async def copy_path(
    store: ResourceStore,
    src: str,
    dest: str,
    *,
    cwd: str = ROOT,
    recursive: bool = False,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> CopyResult:
    """Copy a remote file, or a directory tree with ``recursive``.

    Args:
        store: Remote resource store
        src: Source path, relative to ``cwd``
        dest: Destination path, relative to ``cwd``
        cwd: Current virtual working directory
        recursive: Allow copying directories
        limit: Page size for listings

    Returns:
        CopyResult; a recursive copy keeps going past individual failures
        and lists them in ``failed``.
    """
    try:
        src_path = resolve_path(src, cwd).rstrip("/") or ROOT
        dest_path = resolve_path(dest, cwd)
    except ResolutionError as e:
        return CopyResult(success=False, source=src, destination=dest, error=str(e))

    try:
        info = await find_path(store, src_path, limit=limit)
        if info is None:
            return CopyResult(
                success=False,
                source=src_path,
                destination=dest_path,
                error=f"Source not found: {src}",
            )

        final_dest = await move_destination(store, src_path, dest_path, dest, limit=limit)
        if final_dest == src_path:
            return CopyResult(
                success=False,
                source=src_path,
                destination=final_dest,
                error=f"'{src_path}' and '{final_dest}' are the same file",
            )

        if info.type == "dir":
            if not recursive:
                return CopyResult(
                    success=False,
                    source=src_path,
                    destination=final_dest,
                    error=(
                        f"Cannot copy directory '{src_path}': is a directory "
                        "(use -r for recursive copy)"
                    ),
                )
            if final_dest.startswith(src_path.rstrip("/") + "/"):
                return CopyResult(
                    success=False,
                    source=src_path,
                    destination=final_dest,
                    error=f"Cannot copy directory '{src_path}' into itself",
                )
            return await _copy_tree(store, src_path, final_dest, limit=limit)

        copied = await store.copy_resource(src_path, final_dest)
    except ChrisVFSError as e:
        logger.error(f"Copy of {src_path} failed: {e}")
        return CopyResult(success=False, source=src_path, destination=dest_path, error=str(e))

    if not copied:
        return CopyResult(
            success=False,
            source=src_path,
            destination=final_dest,
            error=f"Failed to copy {src_path} to {final_dest}",
        )

    logger.info(f"Copied {src_path} to {final_dest}")
    return CopyResult(success=True, source=src_path, destination=final_dest, copied=1)
