"""Plan downloads from ChRIS and pull them to the local disk one at a time."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from chrisvfs.exceptions import ChrisVFSError, DownloadError, NotFoundError
from chrisvfs.existence import is_directory
from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT, list_kind
from chrisvfs.models import (
    DownloadFileInfo,
    DownloadRecord,
    DownloadResult,
    DownloadSummary,
    ResourceKind,
    parse_row,
)
from chrisvfs.paths import ROOT, has_directory_hint, split_path
from chrisvfs.protocols import ResourceStore
from chrisvfs.walker import walk_tree

logger = logging.getLogger(__name__)

DownloadProgressCallback = Callable[[int, DownloadFileInfo, DownloadResult], None]


async def _scan_directory(
    store: ResourceStore, source: str, raw_remote: str, local: Path, *, force: bool, limit: int
) -> DownloadRecord:
    # A trailing slash merges the contents into ``local``, like rsync
    _, name = split_path(source)
    target = local if has_directory_hint(raw_remote) or not name else local / name

    if target.exists() and not target.is_dir():
        raise DownloadError(f"Local path already exists: {target}. Use -f to overwrite.")
    if target.is_dir() and any(target.iterdir()) and not force:
        raise DownloadError(f"Target directory exists: {target}. Use -f to merge into it.")

    tree = await walk_tree(store, source, limit=limit)
    files = [
        DownloadFileInfo(chris_path=entry.path, host_path=str(target / entry.relative), size=entry.size)
        for entry in tree.files
    ]
    if tree.links:
        logger.info(f"Skipping {len(tree.links)} link(s) under {source}")
    return DownloadRecord(
        files=files, total_size=tree.total_size, target=str(target), directory=True
    )


async def _scan_file(
    store: ResourceStore, source: str, local: Path, *, force: bool, limit: int
) -> DownloadRecord:
    parent, name = split_path(source)
    rows = await list_kind(store, ResourceKind.FILES, parent, limit)
    match = None
    for raw in rows:
        row = parse_row(ResourceKind.FILES, raw)
        if row.id and row.name == name:
            match = row
            break
    if match is None:
        raise NotFoundError(source)

    target = local / name if local.is_dir() else local
    if target.exists() and not force:
        raise DownloadError(f"Local path already exists: {target}. Use -f to overwrite.")

    info = DownloadFileInfo(chris_path=source, host_path=str(target), size=match.size)
    return DownloadRecord(files=[info], total_size=match.size, target=str(target))


async def scan_download(
    store: ResourceStore,
    remote_path: str,
    local_path: str | Path,
    *,
    force: bool = False,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> DownloadRecord:
    """Plan the download of a remote file or directory tree.

    A directory keeps its own name locally: downloading ``/x/mydir`` to
    ``./out`` gives ``./out/mydir/...``; ``/x/mydir/`` merges its contents
    straight into ``./out``. A file downloaded into an existing local
    directory keeps its remote name.

    Args:
        store: Remote resource store
        remote_path: Absolute remote path, as resolved from user input
        local_path: Local file or directory to write to
        force: Overwrite an existing local file or merge into a non-empty
            local directory
        limit: Page size for listings

    Returns:
        DownloadRecord listing every remote file with its local destination

    Raises:
        NotFoundError: If ``remote_path`` is neither a directory nor a file
        DownloadError: If the local target exists and ``force`` is off
        TransportError: If a remote listing fails
    """
    source = remote_path.rstrip("/") or ROOT
    local = Path(local_path)

    if await is_directory(store, source, limit=limit):
        record = await _scan_directory(store, source, remote_path, local, force=force, limit=limit)
    else:
        record = await _scan_file(store, source, local, force=force, limit=limit)

    logger.info(f"Planned {len(record.files)} file(s), {record.total_size} bytes from {source}")
    return record


async def download_one(store: ResourceStore, info: DownloadFileInfo) -> tuple[DownloadResult, int]:
    """Download a single planned file. Returns the result and bytes written."""
    try:
        content = await store.file_content(info.chris_path)
        if content is None:
            logger.error(f"Failed to download: {info.chris_path}")
            return (
                DownloadResult(
                    success=False,
                    chris_path=info.chris_path,
                    host_path=info.host_path,
                    error=f"Failed to download: {info.chris_path}",
                ),
                0,
            )
        host = Path(info.host_path)
        host.parent.mkdir(parents=True, exist_ok=True)
        host.write_bytes(content)
    except (OSError, ChrisVFSError) as e:
        logger.error(f"Error downloading {info.chris_path}: {e}")
        return (
            DownloadResult(
                success=False,
                chris_path=info.chris_path,
                host_path=info.host_path,
                error=str(e),
            ),
            0,
        )
    return DownloadResult(success=True, chris_path=info.chris_path, host_path=info.host_path), len(content)


async def pull_downloads(
    store: ResourceStore,
    record: DownloadRecord,
    *,
    progress: DownloadProgressCallback | None = None,
    stop_on_error: bool = False,
) -> DownloadSummary:
    """Download every file of ``record`` sequentially, in plan order.

    Args:
        store: Remote resource store
        record: Output of ``scan_download``
        progress: Called as ``progress(index, info, result)`` after each file
        stop_on_error: Stop at the first failed file

    Returns:
        DownloadSummary with per file results

    Raises:
        DownloadError: If the local target directory can't be created
    """
    start = time.monotonic()
    if record.directory:
        try:
            Path(record.target).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DownloadError(f"Failed to create {record.target}: {e}") from e

    results: list[DownloadResult] = []
    downloaded_size = 0
    for index, info in enumerate(record.files):
        result, received = await download_one(store, info)
        results.append(result)
        downloaded_size += received
        if progress is not None:
            progress(index, info, result)
        if stop_on_error and not result.success:
            break

    downloaded = sum(1 for r in results if r.success)
    return DownloadSummary(
        total_files=len(record.files),
        downloaded_count=downloaded,
        failed_count=len(results) - downloaded,
        downloaded_size=downloaded_size,
        duration=time.monotonic() - start,
        results=results,
    )
