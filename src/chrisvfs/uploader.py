"""Scan local files for upload and push them to ChRIS one at a time."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from chrisvfs.exceptions import ChrisVFSError, UploadError
from chrisvfs.models import ScanRecord, UploadFileInfo, UploadResult, UploadSummary
from chrisvfs.paths import ensure_absolute, path_join, split_path
from chrisvfs.protocols import ResourceStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, UploadFileInfo, UploadResult], None]


def _walk(directory: str, chris_dir: str, files: list[UploadFileInfo]) -> None:
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        chris_path = path_join(chris_dir, entry.name)
        if entry.is_dir(follow_symlinks=False):
            _walk(entry.path, chris_path, files)
        elif entry.is_file(follow_symlinks=False):
            size = entry.stat(follow_symlinks=False).st_size
            files.append(UploadFileInfo(host_path=entry.path, chris_path=chris_path, size=size))
        else:
            logger.debug(f"Skipping {entry.path}: not a regular file")


def scan_upload(local_path: str | Path, remote_path: str) -> ScanRecord:
    """Plan the upload of a local file or directory tree.

    A directory keeps its own name on the remote side, like ``cp -r``:
    uploading ``/a/b/mydir`` to ``/x`` gives ``/x/mydir/...``.

    Args:
        local_path: Local file or directory
        remote_path: Absolute remote directory to upload into

    Returns:
        ScanRecord listing every regular file with the size read at scan time

    Raises:
        UploadError: If ``local_path`` doesn't exist or can't be read
    """
    local = Path(local_path)
    remote_root = ensure_absolute(remote_path)
    files: list[UploadFileInfo] = []

    try:
        if local.is_file():
            files.append(
                UploadFileInfo(
                    host_path=str(local),
                    chris_path=path_join(remote_root, local.name),
                    size=local.stat().st_size,
                )
            )
        elif local.is_dir():
            name = local.name or local.resolve().name
            _walk(str(local), path_join(remote_root, name), files)
        else:
            raise UploadError(f"Local path not found: {local}")
    except OSError as e:
        raise UploadError(f"Failed to scan {local}: {e}") from e

    total_size = sum(f.size for f in files)
    logger.info(f"Scanned {len(files)} file(s), {total_size} bytes under {local}")
    return ScanRecord(files=files, total_size=total_size)


async def upload_one(store: ResourceStore, info: UploadFileInfo) -> tuple[UploadResult, int]:
    """Upload a single planned file. Returns the result and bytes sent."""
    remote_dir, filename = split_path(info.chris_path)
    try:
        content = Path(info.host_path).read_bytes()
        uploaded = await store.upload_file(content, remote_dir, filename)
    except (OSError, ChrisVFSError) as e:
        logger.error(f"Error uploading {info.host_path}: {e}")
        return (
            UploadResult(
                success=False,
                host_path=info.host_path,
                chris_path=info.chris_path,
                error=str(e),
            ),
            0,
        )

    if not uploaded:
        logger.error(f"Failed to upload: {info.host_path}")
        return (
            UploadResult(
                success=False,
                host_path=info.host_path,
                chris_path=info.chris_path,
                error=f"Upload rejected for {info.chris_path}",
            ),
            0,
        )
    return UploadResult(success=True, host_path=info.host_path, chris_path=info.chris_path), len(content)


async def push_uploads(
    store: ResourceStore,
    record: ScanRecord,
    *,
    progress: ProgressCallback | None = None,
    stop_on_error: bool = False,
) -> UploadSummary:
    """Upload every file of ``record`` sequentially, in scan order.

    Args:
        store: Remote resource store
        record: Output of ``scan_upload``
        progress: Called as ``progress(index, info, result)`` after each file
        stop_on_error: Stop at the first failed file

    Returns:
        UploadSummary with per file results
    """
    start = time.monotonic()
    results: list[UploadResult] = []
    uploaded_size = 0

    for index, info in enumerate(record.files):
        result, sent = await upload_one(store, info)
        results.append(result)
        uploaded_size += sent
        if progress is not None:
            progress(index, info, result)
        if stop_on_error and not result.success:
            break

    uploaded = sum(1 for r in results if r.success)
    return UploadSummary(
        total_files=len(record.files),
        uploaded_count=uploaded,
        failed_count=len(results) - uploaded,
        uploaded_size=uploaded_size,
        duration=time.monotonic() - start,
        results=results,
    )
