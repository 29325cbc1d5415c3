"""Main ChrisClient class: shell style file operations on a ChRIS backend."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from chrisvfs._internal.cube_client import CubeClient
from chrisvfs.context import ChrisContext
from chrisvfs.copier import copy_path
from chrisvfs.downloader import DownloadProgressCallback, pull_downloads, scan_download
from chrisvfs.exceptions import (
    AmbiguousTargetError,
    AuthenticationError,
    ChrisVFSError,
    NotFoundError,
    SessionError,
)
from chrisvfs.existence import find_path, is_directory
from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT
from chrisvfs.listing import DEFAULT_SORT_FIELD, list_path
from chrisvfs.models import (
    CopyResult,
    DownloadRecord,
    DownloadSummary,
    ExistenceResult,
    ListingResult,
    MoveResult,
    RemoveResult,
    ScanRecord,
    UploadSummary,
)
from chrisvfs.mover import move_path
from chrisvfs.paths import ROOT
from chrisvfs.protocols import ResourceStore
from chrisvfs.remover import remove_path
from chrisvfs.uploader import ProgressCallback, push_uploads, scan_upload

logger = logging.getLogger(__name__)


class ChrisClient:
    """Client for working with the ChRIS filesystem like a shell.

    Paths may be relative; they are resolved against the working directory
    kept in the ``ChrisContext``.

    Example (context manager - recommended):
        async with ChrisClient(context=ChrisContext(path).load()) as client:
            listing = await client.ls("uploads")

    Example (explicit login):
        client = ChrisClient("https://cube.example.org/api/v1/")
        await client.login("chris", "chris1234")
        await client.mv("uploads/scan.dcm", "data/")
        await client.close()
    """

    def __init__(
        self,
        url: str | None = None,
        token: str | None = None,
        *,
        context: ChrisContext | None = None,
        store: ResourceStore | None = None,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            url: CUBE API URL (defaults to the context's URL)
            token: API token (defaults to the context's token)
            context: Session context holding the working directory
            store: ResourceStore to use instead of an HTTP client
            page_limit: Page size for listing queries
            timeout: HTTP timeout in seconds
        """
        self._context = context or ChrisContext()
        self._url = url or self._context.url
        self._token = token or self._context.token
        self._store = store
        self._external_store = store is not None
        self._page_limit = page_limit
        self._timeout = timeout

    async def __aenter__(self) -> ChrisClient:
        """Enter context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit context manager."""
        await self.close()

    @property
    def context(self) -> ChrisContext:
        return self._context

    @property
    def is_authenticated(self) -> bool:
        """Check if the client has a token (or was given a store)."""
        return self._external_store or bool(self._token)

    def _ensure_authenticated(self) -> None:
        if not self.is_authenticated:
            raise SessionError("Not authenticated. Call login() first.")

    def _get_store(self) -> ResourceStore:
        """Get the ResourceStore, creating the HTTP client if needed."""
        self._ensure_authenticated()
        if self._store is None:
            if not self._url:
                raise SessionError("No ChRIS URL configured")
            self._store = CubeClient(self._url, self._token, timeout=self._timeout)
        return self._store

    async def login(
        self,
        username: str | None = None,
        password: str | None = None,
        *,
        url: str | None = None,
    ) -> str:
        """Login to ChRIS and store the session in the context.

        Returns:
            API token on success

        Raises:
            AuthenticationError: If login fails
            SessionError: If no URL is known
        """
        url = url or self._url
        if not url:
            raise SessionError("No ChRIS URL configured")
        if not username or not password:
            raise AuthenticationError("Username and password are required")

        cube = CubeClient(url, timeout=self._timeout)
        try:
            token = await cube.login(username, password)
        except ChrisVFSError:
            await cube.close()
            raise

        if self._store is not None and not self._external_store:
            await self._store.close()
        self._store = cube
        self._external_store = False
        self._url = url
        self._token = token
        self._context.set_session(url, username, token)
        logger.info(f"Logged in to {url} as {username}")
        return token

    async def logout(self) -> None:
        """Forget the token and working directory."""
        self._context.clear_session()
        self._token = None
        await self.close()

    def pwd(self) -> str:
        """Current working directory."""
        return self._context.cwd

    async def cd(self, path: str = "") -> str:
        """Change the working directory.

        An empty path goes to the home folder.

        Raises:
            NotFoundError: If the target isn't an existing directory
        """
        store = self._get_store()
        target = self._context.resolve(path) if path else self._context.home
        target = target.rstrip("/") or ROOT
        if not await is_directory(store, target, limit=self._page_limit):
            raise NotFoundError(target, f"Not a directory: {target}")
        self._context.set_cwd(target)
        return target

    async def ls(
        self,
        path: str = "",
        *,
        sort_field: str | None = DEFAULT_SORT_FIELD,
        reverse: bool = False,
    ) -> ListingResult:
        """List dirs, files and links at ``path``."""
        return await list_path(
            self._get_store(),
            path,
            cwd=self._context.cwd,
            sort_field=sort_field,
            reverse=reverse,
            limit=self._page_limit,
        )

    async def find(self, path: str) -> ExistenceResult | None:
        """Look up the object at ``path``."""
        return await find_path(self._get_store(), self._context.resolve(path), limit=self._page_limit)

    async def mv(self, src: str, dest: str) -> MoveResult:
        """Move or rename ``src`` to ``dest``."""
        return await move_path(
            self._get_store(), src, dest, cwd=self._context.cwd, limit=self._page_limit
        )

    async def cp(self, src: str, dest: str, *, recursive: bool = False) -> CopyResult:
        """Copy ``src`` to ``dest`` (directories need ``recursive``)."""
        return await copy_path(
            self._get_store(),
            src,
            dest,
            cwd=self._context.cwd,
            recursive=recursive,
            limit=self._page_limit,
        )

    async def rm(self, path: str, *, recursive: bool = False) -> RemoveResult:
        """Remove a file or link (or a directory with ``recursive``)."""
        return await remove_path(
            self._get_store(),
            path,
            cwd=self._context.cwd,
            recursive=recursive,
            limit=self._page_limit,
        )

    async def touch(self, path: str) -> bool:
        """Create an empty file."""
        resolved = self._context.resolve(path)
        try:
            created = await self._get_store().touch_file(resolved)
        except ChrisVFSError as e:
            logger.error(f"Failed to create {resolved}: {e}")
            return False
        if created:
            logger.info(f"Created file: {resolved}")
        return created

    async def mkdir(self, path: str) -> bool:
        """Create a folder."""
        resolved = self._context.resolve(path).rstrip("/") or ROOT
        try:
            created = await self._get_store().create_folder(resolved)
        except ChrisVFSError as e:
            logger.error(f"Failed to create folder {resolved}: {e}")
            return False
        if created:
            logger.info(f"Created folder: {resolved}")
        return created

    async def cat(self, path: str) -> bytes:
        """Content of a remote file.

        Raises:
            AmbiguousTargetError: If ``path`` is a directory
            NotFoundError: If there's no file at ``path``
        """
        store = self._get_store()
        resolved = self._context.resolve(path).rstrip("/") or ROOT
        content = await store.file_content(resolved)
        if content is not None:
            return content
        found = await find_path(store, resolved, limit=self._page_limit)
        if found is not None and found.type == "dir":
            raise AmbiguousTargetError(resolved)
        raise NotFoundError(resolved)

    def plan_upload(self, local_path: str | Path, remote_path: str = "") -> ScanRecord:
        """Scan a local file or directory for upload to ``remote_path``."""
        return scan_upload(local_path, self._context.resolve(remote_path))

    async def push(
        self, record: ScanRecord, *, progress: ProgressCallback | None = None
    ) -> UploadSummary:
        """Upload a planned ScanRecord, one file at a time."""
        return await push_uploads(self._get_store(), record, progress=progress)

    async def upload(
        self,
        local_path: str | Path,
        remote_path: str = "",
        *,
        progress: ProgressCallback | None = None,
    ) -> UploadSummary:
        """Upload a local file or directory tree.

        Args:
            local_path: Local file or directory
            remote_path: Remote directory, relative to the working directory
            progress: Called after each file

        Raises:
            UploadError: If the local path can't be scanned
        """
        record = self.plan_upload(local_path, remote_path)
        return await self.push(record, progress=progress)

    async def plan_download(
        self, remote_path: str, local_path: str | Path = ".", *, force: bool = False
    ) -> DownloadRecord:
        """Plan the download of ``remote_path`` (relative to the working directory)."""
        return await scan_download(
            self._get_store(),
            self._context.resolve(remote_path),
            local_path,
            force=force,
            limit=self._page_limit,
        )

    async def pull(
        self, record: DownloadRecord, *, progress: DownloadProgressCallback | None = None
    ) -> DownloadSummary:
        """Download a planned DownloadRecord, one file at a time."""
        return await pull_downloads(self._get_store(), record, progress=progress)

    async def download(
        self,
        remote_path: str,
        local_path: str | Path = ".",
        *,
        force: bool = False,
        progress: DownloadProgressCallback | None = None,
    ) -> DownloadSummary:
        """Download a remote file or directory tree.

        Raises:
            NotFoundError: If there's nothing to download at ``remote_path``
            DownloadError: If the local target exists and ``force`` is off
        """
        record = await self.plan_download(remote_path, local_path, force=force)
        return await self.pull(record, progress=progress)

    async def close(self) -> None:
        """Close the client and clean up resources."""
        if self._store is not None and not self._external_store:
            await self._store.close()
        if not self._external_store:
            self._store = None
