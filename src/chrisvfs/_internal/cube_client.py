"""httpx client for the ChRIS backend (CUBE) REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from chrisvfs.exceptions import AuthenticationError, SessionError, TransportError
from chrisvfs.existence import find_path
from chrisvfs.models import LINK_SUFFIX, ResourceKind
from chrisvfs.paths import path_join, split_path

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "chrisvfs/0.1.0"

# Sub-collections of a filebrowser folder, per resource kind
_LIST_ENDPOINTS: dict[ResourceKind, str] = {
    ResourceKind.DIRS: "children",
    ResourceKind.FILES: "files",
    ResourceKind.LINKS: "linkfiles",
}

_DETAIL_ENDPOINTS: dict[ResourceKind, str] = {
    ResourceKind.DIRS: "filebrowser/{id}/",
    ResourceKind.FILES: "userfiles/{id}/",
    ResourceKind.LINKS: "filebrowser/linkfiles/{id}/",
}

_MOVE_FIELDS: dict[ResourceKind, str] = {
    ResourceKind.DIRS: "path",
    ResourceKind.FILES: "upload_path",
    ResourceKind.LINKS: "upload_path",
}


def cube_path(path: str) -> str:
    """CUBE stores paths without the leading slash."""
    return path.strip("/")


def _results(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, dict):
        return list(payload.get("results") or [])
    if isinstance(payload, list):
        return payload
    return []


class CubeClient:
    """Async ResourceStore backed by a CUBE instance.

    Example:
        async with CubeClient("https://cube.example.org/api/v1/", token) as cube:
            rows = await cube.list_resources(ResourceKind.FILES, "/home/chris", limit=100)
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = url.rstrip("/") + "/"
        self._access_token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json", "User-Agent": DEFAULT_USER_AGENT},
        )

    async def __aenter__(self) -> CubeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def token(self) -> str | None:
        return self._access_token

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._access_token:
            headers["Authorization"] = f"Token {self._access_token}"
        return headers

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        """Make an authenticated request, translating httpx failures."""
        try:
            response = await self._client.request(method, endpoint, headers=self._headers(), **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise SessionError(f"Not authorized for {method} {endpoint} (HTTP {status})") from e
            raise TransportError(f"{method} {endpoint} failed: HTTP {status}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {endpoint} failed: {e}") from e

    async def _api_call(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        response = await self._request(method, endpoint, **kwargs)
        if not response.content:
            return {}
        return response.json()

    async def login(self, username: str, password: str) -> str:
        """Exchange credentials for an API token.

        Raises:
            AuthenticationError: If CUBE rejects the credentials
            TransportError: If CUBE can't be reached
        """
        try:
            response = await self._client.post(
                "auth-token/", json={"username": username, "password": password}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (400, 401, 403):
                raise AuthenticationError("Invalid username or password") from e
            raise TransportError(f"Login failed: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Login failed: {e}") from e

        token = response.json().get("token")
        if not token:
            raise AuthenticationError("No token in login response")
        self._access_token = str(token)
        return self._access_token

    async def folder_id(self, path: str) -> int | None:
        """Id of the filebrowser folder at ``path``, or None."""
        payload = await self._api_call("GET", "filebrowser/search/", params={"path": cube_path(path)})
        for row in _results(payload):
            if cube_path(str(row.get("path", ""))) == cube_path(path) and row.get("id"):
                return int(row["id"])
        return None

    async def list_resources(
        self,
        kind: ResourceKind,
        parent_path: str,
        *,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Rows of one kind under ``parent_path``; empty if the folder doesn't exist."""
        fid = await self.folder_id(parent_path)
        if fid is None:
            return []
        payload = await self._api_call(
            "GET",
            f"filebrowser/{fid}/{_LIST_ENDPOINTS[kind]}/",
            params={"limit": limit, "offset": offset},
        )
        return _results(payload)

    async def move_resource(self, src: str, dest: str) -> bool:
        found = await find_path(self, src)
        if found is None:
            return False
        target = cube_path(dest)
        if found.kind is ResourceKind.LINKS and not target.endswith(LINK_SUFFIX):
            target += LINK_SUFFIX
        await self._api_call(
            "PUT",
            _DETAIL_ENDPOINTS[found.kind].format(id=found.id),
            json={_MOVE_FIELDS[found.kind]: target},
        )
        return True

    async def copy_resource(self, src: str, dest: str) -> bool:
        """Copy a file by downloading it and uploading it under ``dest``."""
        content = await self.file_content(src)
        if content is None:
            logger.warning(f"Cannot copy {src}: not a file")
            return False
        parent, name = split_path(dest)
        if not name:
            return False
        return await self.upload_file(content, parent, name)

    async def delete_resource(self, resource_id: int, kind: ResourceKind) -> bool:
        await self._api_call("DELETE", _DETAIL_ENDPOINTS[kind].format(id=resource_id))
        return True

    async def upload_file(self, content: bytes, remote_dir: str, filename: str) -> bool:
        await self._api_call(
            "POST",
            "userfiles/",
            data={"upload_path": cube_path(path_join(remote_dir, filename))},
            files={"fname": (filename, content)},
        )
        return True

    async def touch_file(self, path: str) -> bool:
        parent, name = split_path(path)
        if not name:
            return False
        return await self.upload_file(b"", parent, name)

    async def create_folder(self, path: str) -> bool:
        await self._api_call("POST", "filebrowser/", json={"path": cube_path(path)})
        return True

    async def file_content(self, path: str) -> bytes | None:
        parent, name = split_path(path)
        rows = await self.list_resources(ResourceKind.FILES, parent, limit=1000)
        for row in rows:
            fname = str(row.get("fname", ""))
            if fname.rsplit("/", 1)[-1] == name and row.get("file_resource"):
                response = await self._request("GET", str(row["file_resource"]))
                return response.content
        return None

    async def close(self) -> None:
        """Close the HTTP connection pool."""
        await self._client.aclose()
