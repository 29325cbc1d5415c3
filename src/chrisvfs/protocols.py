"""ResourceStore protocol: the remote operations the filesystem layer consumes.

The core modules (listing, existence, mover, copier, remover, uploader,
downloader) only ever talk to this interface.
``chrisvfs._internal.cube_client.CubeClient`` is the HTTP implementation;
tests use in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chrisvfs.models import ResourceKind


@runtime_checkable
class ResourceStore(Protocol):
    """Async interface to a remote directories/files/links namespace.

    Every method raises ``TransportError`` (or ``SessionError``) when the
    remote service rejects the call; boolean returns report whether the
    service accepted a mutation.
    """

    async def list_resources(
        self,
        kind: ResourceKind,
        parent_path: str,
        *,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Rows of one resource kind directly under ``parent_path``."""
        ...

    async def move_resource(self, src: str, dest: str) -> bool:
        """Relocate the object at absolute path ``src`` to ``dest``."""
        ...

    async def copy_resource(self, src: str, dest: str) -> bool:
        """Copy the file at absolute path ``src`` to ``dest``."""
        ...

    async def delete_resource(self, resource_id: int, kind: ResourceKind) -> bool:
        """Delete one object by id."""
        ...

    async def touch_file(self, path: str) -> bool:
        """Create an empty file at ``path``."""
        ...

    async def upload_file(self, content: bytes, remote_dir: str, filename: str) -> bool:
        """Store ``content`` as ``remote_dir/filename``."""
        ...

    async def create_folder(self, path: str) -> bool:
        """Create a folder at ``path``."""
        ...

    async def file_content(self, path: str) -> bytes | None:
        """Content of the file at ``path``, or None if there is no such file."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
