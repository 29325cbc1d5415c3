"""Data models for the chrisvfs library."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Union

# Suffix CUBE appends to the file objects that back a link
LINK_SUFFIX = ".chrislink"

UNKNOWN_OWNER = "unknown"

ItemType = Literal["dir", "file", "link"]


class ResourceKind(str, Enum):
    """The three resource collections that make up one remote directory."""

    DIRS = "dirs"
    FILES = "files"
    LINKS = "links"

    @property
    def item_type(self) -> ItemType:
        """Listing type reported for rows of this kind."""
        return _ITEM_TYPES[self]

    @classmethod
    def for_item_type(cls, item_type: str) -> ResourceKind:
        """Inverse of ``item_type``."""
        for kind, name in _ITEM_TYPES.items():
            if name == item_type:
                return kind
        raise ValueError(f"Unknown item type: {item_type}")


_ITEM_TYPES: dict[ResourceKind, ItemType] = {
    ResourceKind.DIRS: "dir",
    ResourceKind.FILES: "file",
    ResourceKind.LINKS: "link",
}


def _basename(value: str) -> str:
    """Final segment of a slash separated path."""
    trimmed = value.rstrip("/")
    if not trimmed:
        return value
    return trimmed.rsplit("/", 1)[-1]


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class DirRow:
    """A directory entry as returned by the folder listing."""

    id: int | None
    fname: str
    path: str
    owner: str | None
    date: str | None

    @property
    def name(self) -> str:
        return _basename(self.fname or self.path)


@dataclass(frozen=True)
class FileRow:
    """A regular file entry."""

    id: int | None
    fname: str
    path: str
    size: int
    owner: str | None
    date: str | None

    @property
    def name(self) -> str:
        return _basename(self.fname or self.path)


@dataclass(frozen=True)
class LinkRow:
    """A link entry.

    ``fname`` is the backing ``.chrislink`` object, ``path`` is the link
    destination as stored by CUBE (often without a leading slash).
    """

    id: int | None
    fname: str
    path: str
    size: int
    owner: str | None
    date: str | None

    @property
    def stored_name(self) -> str:
        """Basename including the link suffix."""
        return _basename(self.fname or self.path)

    @property
    def name(self) -> str:
        name = self.stored_name
        if name.endswith(LINK_SUFFIX) and len(name) > len(LINK_SUFFIX):
            return name[: -len(LINK_SUFFIX)]
        return name

    @property
    def target(self) -> str:
        return self.path if self.path.startswith("/") else "/" + self.path


ResourceRow = Union[DirRow, FileRow, LinkRow]


def parse_row(kind: ResourceKind, raw: dict[str, Any]) -> ResourceRow:
    """Parse a loosely typed API row into the row type for ``kind``."""
    row_id = raw.get("id") or None
    fname = raw.get("fname") or ""
    path = raw.get("path") or ""
    owner = raw.get("owner_username") or None
    date = raw.get("creation_date") or None

    if kind is ResourceKind.DIRS:
        return DirRow(id=row_id, fname=fname, path=path, owner=owner, date=date)
    if kind is ResourceKind.FILES:
        return FileRow(
            id=row_id,
            fname=fname,
            path=path,
            size=_as_int(raw.get("fsize")),
            owner=owner,
            date=date,
        )
    return LinkRow(
        id=row_id,
        fname=fname,
        path=path,
        size=_as_int(raw.get("fsize")),
        owner=owner,
        date=date,
    )


@dataclass(frozen=True)
class ListingItem:
    """One entry of a merged directory listing."""

    name: str
    type: ItemType
    size: int = 0
    owner: str = UNKNOWN_OWNER
    date: str = ""
    target: str | None = None


@dataclass(frozen=True)
class FetchDiagnostic:
    """A resource kind that could not be listed during a best-effort fetch."""

    kind: ResourceKind
    path: str
    message: str


@dataclass(frozen=True)
class ResourceSet:
    """Raw rows of the three resource kinds found at one parent path."""

    path: str
    dirs: list[dict[str, Any]] = field(default_factory=list)
    files: list[dict[str, Any]] = field(default_factory=list)
    links: list[dict[str, Any]] = field(default_factory=list)
    diagnostics: tuple[FetchDiagnostic, ...] = ()

    def rows(self, kind: ResourceKind) -> list[dict[str, Any]]:
        """Raw rows for one kind."""
        if kind is ResourceKind.DIRS:
            return self.dirs
        if kind is ResourceKind.FILES:
            return self.files
        return self.links


@dataclass(frozen=True)
class ListingResult:
    """Result of listing a remote directory."""

    path: str
    items: list[ListingItem]
    diagnostics: tuple[FetchDiagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics


@dataclass(frozen=True)
class ExistenceResult:
    """A remote object found by path."""

    type: ItemType
    id: int
    name: str

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.for_item_type(self.type)


@dataclass(frozen=True)
class MoveResult:
    """Result of a move operation."""

    success: bool
    source: str
    destination: str
    error: str | None = None


@dataclass(frozen=True)
class RemoveResult:
    """Result of a remove operation."""

    success: bool
    path: str
    type: ItemType | None
    error: str | None = None


@dataclass(frozen=True)
class UploadFileInfo:
    """One planned transfer from the local disk to ChRIS."""

    host_path: str
    chris_path: str
    size: int


@dataclass(frozen=True)
class ScanRecord:
    """Every file found under an upload source, with their total size."""

    files: list[UploadFileInfo]
    total_size: int


@dataclass(frozen=True)
class UploadResult:
    """Result of uploading a single file."""

    success: bool
    host_path: str
    chris_path: str
    error: str | None = None


@dataclass(frozen=True)
class UploadSummary:
    """Totals for a sequential upload run."""

    total_files: int
    uploaded_count: int
    failed_count: int
    uploaded_size: int
    duration: float
    results: list[UploadResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    @property
    def speed(self) -> float:
        """Average transfer rate in bytes per second."""
        if self.duration <= 0:
            return 0.0
        return self.uploaded_size / self.duration


@dataclass(frozen=True)
class CopyResult:
    """Result of a copy operation.

    ``copied`` counts the files copied; ``failed`` lists the source paths that
    could not be copied during a recursive copy.
    """

    success: bool
    source: str
    destination: str
    copied: int = 0
    failed: tuple[str, ...] = ()
    error: str | None = None


@dataclass(frozen=True)
class DownloadFileInfo:
    """One planned transfer from ChRIS to the local disk."""

    chris_path: str
    host_path: str
    size: int


@dataclass(frozen=True)
class DownloadRecord:
    """Every remote file found under a download source, with their total size.

    ``target`` is the local file, or the local directory that mirrors the
    remote one when ``directory`` is set.
    """

    files: list[DownloadFileInfo]
    total_size: int
    target: str
    directory: bool = False


@dataclass(frozen=True)
class DownloadResult:
    """Result of downloading a single file."""

    success: bool
    chris_path: str
    host_path: str
    error: str | None = None


@dataclass(frozen=True)
class DownloadSummary:
    """Totals for a sequential download run."""

    total_files: int
    downloaded_count: int
    failed_count: int
    downloaded_size: int
    duration: float
    results: list[DownloadResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    @property
    def speed(self) -> float:
        """Average transfer rate in bytes per second."""
        if self.duration <= 0:
            return 0.0
        return self.downloaded_size / self.duration
