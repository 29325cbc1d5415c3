"""chrisvfs - Work with the ChRIS filesystem as one virtual filesystem.

Directories, files and links live in three separate CUBE collections;
chrisvfs resolves shell style paths and merges the three into one view.

Example usage:
    import asyncio
    from chrisvfs import ChrisClient, ChrisContext

    async def main():
        context = ChrisContext("~/.chrisvfs/context.json").load()
        async with ChrisClient(context=context) as client:
            listing = await client.ls("uploads")
            for item in listing.items:
                print(item.type, item.name)
            await client.mv("uploads/scan.dcm", "data/")
            await client.download("data/", "out")

    asyncio.run(main())
"""

from chrisvfs.client import ChrisClient
from chrisvfs.context import ChrisContext
from chrisvfs.copier import copy_path
from chrisvfs.downloader import pull_downloads, scan_download
from chrisvfs.exceptions import (
    AmbiguousTargetError,
    AuthenticationError,
    ChrisVFSError,
    DownloadError,
    NotFoundError,
    ResolutionError,
    SessionError,
    TransportError,
    UploadError,
)
from chrisvfs.existence import file_exists, find_path, is_directory
from chrisvfs.fetcher import FetchPolicy, fetch_resources
from chrisvfs.listing import list_path
from chrisvfs.models import (
    CopyResult,
    DownloadFileInfo,
    DownloadRecord,
    DownloadResult,
    DownloadSummary,
    ExistenceResult,
    FetchDiagnostic,
    ListingItem,
    ListingResult,
    MoveResult,
    RemoveResult,
    ResourceKind,
    ResourceSet,
    ScanRecord,
    UploadFileInfo,
    UploadResult,
    UploadSummary,
)
from chrisvfs.mover import move_path
from chrisvfs.paths import resolve_path
from chrisvfs.protocols import ResourceStore
from chrisvfs.remover import remove_path
from chrisvfs.sorting import sort_items
from chrisvfs.uploader import push_uploads, scan_upload
from chrisvfs.walker import walk_tree

__version__ = "0.1.0"

__all__ = [
    # Main client
    "ChrisClient",
    "ChrisContext",
    "ResourceStore",
    # Operations
    "resolve_path",
    "fetch_resources",
    "FetchPolicy",
    "list_path",
    "find_path",
    "is_directory",
    "file_exists",
    "move_path",
    "copy_path",
    "remove_path",
    "scan_upload",
    "push_uploads",
    "scan_download",
    "pull_downloads",
    "walk_tree",
    "sort_items",
    # Models
    "ResourceKind",
    "ResourceSet",
    "FetchDiagnostic",
    "ListingItem",
    "ListingResult",
    "ExistenceResult",
    "MoveResult",
    "RemoveResult",
    "CopyResult",
    "UploadFileInfo",
    "ScanRecord",
    "UploadResult",
    "UploadSummary",
    "DownloadFileInfo",
    "DownloadRecord",
    "DownloadResult",
    "DownloadSummary",
    # Exceptions
    "ChrisVFSError",
    "AuthenticationError",
    "SessionError",
    "ResolutionError",
    "NotFoundError",
    "AmbiguousTargetError",
    "TransportError",
    "UploadError",
    "DownloadError",
]
