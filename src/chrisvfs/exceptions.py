"""Exception hierarchy for the chrisvfs library."""

from __future__ import annotations


class ChrisVFSError(Exception):
    """Base exception for all chrisvfs errors."""

    pass


class AuthenticationError(ChrisVFSError):
    """Raised when authentication fails."""

    pass


class SessionError(ChrisVFSError):
    """Raised when there's no usable session (no URL or no token)."""

    pass


class ResolutionError(ChrisVFSError):
    """Raised when a path string cannot be resolved."""

    pass


class NotFoundError(ChrisVFSError):
    """Raised when a remote path does not exist."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message or f"No such file or directory: {path}")
        self.path = path


class AmbiguousTargetError(ChrisVFSError):
    """Raised when a directory is given to an operation that expects a file."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message or f"Is a directory: {path}")
        self.path = path


class TransportError(ChrisVFSError):
    """Raised when the remote service rejects a call.

    ``kind`` names the resource collection (dirs, files, links) when the
    failure belongs to one listing query.
    """

    def __init__(self, message: str, kind: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind


class UploadError(ChrisVFSError):
    """Raised when a local upload source cannot be scanned or read."""

    pass


class DownloadError(ChrisVFSError):
    """Raised when a download target cannot be planned or written."""

    pass
