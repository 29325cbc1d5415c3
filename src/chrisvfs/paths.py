"""Virtual path resolution for the ChRIS namespace.

Everything here is a pure string transform. The current working directory is
always passed in by the caller; nothing is read from ambient state.
"""

from __future__ import annotations

import posixpath

from chrisvfs.exceptions import ResolutionError

ROOT = "/"


def _collapse(path: str) -> str:
    resolved = posixpath.normpath(path)
    # normpath keeps a leading "//" (implementation defined in POSIX)
    if resolved.startswith("//"):
        resolved = ROOT + resolved.lstrip("/")
    return resolved


def ensure_absolute(path: str) -> str:
    """Prefix ``path`` with ``/`` if it doesn't already have one."""
    return path if path.startswith(ROOT) else ROOT + path


def resolve_path(path: str, cwd: str = ROOT) -> str:
    """Resolve a user supplied path against ``cwd``.

    Args:
        path: Absolute, relative or empty path as typed by the user
        cwd: Current virtual working directory

    Returns:
        The absolute virtual path. An empty ``path`` returns ``cwd`` as is.
        A trailing ``/`` on ``path`` is kept since callers read it as a
        directory hint.

    Raises:
        ResolutionError: If the path contains a NUL byte
    """
    if "\x00" in path:
        raise ResolutionError(f"Invalid path: {path!r}")
    if not path:
        return cwd

    if path.startswith(ROOT):
        joined = path
    else:
        joined = posixpath.join(ensure_absolute(cwd or ROOT), path)

    resolved = _collapse(joined)
    if path.endswith("/") and resolved != ROOT:
        resolved += "/"
    return resolved


def split_path(path: str) -> tuple[str, str]:
    """Split an absolute path into (parent, basename).

    The parent of a top level entry is ``/``; the root splits into ("/", "").
    """
    trimmed = path.rstrip("/") or ROOT
    if trimmed == ROOT:
        return ROOT, ""
    parent, name = posixpath.split(trimmed)
    return parent or ROOT, name


def path_join(*parts: str) -> str:
    """Join path segments with POSIX semantics and collapse the result."""
    return _collapse(posixpath.join(*parts))


def has_directory_hint(path: str) -> bool:
    """True when the user marked ``path`` as a directory with a trailing slash."""
    return path.endswith("/")
