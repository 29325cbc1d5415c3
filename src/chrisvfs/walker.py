"""Recursive walk of a remote directory tree."""

from __future__ import annotations

import logging
import posixpath
from collections import deque
from dataclasses import dataclass, field

from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT, KINDS, FetchPolicy, fetch_resources
from chrisvfs.models import DirRow, ResourceKind, parse_row
from chrisvfs.paths import ROOT, path_join
from chrisvfs.protocols import ResourceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeEntry:
    """An object found below the walk root."""

    path: str
    relative: str
    size: int = 0


@dataclass
class RemoteTree:
    """Everything below one remote directory, split by kind."""

    root: str
    dirs: list[TreeEntry] = field(default_factory=list)
    files: list[TreeEntry] = field(default_factory=list)
    links: list[TreeEntry] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(entry.size for entry in self.files)


async def walk_tree(
    store: ResourceStore, root: str, *, limit: int = DEFAULT_PAGE_LIMIT
) -> RemoteTree:
    """Collect every directory, file and link below ``root``.

    Directories are visited breadth first, one listing at a time; links are
    reported but never followed. Each level is fetched ALL_OR_NOTHING; a
    failed listing aborts the walk.

    Raises:
        TransportError: If any directory below ``root`` can't be listed
    """
    root = root.rstrip("/") or ROOT
    tree = RemoteTree(root=root)
    pending: deque[tuple[str, str]] = deque([(root, "")])

    while pending:
        current, relative = pending.popleft()
        resources = await fetch_resources(store, current, FetchPolicy.ALL_OR_NOTHING, limit=limit)
        for kind in KINDS:
            for raw in resources.rows(kind):
                row = parse_row(kind, raw)
                if not row.name:
                    continue
                entry = TreeEntry(
                    path=path_join(current, row.name),
                    relative=posixpath.join(relative, row.name) if relative else row.name,
                    size=0 if isinstance(row, DirRow) else row.size,
                )
                if kind is ResourceKind.DIRS:
                    tree.dirs.append(entry)
                    pending.append((entry.path, entry.relative))
                elif kind is ResourceKind.FILES:
                    tree.files.append(entry)
                else:
                    tree.links.append(entry)

    tree.files.sort(key=lambda e: e.relative)
    logger.debug(
        f"Walked {root}: {len(tree.dirs)} dir(s), {len(tree.files)} file(s), {len(tree.links)} link(s)"
    )
    return tree
