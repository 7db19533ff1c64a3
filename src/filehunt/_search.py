"""Name search over the whole tree and filtered folder listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._enums import FileKind, SizeComparison
from ._models import FileNode, FolderNode, Node, TreePath
from ._path import format_path, in_recycle_bin, iter_nodes, resolve

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class SizeFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    comparison: SizeComparison
    value: int = Field(ge=0, description="Size threshold in KB")

    def accepts(self, size_kb: int) -> bool:
        match self.comparison:
            case SizeComparison.GT:
                return size_kb > self.value
            case SizeComparison.LT:
                return size_kb < self.value


class DateFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    since: datetime

    @field_validator("since")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Naive datetimes (e.g. from the command line) are taken as UTC."""
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class SearchFilters(BaseModel):
    """Advanced filters of the explorer search bar. Every filter is optional."""

    model_config = ConfigDict(frozen=True)

    type: FileKind | None = None
    size: SizeFilter | None = None
    date: DateFilter | None = None

    @property
    def is_empty(self) -> bool:
        return self.type is None and self.size is None and self.date is None

    def accepts(self, node: Node) -> bool:
        """Check a node against the filters. Folders always pass."""
        if not isinstance(node, FileNode):
            return True
        if self.type is not None and node.kind != self.type:
            return False
        if self.size is not None and not self.size.accepts(node.size_kb):
            return False
        return not (self.date is not None and node.modified_at < self.date.since)


@dataclass(frozen=True, slots=True)
class SearchHit:
    node: Node
    path: TreePath


def search(tree: Node, query: str) -> list[SearchHit]:
    """Find every node whose name contains ``query``, ignoring case.

    The scan is a pre-order walk from the root, so parents come before their
    children and siblings keep their stored order. The root is never a hit,
    and nothing in the Recycle Bin (nor the bin itself) is returned. A blank
    query finds nothing.
    """
    if not query.strip():
        return []

    needle = query.lower()
    hits = [
        SearchHit(node=node, path=path)
        for node, path in iter_nodes(tree)
        if len(path) > 1 and not in_recycle_bin(tree, path) and needle in node.name.lower()
    ]
    logger.debug(f"search {query!r}: {len(hits)} hit(s)")
    return hits


class SortKey(StrEnum):
    NAME = "name"
    KIND = "kind"
    MODIFIED_AT = "modified_at"
    SIZE_KB = "size_kb"


@dataclass(frozen=True, slots=True)
class SortSpec:
    key: SortKey = SortKey.NAME
    descending: bool = False


def _sort_value(node: Node, key: SortKey) -> str | float:
    match key:
        case SortKey.NAME:
            return node.name.casefold()
        case SortKey.KIND:
            return node.kind.value if isinstance(node, FileNode) else "folder"
        case SortKey.MODIFIED_AT:
            return node.modified_at.timestamp() if isinstance(node, FileNode) else 0.0
        case SortKey.SIZE_KB:
            return node.size_kb if isinstance(node, FileNode) else -1


def list_folder(
    tree: Node,
    path: Sequence[str],
    *,
    query: str = "",
    filters: SearchFilters | None = None,
    sort: SortSpec | None = None,
) -> list[Node]:
    """List the children of the folder at ``path`` the way the explorer pane shows them.

    Children are kept when their name contains ``query`` (ignoring case) and
    they pass ``filters``. Folders are listed before files; each group is
    ordered by ``sort``. Returns an empty list when ``path`` is not a folder.
    """
    folder = resolve(tree, path)
    if not isinstance(folder, FolderNode):
        logger.debug(f"list_folder: no folder at '{format_path(path)}'")
        return []

    filters = filters or SearchFilters()
    sort = sort or SortSpec()
    needle = query.lower()
    visible = [child for child in folder.children if needle in child.name.lower() and filters.accepts(child)]

    def ordered(nodes: list[Node]) -> list[Node]:
        return sorted(nodes, key=lambda n: _sort_value(n, sort.key), reverse=sort.descending)

    folders = ordered([n for n in visible if isinstance(n, FolderNode)])
    files = ordered([n for n in visible if isinstance(n, FileNode)])
    return folders + files
