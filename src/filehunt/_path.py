"""Tuple paths over the node tree: parsing, formatting and resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._models import RECYCLE_BIN_NAME, FolderNode, Node, TreePath

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence

logger = logging.getLogger(__name__)

SEPARATOR = "/"


def parse_path(path_str: str) -> TreePath:
    """Split ``"This PC/Documents/Resurse 2023"`` into its segments.

    Empty segments (leading, trailing or doubled separators) are dropped.
    """
    return tuple(segment.strip() for segment in path_str.split(SEPARATOR) if segment.strip())


def format_path(path: Sequence[str]) -> str:
    return SEPARATOR.join(path)


def is_prefix(prefix: Sequence[str], path: Sequence[str]) -> bool:
    """Check whether ``prefix`` addresses ``path`` or one of its ancestors."""
    return len(prefix) <= len(path) and tuple(path[: len(prefix)]) == tuple(prefix)


def recycle_bin_path(root: Node) -> TreePath:
    return (root.name, RECYCLE_BIN_NAME)


def in_recycle_bin(root: Node, path: Sequence[str]) -> bool:
    """Check whether ``path`` is the Recycle Bin itself or passes through it."""
    return is_prefix(recycle_bin_path(root), path)


def resolve(tree: Node, path: Sequence[str]) -> Node | None:
    """Walk ``path`` from the root, matching each segment to a child by name.

    The first segment must be the root's own name. Returns None when the path
    is empty, a segment has no matching child, or an intermediate node is a
    file.
    """
    if not path or path[0] != tree.name:
        return None

    current: Node = tree
    for segment in path[1:]:
        if not isinstance(current, FolderNode):
            return None
        found = current.child(segment)
        if found is None:
            return None
        current = found
    return current


def iter_nodes(tree: Node, *, _current_path: TreePath | None = None) -> Generator[tuple[Node, TreePath]]:
    """Yield ``(node, path)`` for every node, parents before children."""
    path = _current_path if _current_path is not None else (tree.name,)
    yield tree, path
    if isinstance(tree, FolderNode):
        for child in tree.children:
            yield from iter_nodes(child, _current_path=(*path, child.name))
