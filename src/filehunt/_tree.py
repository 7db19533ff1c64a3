"""Copy-on-write operations on the virtual file system.

Every operation takes a tree and returns a tree; the input is never modified.
Only the nodes along the changed path are rebuilt, untouched subtrees are
shared between the old and the new value. Failures (unknown path, duplicate
name, missing restore target) leave the tree unchanged instead of raising.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Literal

from ._models import RECYCLE_BIN_NAME, ROOT_NAME, FolderNode, Node, TreePath
from ._path import format_path, in_recycle_bin, recycle_bin_path, resolve

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


def new_folder(name: str, *, type: Literal["folder", "drive"] = "folder") -> FolderNode:  # noqa: A002
    """Build an empty folder with a fresh identifier."""
    return FolderNode(id=f"folder-{uuid.uuid4().hex}", name=name, type=type)


def recycle_bin_path_of(node: Node, *, root_name: str = ROOT_NAME) -> TreePath:
    """Return the path a soft-deleted node is addressed by inside the Recycle Bin."""
    return (root_name, RECYCLE_BIN_NAME, node.name)


def _child_index(folder: FolderNode, name: str) -> int | None:
    for index, child in enumerate(folder.children):
        if child.name == name:
            return index
    return None


def _update_at(tree: Node, path: Sequence[str], update: Callable[[Node], Node]) -> Node:
    """Rebuild ``tree`` with ``update`` applied to the node at ``path``.

    ``path`` must resolve in ``tree``; callers check that first. Duplicate
    sibling names follow the same first-match rule as ``resolve``.
    """
    if len(path) == 1:
        return update(tree)

    if not isinstance(tree, FolderNode):
        msg = f"Cannot descend into file '{tree.name}'"
        raise TypeError(msg)
    index = _child_index(tree, path[1])
    if index is None:
        msg = f"No child named '{path[1]}' in '{tree.name}'"
        raise KeyError(msg)

    children = list(tree.children)
    children[index] = _update_at(children[index], path[1:], update)
    return tree.model_copy(update={"children": tuple(children)})


def _append_child(node: Node) -> Callable[[Node], Node]:
    def update(parent: Node) -> Node:
        assert isinstance(parent, FolderNode)
        return parent.model_copy(update={"children": (*parent.children, node)})

    return update


def _remove_child(name: str) -> Callable[[Node], Node]:
    def update(parent: Node) -> Node:
        assert isinstance(parent, FolderNode)
        index = _child_index(parent, name)
        assert index is not None
        return parent.model_copy(update={"children": parent.children[:index] + parent.children[index + 1 :]})

    return update


def add(tree: Node, parent_path: Sequence[str], node: Node) -> Node:
    """Append ``node`` to the folder at ``parent_path``.

    Returns the tree unchanged when the parent does not resolve, is a file,
    or already has a child with the same name.
    """
    parent = resolve(tree, parent_path)
    if not isinstance(parent, FolderNode):
        logger.debug(f"add: no folder at '{format_path(parent_path)}'")
        return tree
    if parent.has_child(node.name):
        logger.debug(f"add: '{node.name}' already exists in '{format_path(parent_path)}'")
        return tree
    return _update_at(tree, parent_path, _append_child(node))


def rename(tree: Node, path: Sequence[str], new_name: str) -> Node:
    """Rename the node at ``path``.

    Sibling names are not re-checked, so a rename can produce two children
    with the same name. The root and the Recycle Bin keep their fixed names.
    """
    path = tuple(path)
    if len(path) < 2 or path == recycle_bin_path(tree):
        logger.debug(f"rename: '{format_path(path)}' cannot be renamed")
        return tree
    if resolve(tree, path) is None:
        logger.debug(f"rename: nothing at '{format_path(path)}'")
        return tree
    return _update_at(tree, path, lambda node: node.model_copy(update={"name": new_name}))


def soft_delete(tree: Node, path: Sequence[str]) -> Node:
    """Move the node at ``path`` into the Recycle Bin, remembering where it was.

    The root, the Recycle Bin itself and nodes already in the bin are left
    alone.
    """
    path = tuple(path)
    if len(path) < 2 or in_recycle_bin(tree, path):
        logger.debug(f"soft_delete: '{format_path(path)}' cannot be deleted")
        return tree

    node = resolve(tree, path)
    parent = resolve(tree, path[:-1])
    bin_path = recycle_bin_path(tree)
    recycle_bin = resolve(tree, bin_path)
    if node is None or not isinstance(parent, FolderNode) or not isinstance(recycle_bin, FolderNode):
        logger.debug(f"soft_delete: nothing to delete at '{format_path(path)}'")
        return tree

    deleted = node.model_copy(update={"original_path": path})
    without_node = _update_at(tree, path[:-1], _remove_child(node.name))
    logger.debug(f"Moved '{format_path(path)}' to the Recycle Bin")
    return _update_at(without_node, bin_path, _append_child(deleted))


def restore(tree: Node, bin_path: Sequence[str]) -> Node:
    """Move a Recycle Bin resident back under the parent of its original path.

    The node stays in the bin when it has no original path, when that parent
    no longer exists, or when the parent already has a child with its name.
    """
    bin_path = tuple(bin_path)
    if bin_path[:-1] != recycle_bin_path(tree):
        logger.debug(f"restore: '{format_path(bin_path)}' is not in the Recycle Bin")
        return tree

    node = resolve(tree, bin_path)
    if node is None or node.original_path is None:
        logger.debug(f"restore: nothing restorable at '{format_path(bin_path)}'")
        return tree

    original_parent_path = node.original_path[:-1]
    original_parent = resolve(tree, original_parent_path)
    if not isinstance(original_parent, FolderNode):
        logger.debug(f"restore: original folder '{format_path(original_parent_path)}' is gone")
        return tree
    if original_parent.has_child(node.name):
        logger.debug(f"restore: '{node.name}' already exists in '{format_path(original_parent_path)}'")
        return tree

    restored = node.model_copy(update={"original_path": None})
    without_node = _update_at(tree, bin_path[:-1], _remove_child(node.name))
    logger.debug(f"Restored '{node.name}' to '{format_path(original_parent_path)}'")
    return _update_at(without_node, original_parent_path, _append_child(restored))


def delete_permanently(tree: Node, path: Sequence[str]) -> Node:
    """Acknowledge a permanent delete request; data is never removed."""
    logger.debug(f"delete_permanently: ignored for '{format_path(path)}'")
    return tree
