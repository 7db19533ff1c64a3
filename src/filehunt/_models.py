"""Node types of the virtual file system.

Nodes are immutable pydantic models. A folder owns its children as a tuple,
so a tree value can be shared freely: every mutation in ``filehunt._tree``
builds new nodes along the changed path and leaves the old tree intact.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from ._enums import FileKind

TreePath: TypeAlias = tuple[str, ...]

ROOT_NAME = "This PC"
RECYCLE_BIN_NAME = "Recycle Bin"


class _NodeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    # Only set while the node sits in the Recycle Bin.
    original_path: tuple[str, ...] | None = None


class FileNode(_NodeBase):
    """A file leaf with the metadata the search filters work on."""

    type: Literal["file"] = "file"
    kind: FileKind
    size_kb: int = Field(ge=0)
    modified_at: datetime

    @property
    def is_container(self) -> bool:
        return False


class FolderNode(_NodeBase):
    """A folder or a drive. Children order is display order only."""

    type: Literal["folder", "drive"] = "folder"
    children: tuple[Node, ...] = ()

    @property
    def is_container(self) -> bool:
        return True

    def child(self, name: str) -> Node | None:
        """Return the first child called ``name``, or None."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def has_child(self, name: str) -> bool:
        return self.child(name) is not None


Node = Annotated[FileNode | FolderNode, Field(discriminator="type")]

FolderNode.model_rebuild()
