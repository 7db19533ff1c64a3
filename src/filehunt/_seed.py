"""The fixed file system every exercise session starts from.

The layout, the target file and its decoys are fixed. Filler files are
generated from a seeded random generator so that two sessions built with
the same seed see the same tree.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

from ._enums import FileKind
from ._models import RECYCLE_BIN_NAME, ROOT_NAME, FileNode, FolderNode, Node

DEFAULT_SEED = 2023

_NOUNS = ("Raport", "Document", "Prezentare", "Buget", "Factura", "Contract", "Proiect", "Notite", "Plan")
_ADJECTIVES = ("Final", "Provizoriu", "Revizuit", "Anual", "Trimestrial", "Urgent", "Important")
_IMAGE_PREFIXES = ("IMG", "DSC", "FOTO", "VACANTA", "SCREENSHOT")
_FILLER_KINDS = (FileKind.PDF, FileKind.SPREADSHEET, FileKind.WORD, FileKind.PNG, FileKind.JPG, FileKind.TEXT)


def _random_file(file_id: str, rng: random.Random, now: datetime) -> FileNode:
    kind = rng.choice(_FILLER_KINDS)
    if kind in (FileKind.PNG, FileKind.JPG):
        name = f"{rng.choice(_IMAGE_PREFIXES)}_{rng.randint(1000, 9999)}.{kind}"
    else:
        name = f"{rng.choice(_NOUNS)}-{rng.choice(_ADJECTIVES)}-{rng.randint(1, 100)}.{kind}"
    return FileNode(
        id=file_id,
        name=name,
        kind=kind,
        size_kb=rng.randint(10, 8000),
        modified_at=now - timedelta(days=rng.randint(1, 365)),
    )


def _random_files(count: int, id_prefix: str, rng: random.Random, now: datetime) -> tuple[Node, ...]:
    """Generate ``count`` filler files, skipping names already taken in the folder."""
    files: dict[str, FileNode] = {}
    index = 0
    while len(files) < count:
        node = _random_file(f"{id_prefix}-{index}", rng, now)
        index += 1
        files.setdefault(node.name, node)
    return tuple(files.values())


def _folder(folder_id: str, name: str, *children: Node, type: str = "folder") -> FolderNode:  # noqa: A002
    return FolderNode(id=folder_id, name=name, type=type, children=children)


def build_seed_tree(*, now: datetime | None = None, rng: random.Random | None = None) -> FolderNode:
    """Build the initial tree: the target manual, its decoys and filler folders."""
    now = now or datetime.now(UTC)
    rng = rng or random.Random(DEFAULT_SEED)  # noqa: S311

    resources = (
        FileNode(
            id="file-1",
            name="Manual utilizator imprimantă.pdf",
            kind=FileKind.PDF,
            size_kb=2100,
            modified_at=now - timedelta(days=14),
        ),
        FileNode(
            id="file-2",
            name="Manual instalare.pdf",
            kind=FileKind.PDF,
            size_kb=500,
            modified_at=now - timedelta(days=90),
        ),
        FileNode(
            id="file-3",
            name="Facturi 2023.xlsx",
            kind=FileKind.SPREADSHEET,
            size_kb=1500,
            modified_at=now - timedelta(days=1),
        ),
    )
    fixed_names = {node.name for node in resources}
    extra = tuple(n for n in _random_files(50, "resurse-extra", rng, now) if n.name not in fixed_names)

    return _folder(
        "this-pc",
        ROOT_NAME,
        _folder(
            "documents",
            "Documents",
            _folder("resurse-2023", "Resurse 2023", *resources, *extra),
            _folder("proiecte", "Proiecte", *_random_files(18, "proj", rng, now)),
            _folder("financiar", "Financiar", *_random_files(15, "fin", rng, now)),
            _folder("media", "Media", *_random_files(20, "med", rng, now)),
            _folder("work-docs", "Work"),
        ),
        _folder("downloads", "Downloads"),
        _folder(
            "c-drive",
            "Local Disk (C:)",
            _folder("windows", "Windows"),
            _folder("users", "Users"),
            type="drive",
        ),
        _folder("recycle-bin", RECYCLE_BIN_NAME),
    )
