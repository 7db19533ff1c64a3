"""Tests for tree search and filtered folder listings."""

from datetime import UTC, datetime

import pytest

from filehunt._enums import FileKind, SizeComparison
from filehunt._models import FileNode, FolderNode
from filehunt._path import format_path
from filehunt._search import (
    DateFilter,
    SearchFilters,
    SizeFilter,
    SortKey,
    SortSpec,
    list_folder,
    search,
)
from filehunt._tree import soft_delete

RESOURCES = ("This PC", "Documents", "Resources")


def _file(name: str, kind: FileKind, size_kb: int, day: int) -> FileNode:
    return FileNode(
        id=name.lower(),
        name=name,
        kind=kind,
        size_kb=size_kb,
        modified_at=datetime(2024, 1, day, tzinfo=UTC),
    )


@pytest.fixture
def tree() -> FolderNode:
    return FolderNode(
        id="root",
        name="This PC",
        children=(
            FolderNode(
                id="docs",
                name="Documents",
                children=(
                    FolderNode(
                        id="resources",
                        name="Resources",
                        children=(
                            _file("Printer manual.pdf", FileKind.PDF, 2100, 20),
                            _file("Install manual.pdf", FileKind.PDF, 500, 5),
                            _file("Invoices.xlsx", FileKind.SPREADSHEET, 1500, 28),
                            FolderNode(id="manuals", name="Old Manuals"),
                            _file("photo.png", FileKind.PNG, 3000, 10),
                        ),
                    ),
                ),
            ),
            FolderNode(id="bin", name="Recycle Bin"),
        ),
    )


class TestSearch:
    def test_case_insensitive_substring(self, tree: FolderNode):
        hits = search(tree, "MANUAL")
        assert [format_path(h.path) for h in hits] == [
            "This PC/Documents/Resources/Printer manual.pdf",
            "This PC/Documents/Resources/Install manual.pdf",
            "This PC/Documents/Resources/Old Manuals",
        ]

    def test_hits_carry_nodes(self, tree: FolderNode):
        hits = search(tree, "invoices")
        assert len(hits) == 1
        assert hits[0].node.id == "invoices.xlsx"

    def test_parents_before_children(self, tree: FolderNode):
        hits = search(tree, "o")
        paths = [h.path for h in hits]
        assert paths.index(("This PC", "Documents")) < paths.index(RESOURCES)

    def test_root_never_matches(self, tree: FolderNode):
        assert all(len(h.path) > 1 for h in search(tree, "This PC"))
        assert search(tree, "PC") == []

    def test_excludes_recycle_bin_and_its_contents(self, tree: FolderNode):
        deleted = soft_delete(tree, (*RESOURCES, "Printer manual.pdf"))
        hits = search(deleted, "manual")
        assert [h.node.name for h in hits] == ["Install manual.pdf", "Old Manuals"]
        assert search(deleted, "Recycle") == []

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_finds_nothing(self, tree: FolderNode, query: str):
        assert search(tree, query) == []

    def test_no_hit_is_in_recycle_bin(self, tree: FolderNode):
        deleted = soft_delete(soft_delete(tree, (*RESOURCES, "photo.png")), RESOURCES)
        for query in ("a", "e", "i", "o", "."):
            assert all(h.path[:2] != ("This PC", "Recycle Bin") for h in search(deleted, query))


class TestSearchFilters:
    def test_empty(self):
        assert SearchFilters().is_empty
        assert not SearchFilters(type=FileKind.PDF).is_empty

    @pytest.mark.parametrize(
        ("comparison", "value", "size", "expected"),
        [
            (SizeComparison.GT, 1024, 2100, True),
            (SizeComparison.GT, 1024, 1024, False),
            (SizeComparison.LT, 1024, 500, True),
            (SizeComparison.LT, 1024, 1024, False),
        ],
    )
    def test_size_filter(self, comparison: SizeComparison, value: int, size: int, expected: bool):  # noqa: FBT001
        assert SizeFilter(comparison=comparison, value=value).accepts(size) is expected

    def test_folders_always_pass(self):
        filters = SearchFilters(type=FileKind.PDF, size=SizeFilter(comparison=SizeComparison.GT, value=10**6))
        assert filters.accepts(FolderNode(id="f", name="Folder"))


class TestListFolder:
    def test_folders_first_then_by_name(self, tree: FolderNode):
        names = [n.name for n in list_folder(tree, RESOURCES)]
        assert names == [
            "Old Manuals",
            "Install manual.pdf",
            "Invoices.xlsx",
            "photo.png",
            "Printer manual.pdf",
        ]

    def test_query_filters_names(self, tree: FolderNode):
        names = [n.name for n in list_folder(tree, RESOURCES, query="MANUAL")]
        assert names == ["Old Manuals", "Install manual.pdf", "Printer manual.pdf"]

    def test_type_and_size_filters(self, tree: FolderNode):
        filters = SearchFilters(type=FileKind.PDF, size=SizeFilter(comparison=SizeComparison.GT, value=1024))
        names = [n.name for n in list_folder(tree, RESOURCES, filters=filters)]
        assert names == ["Old Manuals", "Printer manual.pdf"]

    def test_date_filter(self, tree: FolderNode):
        filters = SearchFilters(date=DateFilter(since=datetime(2024, 1, 15, tzinfo=UTC)))
        names = [n.name for n in list_folder(tree, RESOURCES, filters=filters)]
        assert names == ["Old Manuals", "Invoices.xlsx", "Printer manual.pdf"]

    def test_naive_since_is_taken_as_utc(self, tree: FolderNode):
        filters = SearchFilters(date=DateFilter(since=datetime(2024, 1, 15)))  # noqa: DTZ001
        assert filters.date is not None
        assert filters.date.since == datetime(2024, 1, 15, tzinfo=UTC)
        names = [n.name for n in list_folder(tree, RESOURCES, filters=filters)]
        assert names == ["Old Manuals", "Invoices.xlsx", "Printer manual.pdf"]

    def test_sort_by_size_descending(self, tree: FolderNode):
        sort = SortSpec(key=SortKey.SIZE_KB, descending=True)
        names = [n.name for n in list_folder(tree, RESOURCES, sort=sort)]
        assert names == [
            "Old Manuals",
            "photo.png",
            "Printer manual.pdf",
            "Invoices.xlsx",
            "Install manual.pdf",
        ]

    def test_sort_by_modified(self, tree: FolderNode):
        sort = SortSpec(key=SortKey.MODIFIED_AT)
        names = [n.name for n in list_folder(tree, RESOURCES, sort=sort)]
        assert names[1:] == ["Install manual.pdf", "photo.png", "Printer manual.pdf", "Invoices.xlsx"]

    def test_sort_by_kind(self, tree: FolderNode):
        sort = SortSpec(key=SortKey.KIND)
        kinds = [n.kind for n in list_folder(tree, RESOURCES, sort=sort) if isinstance(n, FileNode)]
        assert kinds == [FileKind.PDF, FileKind.PDF, FileKind.PNG, FileKind.SPREADSHEET]

    @pytest.mark.parametrize("path", [("This PC", "Nowhere"), (*RESOURCES, "photo.png")])
    def test_not_a_folder(self, tree: FolderNode, path: tuple[str, ...]):
        assert list_folder(tree, path) == []
