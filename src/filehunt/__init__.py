"""Find-the-file training exercise on a simulated file system."""

__all__ = [
    "DEFAULT_EXERCISE",
    "RECYCLE_BIN_NAME",
    "ROOT_NAME",
    "ActionKind",
    "ActionLog",
    "ActionLogEntry",
    "AppKind",
    "AppOpenPayload",
    "Criterion",
    "CriterionOutcome",
    "DateFilter",
    "EvaluationResult",
    "Exercise",
    "FileKind",
    "FileNode",
    "FileOpenPayload",
    "FolderNode",
    "HostChannel",
    "HostMessage",
    "MemoryHostChannel",
    "MemorySessionStore",
    "NavigatePayload",
    "Node",
    "SearchFilters",
    "SearchHit",
    "SearchPayload",
    "Session",
    "SessionSnapshot",
    "SessionStore",
    "SizeComparison",
    "SizeFilter",
    "SortKey",
    "SortSpec",
    "StreamHostChannel",
    "StrEnumWithDoc",
    "TomlSessionStore",
    "add",
    "append",
    "build_host_message",
    "build_seed_tree",
    "delete_permanently",
    "finalize",
    "format_path",
    "list_folder",
    "live_score",
    "next_hint",
    "parse_path",
    "recycle_bin_path_of",
    "rename",
    "report_evaluation",
    "reset",
    "resolve",
    "restore",
    "search",
    "soft_delete",
]

from ._actions import (
    ActionLog,
    ActionLogEntry,
    AppOpenPayload,
    FileOpenPayload,
    NavigatePayload,
    SearchPayload,
    append,
    reset,
)
from ._channel import (
    HostChannel,
    HostMessage,
    MemoryHostChannel,
    StreamHostChannel,
    build_host_message,
    report_evaluation,
)
from ._enums import ActionKind, AppKind, FileKind, SizeComparison, StrEnumWithDoc
from ._hints import next_hint
from ._models import RECYCLE_BIN_NAME, ROOT_NAME, FileNode, FolderNode, Node
from ._path import format_path, parse_path, resolve
from ._scoring import DEFAULT_EXERCISE, Criterion, CriterionOutcome, EvaluationResult, Exercise, finalize, live_score
from ._search import DateFilter, SearchFilters, SearchHit, SizeFilter, SortKey, SortSpec, list_folder, search
from ._seed import build_seed_tree
from ._session import Session
from ._store import MemorySessionStore, SessionSnapshot, SessionStore, TomlSessionStore
from ._tree import add, delete_permanently, recycle_bin_path_of, rename, restore, soft_delete
