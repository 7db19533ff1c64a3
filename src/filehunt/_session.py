"""Imperative shell around the pure file store, action log and scoring engine.

A ``Session`` holds the current tree and log, applies user gestures through
the pure operations, appends the matching action, recomputes the live score
and saves the snapshot after every committed change.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from . import _actions, _tree
from ._channel import ANY_ORIGIN, report_evaluation
from ._enums import ActionKind, AppKind
from ._hints import next_hint
from ._models import FileNode, FolderNode, Node
from ._path import format_path, resolve
from ._scoring import DEFAULT_EXERCISE, EvaluationResult, Exercise, finalize, live_score
from ._search import SearchFilters, SearchHit, SortSpec, list_folder, search
from ._store import SessionSnapshot

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pydantic import BaseModel

    from ._channel import HostChannel
    from ._store import SessionStore

logger = logging.getLogger(__name__)


class Session:
    def __init__(
        self,
        store: SessionStore,
        channel: HostChannel,
        *,
        exercise: Exercise = DEFAULT_EXERCISE,
        target_origin: str = ANY_ORIGIN,
    ) -> None:
        self.store = store
        self.channel = channel
        self.exercise = exercise
        self.target_origin = target_origin
        self._snapshot = store.load()
        self.live_score = live_score(self._snapshot.log, exercise)
        self.hint: str | None = None

    @property
    def tree(self) -> FolderNode:
        return self._snapshot.tree

    @property
    def log(self) -> _actions.ActionLog:
        return self._snapshot.log

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def _commit(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        self.store.save(snapshot)

    def _commit_tree(self, tree: Node) -> bool:
        if tree is self.tree:
            return False
        assert isinstance(tree, FolderNode)
        self._commit(self._snapshot.model_copy(update={"tree": tree}))
        return True

    def log_action(self, kind: ActionKind, payload: BaseModel | dict) -> None:
        """Append an action, refresh the live score and check for a hint."""
        log = _actions.append(self.log, kind, payload)
        snapshot = self._snapshot.model_copy(update={"log": log})
        self.live_score = live_score(log, self.exercise)

        if not snapshot.hint_shown and snapshot.evaluated_at is None:
            hint = next_hint(log, self.exercise)
            if hint is not None:
                self.hint = hint
                snapshot = snapshot.model_copy(update={"hint_shown": True})

        self._commit(snapshot)

    # --- Gestures ---

    def navigate(self, path: Sequence[str]) -> list[Node]:
        """Open the folder at ``path`` and return its listing (empty when it is not a folder)."""
        path = tuple(path)
        self.log_action(ActionKind.NAVIGATE, {"path": path})
        return list_folder(self.tree, path)

    def search_folder(
        self,
        path: Sequence[str],
        query: str = "",
        filters: SearchFilters | None = None,
        sort: SortSpec | None = None,
    ) -> list[Node]:
        """Filter a folder listing. Logged only when a query or a filter is set."""
        filters = filters or SearchFilters()
        if query or not filters.is_empty:
            self.log_action(ActionKind.SEARCH, {"query": query, "filters": filters})
        return list_folder(self.tree, path, query=query, filters=filters, sort=sort)

    def global_search(self, query: str) -> list[SearchHit]:
        return search(self.tree, query)

    def open(self, path: Sequence[str]) -> EvaluationResult | None:
        """Open the node at ``path``.

        Folders are navigated into. Opening the target file ends the exercise
        and returns its evaluation.
        """
        path = tuple(path)
        node = resolve(self.tree, path)
        if node is None:
            logger.debug(f"open: nothing at '{format_path(path)}'")
            return None

        self.log_action(ActionKind.FILE_OPEN, {"node_id": node.id, "path": path, "node_type": node.type})
        if isinstance(node, FolderNode):
            self.navigate(path)
            return None
        if isinstance(node, FileNode) and node.id == self.exercise.target_file_id:
            return self.evaluate()
        return None

    def open_app(self, app: AppKind, path: Sequence[str] | None = None) -> None:
        self.log_action(ActionKind.APP_OPEN, {"app": app, "path": tuple(path) if path is not None else None})

    def create_folder(self, parent_path: Sequence[str], name: str) -> bool:
        return self._commit_tree(_tree.add(self.tree, parent_path, _tree.new_folder(name)))

    def rename(self, path: Sequence[str], new_name: str) -> bool:
        return self._commit_tree(_tree.rename(self.tree, path, new_name))

    def delete(self, path: Sequence[str]) -> bool:
        return self._commit_tree(_tree.soft_delete(self.tree, path))

    def restore(self, bin_path: Sequence[str]) -> bool:
        return self._commit_tree(_tree.restore(self.tree, bin_path))

    def delete_permanently(self, path: Sequence[str]) -> bool:
        return self._commit_tree(_tree.delete_permanently(self.tree, path))

    # --- Evaluation ---

    def evaluate(self) -> EvaluationResult:
        """Finalize the log and post the result to the host exactly once."""
        result = finalize(self.log, self.exercise)
        report_evaluation(result, self.channel, target_origin=self.target_origin)
        self.hint = None
        self._commit(self._snapshot.model_copy(update={"evaluated_at": datetime.now(UTC)}))
        return result

    def reset(self, snapshot: SessionSnapshot) -> None:
        """Start over from ``snapshot`` with an empty action log."""
        self._commit(snapshot.model_copy(update={"log": _actions.reset(), "hint_shown": False, "evaluated_at": None}))
        self.live_score = live_score(self.log, self.exercise)
        self.hint = None
