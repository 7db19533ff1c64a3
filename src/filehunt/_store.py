"""Load/save of the session snapshot.

A session is loaded once when it starts and saved after every committed
change. The file store keeps the snapshot as TOML; timestamps come back as
``datetime`` objects through pydantic validation. A corrupt snapshot is
discarded in favour of a fresh seed tree, with a warning for the operator.
"""

from __future__ import annotations

import logging
import tomllib
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import tomli_w
from pydantic import BaseModel, ConfigDict, ValidationError

from ._actions import ActionLog
from ._models import FolderNode
from ._seed import build_seed_tree

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class SessionSnapshot(BaseModel):
    """Everything a session needs to resume: the tree and the action-derived state."""

    model_config = ConfigDict(frozen=True)

    tree: FolderNode
    log: ActionLog = ActionLog()
    hint_shown: bool = False
    evaluated_at: datetime | None = None


def seed_snapshot() -> SessionSnapshot:
    return SessionSnapshot(tree=build_seed_tree())


class SessionStore(Protocol):
    def load(self) -> SessionSnapshot: ...

    def save(self, snapshot: SessionSnapshot) -> None: ...


class MemorySessionStore:
    """Keeps the snapshot in memory. Useful for tests and embedding."""

    def __init__(self, snapshot: SessionSnapshot | None = None, *, seed: Callable[[], SessionSnapshot] = seed_snapshot) -> None:
        self._snapshot = snapshot
        self._seed = seed
        self.saves = 0

    def load(self) -> SessionSnapshot:
        if self._snapshot is None:
            self._snapshot = self._seed()
        return self._snapshot

    def save(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        self.saves += 1


def _drop_none(value: Any) -> Any:
    """Remove None values, which TOML cannot represent."""
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(item) for item in value]
    return value


def snapshot_to_toml(snapshot: SessionSnapshot) -> str:
    return tomli_w.dumps(_drop_none(snapshot.model_dump(mode="python")))


def snapshot_from_toml(text: str) -> SessionSnapshot:
    """Parse a snapshot. Raises ``TOMLDecodeError`` or ``ValidationError`` on bad input."""
    return SessionSnapshot.model_validate(tomllib.loads(text))


class TomlSessionStore:
    """Stores the snapshot in a TOML file, written by this session only."""

    def __init__(self, path: Path | str, *, seed: Callable[[], SessionSnapshot] = seed_snapshot) -> None:
        self.path = Path(path)
        self._seed = seed

    def load(self) -> SessionSnapshot:
        if not self.path.is_file():
            logger.debug(f"No snapshot at {self.path}, starting from the seed tree")
            return self._seed()

        try:
            snapshot = snapshot_from_toml(self.path.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, ValidationError, UnicodeDecodeError) as e:
            logger.warning(f"Discarding corrupted session snapshot {self.path}: {e}")
            return self._seed()

        logger.debug(f"Loaded session snapshot from {self.path}")
        return snapshot

    def save(self, snapshot: SessionSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(snapshot_to_toml(snapshot), encoding="utf-8")
        logger.debug(f"Saved session snapshot to {self.path}")
