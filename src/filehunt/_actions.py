"""Append-only log of the user gestures that feed the scoring engine.

Each action kind has exactly one payload model; the ``kind`` literal on the
payload is the discriminator, so a persisted log validates back into the
right shapes.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ._enums import ActionKind, AppKind
from ._search import SearchFilters

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class NavigatePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["NAVIGATE"] = "NAVIGATE"
    path: tuple[str, ...]


class SearchPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["SEARCH"] = "SEARCH"
    query: str = ""
    filters: SearchFilters = SearchFilters()


class FileOpenPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["FILE_OPEN"] = "FILE_OPEN"
    node_id: str
    path: tuple[str, ...]
    node_type: Literal["file", "folder", "drive"] = "file"


class AppOpenPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["APP_OPEN"] = "APP_OPEN"
    app: AppKind
    path: tuple[str, ...] | None = None


ActionPayload = Annotated[
    NavigatePayload | SearchPayload | FileOpenPayload | AppOpenPayload,
    Field(discriminator="kind"),
]

PAYLOAD_MODELS: dict[ActionKind, type[BaseModel]] = {
    ActionKind.NAVIGATE: NavigatePayload,
    ActionKind.SEARCH: SearchPayload,
    ActionKind.FILE_OPEN: FileOpenPayload,
    ActionKind.APP_OPEN: AppOpenPayload,
}


class ActionLogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    payload: ActionPayload
    timestamp: datetime

    @property
    def kind(self) -> ActionKind:
        return ActionKind(self.payload.kind)


class ActionLog(BaseModel):
    """Ordered, immutable record of one session's actions."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ActionLogEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def of_kind(self, kind: ActionKind) -> list[ActionLogEntry]:
        return [entry for entry in self.entries if entry.kind == kind]

    def last_of_kind(self, kind: ActionKind) -> ActionLogEntry | None:
        """Return the most recent entry of ``kind``; it is authoritative for that kind."""
        for entry in reversed(self.entries):
            if entry.kind == kind:
                return entry
        return None


def append(
    log: ActionLog,
    kind: ActionKind | str,
    payload: BaseModel | Mapping[str, Any],
    *,
    now: datetime | None = None,
) -> ActionLog:
    """Return a new log with one more entry, stamped at ``now`` (UTC by default).

    ``payload`` is either the payload model for ``kind`` or a mapping that
    validates into it. A payload of another kind raises ``ValidationError``.
    """
    kind = ActionKind(kind)
    model = PAYLOAD_MODELS[kind]
    if not isinstance(payload, model):
        data = payload.model_dump() if isinstance(payload, BaseModel) else dict(payload)
        payload = model.model_validate(data)

    entry = ActionLogEntry(payload=payload, timestamp=now or datetime.now(UTC))
    logger.debug(f"Logged {kind}: {payload}")
    return log.model_copy(update={"entries": (*log.entries, entry)})


def reset() -> ActionLog:
    return ActionLog()
