"""Outbound notification of a final evaluation to the hosting page.

The message shape is fixed by the host integration. It is posted once per
evaluation, unconditionally, and addressed to any origin (``"*"``) unless the
configuration says otherwise. The simulator assumes a trusted embedding:
``target_origin`` must become an allow-list before any production use.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal, Protocol, TextIO

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ._scoring import EvaluationResult

logger = logging.getLogger(__name__)

ANY_ORIGIN = "*"
DETAILS_SEPARATOR = "; "


class HostMessage(BaseModel):
    """The ``evaluationResult`` message, camelCase on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["evaluationResult"] = "evaluationResult"
    score: int
    max_score: int = Field(alias="maxScore")
    details: str
    tasks_completed: int = Field(alias="tasksCompleted")
    total_tasks: int = Field(alias="totalTasks")
    extracted_text: str = Field(alias="extractedText")
    timestamp: str

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def build_host_message(result: EvaluationResult, *, now: datetime | None = None) -> HostMessage:
    details = DETAILS_SEPARATOR.join(result.details)
    return HostMessage(
        score=result.score,
        max_score=result.max_score,
        details=details,
        tasks_completed=result.tasks_completed,
        total_tasks=result.total_tasks,
        extracted_text=f"Score: {result.score}/{result.max_score} - Details: {details}",
        timestamp=(now or datetime.now(UTC)).isoformat(),
    )


class HostChannel(Protocol):
    def post(self, message: HostMessage, target_origin: str) -> None: ...


class StreamHostChannel:
    """Writes each message as one JSON line, e.g. to stdout or a report file."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def post(self, message: HostMessage, target_origin: str) -> None:
        self.stream.write(message.to_json() + "\n")
        self.stream.flush()


class MemoryHostChannel:
    """Collects posted messages with their target origin."""

    def __init__(self) -> None:
        self.posted: list[tuple[HostMessage, str]] = []

    def post(self, message: HostMessage, target_origin: str) -> None:
        self.posted.append((message, target_origin))


def report_evaluation(
    result: EvaluationResult,
    channel: HostChannel,
    *,
    target_origin: str = ANY_ORIGIN,
    now: datetime | None = None,
) -> HostMessage:
    """Post exactly one ``evaluationResult`` message for ``result``."""
    message = build_host_message(result, now=now)
    logger.info(f"Sending evaluation result to host ({target_origin}): {message.score}/{message.max_score}")
    channel.post(message, target_origin)
    return message
