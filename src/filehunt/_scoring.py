"""Scoring of a session from its action log.

This module is a functional core: every function is a pure function of the
log and the exercise constants. Two models live here side by side:

- ``live_score``: the continuous feedback shown while the user works, on a
  1-10 scale with a baseline of 10 and small rewards and penalties.
- ``finalize``: the one-off evaluation, an additive 0-100 model with one
  annotated detail line per criterion.

Both read the most recent SEARCH entry as authoritative for the filter
criteria. Missing entries simply fail their criteria, nothing raises.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from ._enums import ActionKind, FileKind, SizeComparison, StrEnumWithDoc
from ._models import ROOT_NAME
from ._path import format_path, is_prefix

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._actions import ActionLog, FileOpenPayload, NavigatePayload, SearchPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Exercise:
    """Constants of the find-the-file exercise."""

    target_file_id: str = "file-1"
    ideal_folder_path: tuple[str, ...] = (ROOT_NAME, "Documents", "Resurse 2023")
    target_kind: FileKind = FileKind.PDF
    size_threshold_kb: int = 1024
    keywords: tuple[str, ...] = ("manual",)
    free_navigations: int = 3
    tolerated_misses: int = 1
    max_score: int = 100


DEFAULT_EXERCISE = Exercise()


class Criterion(StrEnumWithDoc):
    TARGET_FOUND = "target_found", "A FILE_OPEN entry references the target file"
    IDEAL_FOLDER = "ideal_folder", "A navigation reached the ideal folder path"
    IRRELEVANT_NAVIGATION = "irrelevant_navigation", "Penalty per distinct irrelevant folder beyond the tolerated miss"
    USED_SEARCH = "used_search", "At least one search was performed"
    KEYWORD = "keyword", "The last search query contains a recognized keyword"
    TYPE_FILTER = "type_filter", "The last search filtered on the target's file kind"
    SIZE_FILTER = "size_filter", "The last search filtered on size greater than the threshold"
    DATE_FILTER = "date_filter", "The last search used a modification date filter"


WEIGHTS = MappingProxyType(
    {
        Criterion.TARGET_FOUND: 40,
        Criterion.IDEAL_FOLDER: 15,
        Criterion.IRRELEVANT_NAVIGATION: -5,
        Criterion.USED_SEARCH: 5,
        Criterion.KEYWORD: 10,
        Criterion.TYPE_FILTER: 15,
        Criterion.SIZE_FILTER: 15,
        Criterion.DATE_FILTER: 5,
    },
)

FEEDBACK_FOUND = "Well done! Here is how you got there:"
FEEDBACK_NOT_FOUND = "Next time, try to make better use of the search tools."


@dataclass(frozen=True, slots=True)
class CriterionOutcome:
    """How one scoring criterion turned out."""

    criterion: Criterion
    passed: bool
    points: int
    message: str

    @property
    def line(self) -> str:
        mark = "✓" if self.passed else "✗"
        return f"{mark} {self.message}"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Final evaluation of a session.

    Attributes:
        score: Clamped total, between 0 and ``max_score``.
        feedback: Fixed summary chosen by whether the target was found.
        details: One annotated line per criterion, the target line first.
        criteria: The structured outcomes behind ``details``.
        max_score: Upper bound of ``score``.

    """

    score: int
    feedback: str
    details: tuple[str, ...]
    criteria: tuple[CriterionOutcome, ...]
    max_score: int = 100

    @property
    def target_found(self) -> bool:
        return any(c.passed for c in self.criteria if c.criterion == Criterion.TARGET_FOUND)

    @property
    def tasks_completed(self) -> int:
        return sum(1 for c in self.criteria if c.passed)

    @property
    def total_tasks(self) -> int:
        return len(self.criteria)


# --- Log readers ---


def is_relevant_path(path: Sequence[str], ideal: Sequence[str]) -> bool:
    """A path is on the way to the ideal folder, is it, or lies below it."""
    return is_prefix(path, ideal) or is_prefix(ideal, path)


def _navigation_paths(log: ActionLog) -> list[tuple[str, ...]]:
    entries = log.of_kind(ActionKind.NAVIGATE)
    payloads: list[NavigatePayload] = [e.payload for e in entries]  # type: ignore[misc]
    return [tuple(p.path) for p in payloads]


def _irrelevant_paths(paths: Sequence[tuple[str, ...]], exercise: Exercise) -> list[tuple[str, ...]]:
    return [p for p in paths if not is_relevant_path(p, exercise.ideal_folder_path)]


def _last_search(log: ActionLog) -> SearchPayload | None:
    entry = log.last_of_kind(ActionKind.SEARCH)
    return entry.payload if entry is not None else None  # type: ignore[return-value]


def _found_target(log: ActionLog, exercise: Exercise) -> bool:
    payloads: list[FileOpenPayload] = [e.payload for e in log.of_kind(ActionKind.FILE_OPEN)]  # type: ignore[misc]
    return any(p.node_id == exercise.target_file_id for p in payloads)


def _has_keyword(search: SearchPayload | None, exercise: Exercise) -> bool:
    if search is None:
        return False
    query = search.query.lower()
    return any(keyword.lower() in query for keyword in exercise.keywords)


def _has_type_filter(search: SearchPayload | None, exercise: Exercise) -> bool:
    return search is not None and search.filters.type == exercise.target_kind


def _has_size_filter(search: SearchPayload | None, exercise: Exercise) -> bool:
    if search is None or search.filters.size is None:
        return False
    size = search.filters.size
    return size.comparison == SizeComparison.GT and size.value >= exercise.size_threshold_kb


def _has_date_filter(search: SearchPayload | None) -> bool:
    return search is not None and search.filters.date is not None


# --- Live score ---

LIVE_BASELINE = 10.0
LIVE_MIN = 1
LIVE_MAX = 10


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def live_score(log: ActionLog, exercise: Exercise = DEFAULT_EXERCISE) -> int:
    """Compute the continuous score shown while the session runs (1-10)."""
    score = LIVE_BASELINE

    navigations = _navigation_paths(log)
    irrelevant = _irrelevant_paths(navigations, exercise)
    if irrelevant:
        score -= len(irrelevant)
    elif len(navigations) > exercise.free_navigations:
        score -= (len(navigations) - exercise.free_navigations) * 0.25

    last_search = _last_search(log)
    if last_search is None:
        # Lots of clicking and no search: the user is browsing by hand.
        if len(navigations) > exercise.free_navigations + 1:
            score -= 3
    else:
        score += 1.5 if _has_type_filter(last_search, exercise) else -1
        score += 1 if _has_size_filter(last_search, exercise) else -0.5
        if _has_keyword(last_search, exercise):
            score += 1

    return max(LIVE_MIN, min(LIVE_MAX, _round_half_up(score)))


# --- Final evaluation ---


def _outcome(criterion: Criterion, *, passed: bool, ok: str, missed: str) -> CriterionOutcome:
    return CriterionOutcome(
        criterion=criterion,
        passed=passed,
        points=WEIGHTS[criterion] if passed else 0,
        message=ok if passed else missed,
    )


def _navigation_outcome(navigations: Sequence[tuple[str, ...]], exercise: Exercise) -> CriterionOutcome:
    distinct = list(dict.fromkeys(_irrelevant_paths(navigations, exercise)))
    excess = max(0, len(distinct) - exercise.tolerated_misses)
    if excess == 0:
        message = (
            "You navigated without irrelevant detours."
            if not distinct
            else f"You took {len(distinct)} detour(s) ({format_path(distinct[0])}), which is tolerated."
        )
        return CriterionOutcome(Criterion.IRRELEVANT_NAVIGATION, passed=True, points=0, message=message)

    penalty = WEIGHTS[Criterion.IRRELEVANT_NAVIGATION] * excess
    return CriterionOutcome(
        Criterion.IRRELEVANT_NAVIGATION,
        passed=False,
        points=penalty,
        message=f"You navigated into {len(distinct)} irrelevant folders ({penalty} points).",
    )


def finalize(log: ActionLog, exercise: Exercise = DEFAULT_EXERCISE) -> EvaluationResult:
    """Evaluate the whole log once against the additive 0-100 model."""
    navigations = _navigation_paths(log)
    last_search = _last_search(log)
    found = _found_target(log, exercise)
    ideal = format_path(exercise.ideal_folder_path)
    kind = exercise.target_kind.value
    threshold = exercise.size_threshold_kb

    outcomes = (
        _outcome(
            Criterion.TARGET_FOUND,
            passed=found,
            ok="Congratulations, you found the right file!",
            missed="You did not find the right file.",
        ),
        _outcome(
            Criterion.IDEAL_FOLDER,
            passed=any(is_relevant_path(p, exercise.ideal_folder_path) for p in navigations),
            ok=f"You navigated along '{ideal}'.",
            missed=f"You never navigated towards '{ideal}'.",
        ),
        _navigation_outcome(navigations, exercise),
        _outcome(
            Criterion.USED_SEARCH,
            passed=last_search is not None,
            ok="You used the search bar.",
            missed="You did not use the search bar at all.",
        ),
        _outcome(
            Criterion.KEYWORD,
            passed=_has_keyword(last_search, exercise),
            ok="You searched with a relevant keyword.",
            missed=f"Your search did not contain a relevant keyword ({', '.join(exercise.keywords)}).",
        ),
        _outcome(
            Criterion.TYPE_FILTER,
            passed=_has_type_filter(last_search, exercise),
            ok="You filtered by the right file type.",
            missed=f"You did not filter by file type (.{kind}).",
        ),
        _outcome(
            Criterion.SIZE_FILTER,
            passed=_has_size_filter(last_search, exercise),
            ok="You filtered by the right size.",
            missed=f"You did not filter by size (greater than {threshold} KB).",
        ),
        _outcome(
            Criterion.DATE_FILTER,
            passed=_has_date_filter(last_search),
            ok="You filtered by modification date.",
            missed="You did not filter by modification date.",
        ),
    )

    total = sum(o.points for o in outcomes)
    score = max(0, min(exercise.max_score, total))
    logger.debug(f"finalize: raw total {total}, score {score}/{exercise.max_score}")

    return EvaluationResult(
        score=score,
        feedback=FEEDBACK_FOUND if found else FEEDBACK_NOT_FOUND,
        details=tuple(o.line for o in outcomes),
        criteria=outcomes,
        max_score=exercise.max_score,
    )
