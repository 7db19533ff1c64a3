"""Hint rules for users who look stuck. Showing and dismissing hints is up to the caller."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._enums import ActionKind
from ._scoring import DEFAULT_EXERCISE, Exercise

if TYPE_CHECKING:
    from ._actions import ActionLog

NAVIGATION_HINT_AFTER = 5
FILTER_HINT_AFTER = 3


def next_hint(log: ActionLog, exercise: Exercise = DEFAULT_EXERCISE) -> str | None:
    """Return the hint the user should see now, if any."""
    folder_name = exercise.ideal_folder_path[-1]

    navigations = log.of_kind(ActionKind.NAVIGATE)
    if len(navigations) >= NAVIGATION_HINT_AFTER:
        reached = any(folder_name in entry.payload.path for entry in navigations)  # type: ignore[union-attr]
        if not reached:
            return f"Hint: the file you are looking for is in the '{folder_name}' folder."

    searches = log.of_kind(ActionKind.SEARCH)
    if len(searches) >= FILTER_HINT_AFTER and searches[-1].payload.filters.type is None:  # type: ignore[union-attr]
        return "Hint: try the advanced filters to narrow the search down by file type."

    return None
