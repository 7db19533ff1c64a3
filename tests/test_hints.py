from datetime import UTC, datetime

from filehunt._actions import ActionLog, append
from filehunt._enums import ActionKind
from filehunt._hints import FILTER_HINT_AFTER, NAVIGATION_HINT_AFTER, next_hint

T0 = datetime(2024, 6, 1, tzinfo=UTC)


def _navigate(log: ActionLog, *path: str, times: int = 1) -> ActionLog:
    for _ in range(times):
        log = append(log, ActionKind.NAVIGATE, {"path": list(path)}, now=T0)
    return log


def _search(log: ActionLog, query: str, *, times: int = 1, **filters: object) -> ActionLog:
    for _ in range(times):
        log = append(log, ActionKind.SEARCH, {"query": query, "filters": filters}, now=T0)
    return log


def test_no_hint_for_empty_log() -> None:
    assert next_hint(ActionLog()) is None


def test_folder_hint_after_wandering() -> None:
    log = _navigate(ActionLog(), "This PC", "Downloads", times=NAVIGATION_HINT_AFTER)
    hint = next_hint(log)
    assert hint is not None
    assert "Resurse 2023" in hint


def test_no_folder_hint_before_threshold() -> None:
    log = _navigate(ActionLog(), "This PC", "Downloads", times=NAVIGATION_HINT_AFTER - 1)
    assert next_hint(log) is None


def test_no_folder_hint_once_folder_was_reached() -> None:
    log = _navigate(ActionLog(), "This PC", "Documents", "Resurse 2023")
    log = _navigate(log, "This PC", "Downloads", times=NAVIGATION_HINT_AFTER)
    assert next_hint(log) is None


def test_filter_hint_after_searches_without_type() -> None:
    log = _search(ActionLog(), "manual", times=FILTER_HINT_AFTER)
    hint = next_hint(log)
    assert hint is not None
    assert "file type" in hint


def test_no_filter_hint_when_last_search_has_type() -> None:
    log = _search(ActionLog(), "manual", times=FILTER_HINT_AFTER - 1)
    log = _search(log, "manual", type="pdf")
    assert next_hint(log) is None


def test_folder_hint_takes_precedence() -> None:
    log = _navigate(ActionLog(), "This PC", "Downloads", times=NAVIGATION_HINT_AFTER)
    log = _search(log, "x", times=FILTER_HINT_AFTER)
    hint = next_hint(log)
    assert hint is not None
    assert "Resurse 2023" in hint
