"""Tests for the append-only action log."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from filehunt._actions import (
    ActionLog,
    AppOpenPayload,
    NavigatePayload,
    SearchPayload,
    append,
    reset,
)
from filehunt._enums import ActionKind, AppKind, FileKind, SizeComparison

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class TestAppend:
    def test_returns_new_log(self):
        log = ActionLog()
        new_log = append(log, ActionKind.NAVIGATE, {"path": ["This PC"]}, now=T0)

        assert log.entries == ()
        assert len(new_log.entries) == 1
        assert new_log.entries[0].kind == ActionKind.NAVIGATE
        assert new_log.entries[0].timestamp == T0

    def test_validates_mapping_into_kind_payload(self):
        log = append(
            ActionLog(),
            "SEARCH",
            {"query": "manual", "filters": {"type": "pdf", "size": {"comparison": "gt", "value": 1024}}},
        )
        payload = log.entries[0].payload
        assert isinstance(payload, SearchPayload)
        assert payload.filters.type == FileKind.PDF
        assert payload.filters.size is not None
        assert payload.filters.size.comparison == SizeComparison.GT

    def test_accepts_payload_model(self):
        payload = AppOpenPayload(app=AppKind.NOTEPAD)
        log = append(ActionLog(), ActionKind.APP_OPEN, payload)
        assert log.entries[0].payload is payload

    def test_rejects_payload_of_another_kind(self):
        with pytest.raises(ValidationError):
            append(ActionLog(), ActionKind.SEARCH, NavigatePayload(path=("This PC",)))

    def test_rejects_incomplete_payload(self):
        with pytest.raises(ValidationError):
            append(ActionLog(), ActionKind.FILE_OPEN, {"path": ["This PC"]})

    def test_never_deduplicates(self):
        log = ActionLog()
        for _ in range(3):
            log = append(log, ActionKind.NAVIGATE, {"path": ["This PC"]})
        assert len(log.entries) == 3

    def test_default_timestamp_is_utc_now(self):
        before = datetime.now(UTC)
        log = append(ActionLog(), ActionKind.NAVIGATE, {"path": ["This PC"]})
        assert before <= log.entries[0].timestamp <= datetime.now(UTC)

    def test_entries_are_frozen(self):
        log = append(ActionLog(), ActionKind.NAVIGATE, {"path": ["This PC"]})
        with pytest.raises(ValidationError):
            log.entries[0].timestamp = T0  # type: ignore[misc]


class TestQueries:
    @pytest.fixture
    def log(self) -> ActionLog:
        log = ActionLog()
        log = append(log, ActionKind.NAVIGATE, {"path": ["This PC"]}, now=T0)
        log = append(log, ActionKind.SEARCH, {"query": "a"}, now=T0)
        log = append(log, ActionKind.NAVIGATE, {"path": ["This PC", "Documents"]}, now=T0)
        return append(log, ActionKind.SEARCH, {"query": "b"}, now=T0)

    def test_of_kind_keeps_order(self, log: ActionLog):
        paths = [e.payload.path for e in log.of_kind(ActionKind.NAVIGATE)]  # type: ignore[union-attr]
        assert paths == [("This PC",), ("This PC", "Documents")]

    def test_last_of_kind(self, log: ActionLog):
        last = log.last_of_kind(ActionKind.SEARCH)
        assert last is not None
        assert last.payload.query == "b"  # type: ignore[union-attr]

    def test_last_of_missing_kind(self, log: ActionLog):
        assert log.last_of_kind(ActionKind.FILE_OPEN) is None


def test_reset_gives_empty_log():
    assert reset().is_empty
    assert reset() == ActionLog()


def test_log_round_trips_through_validation():
    log = append(ActionLog(), ActionKind.SEARCH, {"query": "manual", "filters": {"type": "pdf"}}, now=T0)
    log = append(log, ActionKind.FILE_OPEN, {"node_id": "file-1", "path": ["This PC", "x.pdf"]}, now=T0)
    assert ActionLog.model_validate(log.model_dump(mode="json")) == log
