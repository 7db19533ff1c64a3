"""Tests for the evaluation result message sent to the host page."""

import io
import json
from datetime import UTC, datetime

import pytest

from filehunt._actions import ActionLog, append
from filehunt._channel import (
    HostMessage,
    MemoryHostChannel,
    StreamHostChannel,
    build_host_message,
    report_evaluation,
)
from filehunt._enums import ActionKind
from filehunt._scoring import EvaluationResult, finalize

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def result() -> EvaluationResult:
    log = append(ActionLog(), ActionKind.SEARCH, {"query": "manual", "filters": {"type": "pdf"}}, now=T0)
    return finalize(log)


class TestBuildHostMessage:
    def test_wire_shape(self, result: EvaluationResult):
        wire = build_host_message(result, now=T0).to_wire()

        assert wire == {
            "type": "evaluationResult",
            "score": result.score,
            "maxScore": 100,
            "details": "; ".join(result.details),
            "tasksCompleted": result.tasks_completed,
            "totalTasks": 8,
            "extractedText": f"Score: {result.score}/100 - Details: {'; '.join(result.details)}",
            "timestamp": "2024-06-01T12:00:00+00:00",
        }

    def test_score_values(self, result: EvaluationResult):
        message = build_host_message(result, now=T0)
        # search + keyword + type filter, no irrelevant navigation
        assert message.score == 30
        assert message.tasks_completed == 4

    def test_json_uses_camel_case(self, result: EvaluationResult):
        data = json.loads(build_host_message(result, now=T0).to_json())
        assert {"maxScore", "tasksCompleted", "totalTasks", "extractedText"} <= data.keys()
        assert "max_score" not in data

    def test_parses_wire_form(self, result: EvaluationResult):
        message = build_host_message(result, now=T0)
        assert HostMessage.model_validate(message.to_wire()) == message


class TestReportEvaluation:
    def test_posts_exactly_once_to_any_origin(self, result: EvaluationResult):
        channel = MemoryHostChannel()

        message = report_evaluation(result, channel, now=T0)

        assert channel.posted == [(message, "*")]

    def test_configured_origin(self, result: EvaluationResult):
        channel = MemoryHostChannel()
        report_evaluation(result, channel, target_origin="https://lms.example.org", now=T0)
        assert channel.posted[0][1] == "https://lms.example.org"

    def test_stream_channel_writes_one_json_line(self, result: EvaluationResult):
        stream = io.StringIO()

        message = report_evaluation(result, StreamHostChannel(stream), now=T0)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0]) == message.to_wire()
