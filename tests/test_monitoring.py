"""
Tests for AI monitoring - structured logger and metrics.
"""

import json
import logging

import pytest

from app.ai.monitoring.logger import AILogger
from app.ai.monitoring.metrics import AIMetrics
from app.ai.providers.base import NormalizedResponse, TokenUsage


def _payload(record: logging.LogRecord) -> dict:
    message = record.getMessage()
    return json.loads(message[message.index("{"):])


@pytest.fixture
def metrics() -> AIMetrics:
    return AIMetrics(max_history=3)


class TestAIMetrics:
    """Tests for AIMetrics aggregation."""

    def test_stats_are_a_snapshot(self, metrics):
        metrics.record_request("a", "m", TokenUsage(1, 1), 1.0, True)
        stats = metrics.get_stats()

        metrics.record_request("b", "m", TokenUsage(1, 1), 1.0, False)

        assert stats.total_requests == 1
        assert stats.models["m"].requests == 1
        assert metrics.get_stats().total_requests == 2

    def test_empty_stats(self, metrics):
        stats = metrics.get_stats()

        assert stats.total_requests == 0
        assert stats.avg_latency_ms == 0.0
        assert stats.success_rate == 0.0

    def test_aggregation(self, metrics):
        metrics.record_request("a", "gemini-2.5-flash", TokenUsage(10, 5), 100.0, True)
        metrics.record_request("b", "gemini-2.5-flash", TokenUsage(20, 10), 300.0, True)
        metrics.record_request("c", "veo", TokenUsage(), 50.0, False)

        data = metrics.get_stats().to_dict()

        assert data["total_requests"] == 3
        assert data["failed_requests"] == 1
        assert data["total_tokens"] == 45
        assert data["avg_latency_ms"] == 150.0
        assert data["success_rate"] == "66.7%"
        assert data["requests_by_model"] == {"gemini-2.5-flash": 2, "veo": 1}
        assert data["failures_by_model"] == {"veo": 1}
        assert data["models"]["gemini-2.5-flash"]["avg_latency_ms"] == 200.0

    def test_history_is_bounded(self, metrics):
        for i in range(5):
            metrics.record_request(str(i), "m", TokenUsage(), 1.0, True)

        recent = metrics.get_recent_requests(limit=10)

        assert [r.request_id for r in recent] == ["4", "3", "2"]
        assert metrics.get_stats().total_requests == 5

    def test_reset(self, metrics):
        metrics.record_request("a", "m", TokenUsage(1, 1), 1.0, True)
        metrics.reset()

        assert metrics.get_stats().total_requests == 0
        assert metrics.get_recent_requests() == []


class TestAILogger:
    """Tests for the JSON log lines."""

    def test_request_prompt_is_truncated(self, caplog):
        with caplog.at_level(logging.INFO, logger="omni.ai"):
            AILogger().log_request("abc", "x" * 500, "gemini-2.5-flash", {"parts": 1})

        data = _payload(caplog.records[-1])
        assert data["event"] == "ai_request"
        assert data["prompt_length"] == 500
        assert len(data["prompt_preview"]) == 103
        assert data["metadata"] == {"parts": 1}

    def test_response(self, caplog):
        response = NormalizedResponse(text="hello", model="m", usage=TokenUsage(3, 2))

        with caplog.at_level(logging.INFO, logger="omni.ai"):
            AILogger().log_response("abc", response)

        data = _payload(caplog.records[-1])
        assert data["event"] == "ai_response"
        assert data["tokens"]["total"] == 5
        assert data["text_length"] == 5

    def test_error_level(self, caplog):
        with caplog.at_level(logging.INFO, logger="omni.ai"):
            AILogger().log_error("abc", "boom", stage="video_poll")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert _payload(record)["stage"] == "video_poll"

    def test_event_serializes_unknown_types(self, caplog):
        with caplog.at_level(logging.INFO, logger="omni.ai"):
            AILogger().log_event("abc", "device_dispatch", {"diff": {"value": 75}, "obj": object()})

        data = _payload(caplog.records[-1])
        assert data["event"] == "device_dispatch"
        assert data["diff"] == {"value": 75}
