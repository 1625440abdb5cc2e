"""Tests for metrics wiring through RetryAfterConfig into the retry loop.

Covers:
  - Protocol conformance of a custom recording hook
  - Metric names and tags emitted for retries, delays and stop reasons
  - NoopMetricsHook used when no hook is configured
"""
from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from retryafter.config import RetryAfterConfig
from retryafter.errors import RetryAfterHeaderError
from retryafter.middleware.retry_after import RetryAfter
from retryafter.observability.metrics import MetricsHook, NoopMetricsHook


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def named(self, name: str) -> list[dict[str, Any]]:
        return [c for c in self.increments if c["name"] == name]


def _response(status: int, retry_after: str | None = None) -> httpx.Response:
    headers = {"Retry-After": retry_after} if retry_after is not None else {}
    return httpx.Response(status, headers=headers)


def _request() -> httpx.Request:
    return httpx.Request("GET", "https://api.example.com/resource")


class TestProtocol:
    def test_recording_hook_satisfies_protocol(self):
        assert isinstance(RecordingMetricsHook(), MetricsHook)

    def test_noop_used_when_unset(self):
        assert isinstance(RetryAfter()._metrics, NoopMetricsHook)

    def test_configured_hook_used(self):
        hook = RecordingMetricsHook()
        assert RetryAfter(RetryAfterConfig(metrics=hook))._metrics is hook


class TestEmittedMetrics:
    async def test_retry_then_success(self):
        hook = RecordingMetricsHook()
        middleware = RetryAfter(RetryAfterConfig(metrics=hook), sleep=AsyncMock())
        send = AsyncMock(side_effect=[_response(429, "2"), _response(200)])
        proceed = AsyncMock(return_value=_response(200))

        await middleware.handle(_request(), send, proceed)

        attempts = hook.named("retryafter.attempts_total")
        assert [c["tags"]["status"] for c in attempts] == ["429", "200"]
        retries = hook.named("retryafter.retries_total")
        assert retries == [{"name": "retryafter.retries_total", "value": 1, "tags": {"reason": "429"}}]
        assert hook.timings == [{"name": "retryafter.delay_ms", "ms": 2000.0, "tags": None}]
        stopped = hook.named("retryafter.stopped_total")
        assert [c["tags"]["reason"] for c in stopped] == ["not_retryable"]

    async def test_stop_reason_for_deadline(self):
        hook = RecordingMetricsHook()
        middleware = RetryAfter(
            RetryAfterConfig(metrics=hook, deadline_seconds=5), sleep=AsyncMock(),
        )
        send = AsyncMock(return_value=_response(503, "10"))
        proceed = AsyncMock(return_value=_response(503))

        await middleware.handle(_request(), send, proceed)

        stopped = hook.named("retryafter.stopped_total")
        assert [c["tags"]["reason"] for c in stopped] == ["deadline_exceeded"]
        assert hook.named("retryafter.retries_total") == []

    async def test_stop_reason_for_exhaustion(self):
        hook = RecordingMetricsHook()
        middleware = RetryAfter(
            RetryAfterConfig(metrics=hook, attempts=2), sleep=AsyncMock(),
        )
        send = AsyncMock(return_value=_response(429, "0"))
        proceed = AsyncMock(return_value=_response(429))

        await middleware.handle(_request(), send, proceed)

        assert len(hook.named("retryafter.retries_total")) == 2
        stopped = hook.named("retryafter.stopped_total")
        assert [c["tags"]["reason"] for c in stopped] == ["attempts_exhausted"]

    def test_stop_reason_recorded_once_when_raising(self):
        hook = RecordingMetricsHook()
        middleware = RetryAfter(
            RetryAfterConfig(metrics=hook, invalid_header_policy="raise"), sync_sleep=MagicMock(),
        )
        send = MagicMock(return_value=_response(429, "eventually"))

        with pytest.raises(RetryAfterHeaderError):
            middleware.handle_sync(_request(), send, MagicMock())

        stopped = hook.named("retryafter.stopped_total")
        assert [c["tags"]["reason"] for c in stopped] == ["invalid_header"]

    def test_no_header_reason(self):
        hook = RecordingMetricsHook()
        middleware = RetryAfter(RetryAfterConfig(metrics=hook), sync_sleep=MagicMock())
        send = MagicMock(return_value=_response(301))

        middleware.handle_sync(_request(), send, MagicMock(return_value=_response(200)))

        stopped = hook.named("retryafter.stopped_total")
        assert [c["tags"]["reason"] for c in stopped] == ["no_header"]
