"""Metrics hook protocol and no-op default implementation.

The retry loop emits counters and timings at each decision point.  By
default a :class:`NoopMetricsHook` is used.  Any object satisfying the
:class:`MetricsHook` protocol can be supplied through
``RetryAfterConfig(metrics=...)`` to route data points to Prometheus,
StatsD, Datadog or similar.

Emitted metric names:

* ``retryafter.attempts_total``  -- counter, one per send (tag ``status``)
* ``retryafter.retries_total``   -- counter, one per honoured delay (tag ``reason``)
* ``retryafter.delay_ms``        -- timing, the accepted delay
* ``retryafter.stopped_total``   -- counter, one per request (tag ``reason``)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
