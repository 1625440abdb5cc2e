"""Configuration for the retryafter middleware.

:class:`RetryAfterConfig` captures every tuneable knob.  Values are fixed at
construction time; the middleware never reconfigures itself at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from retryafter.models import RetryPolicy


@dataclass
class RetryAfterConfig:
    """Complete configuration for a :class:`~retryafter.middleware.RetryAfter`.

    Every parameter has a default, so ``RetryAfterConfig()`` is a valid
    configuration.

    Parameters
    ----------
    attempts:
        Maximum number of resends per request.  ``0`` disables retrying
        entirely; the request goes straight to the next stage.
    max_delay_seconds:
        Longest single ``Retry-After`` delay that will be honoured.  A
        larger hint stops the retry loop without waiting.
    deadline_seconds:
        Longest cumulative wait across all attempts of one request.
    invalid_header_policy:
        What to do with a ``Retry-After`` value that is neither an integer
        nor an HTTP date.

        * ``"stop"`` -- log a warning and hand the request downstream.
        * ``"raise"`` -- raise :class:`~retryafter.errors.RetryAfterHeaderError`.
    metrics:
        Optional :class:`~retryafter.observability.MetricsHook` backend.
    """

    # ── Limits ──────────────────────────────────────────────────────────
    attempts: int = 3

    max_delay_seconds: float = 30.0

    deadline_seconds: float = 60.0

    # ── Error policy ────────────────────────────────────────────────────
    invalid_header_policy: Literal["stop", "raise"] = "stop"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.attempts < 0:
            raise ValueError(f"attempts must be >= 0, got {self.attempts}")
        if self.max_delay_seconds < 0:
            raise ValueError(f"max_delay_seconds must be >= 0, got {self.max_delay_seconds}")
        if self.deadline_seconds < 0:
            raise ValueError(f"deadline_seconds must be >= 0, got {self.deadline_seconds}")
        if self.invalid_header_policy not in ("stop", "raise"):
            raise ValueError(
                "invalid_header_policy must be 'stop' or 'raise', "
                f"got {self.invalid_header_policy!r}"
            )

    def policy(self) -> RetryPolicy:
        """Return the immutable :class:`RetryPolicy` for these limits."""
        return RetryPolicy(
            attempts=self.attempts,
            max_delay=float(self.max_delay_seconds),
            deadline=float(self.deadline_seconds),
        )
