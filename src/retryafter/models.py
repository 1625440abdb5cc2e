"""Data models for the retryafter package.

All types are plain dataclasses with no behaviour beyond what is needed for
structural equality, hashing and input validation.  The loop state is a
frozen value: the bound checker returns a new :class:`RetryState` rather
than mutating the one it was given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

RETRYABLE_STATUSES: frozenset[int] = frozenset({301, 429, 503})
"""Status codes that make a response eligible for Retry-After handling."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class HintSource(str, Enum):
    """Which encoding a ``Retry-After`` value was written in."""

    SECONDS = "seconds"
    """A non-negative integer count of seconds from now."""

    HTTP_DATE = "http_date"
    """An absolute HTTP date in one of the three legacy formats."""


class StopReason(str, Enum):
    """Why the retry loop handed control to the next stage."""

    NOT_RETRYABLE = "not_retryable"
    NO_HEADER = "no_header"
    INVALID_HEADER = "invalid_header"
    MAX_DELAY_EXCEEDED = "max_delay_exceeded"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"


# ---------------------------------------------------------------------------
# Policy and per-request state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RetryPolicy:
    """Immutable limits applied to one request's retry sequence.

    Attributes
    ----------
    attempts:
        Maximum number of resends honoured for a single request.
    max_delay:
        Longest single wait (seconds) that will ever be honoured.
    deadline:
        Longest total wait (seconds) across all attempts of one request.
    """

    attempts: int = 3
    max_delay: float = 30.0
    deadline: float = 60.0

    def __post_init__(self) -> None:
        if self.attempts < 0:
            raise ValueError(f"attempts must be >= 0, got {self.attempts}")
        if self.max_delay < 0:
            raise ValueError(f"max_delay must be >= 0, got {self.max_delay}")
        if self.deadline < 0:
            raise ValueError(f"deadline must be >= 0, got {self.deadline}")


@dataclass(frozen=True)
class RetryState:
    """Counters for one request's retry loop.

    Attributes
    ----------
    attempts_used:
        Number of delays accepted (and therefore resends issued) so far.
    accumulated_delay:
        Sum of all accepted delays, in seconds.
    """

    attempts_used: int = 0
    accumulated_delay: float = 0.0

    def advance(self, delay: float) -> RetryState:
        """Return the state after honouring *delay*."""
        return RetryState(
            attempts_used=self.attempts_used + 1,
            accumulated_delay=self.accumulated_delay + delay,
        )


# ---------------------------------------------------------------------------
# Header parse outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DelayHint:
    """A successfully parsed ``Retry-After`` value.

    ``seconds`` is never negative: an HTTP date in the past yields ``0.0``.
    """

    seconds: float
    source: HintSource


@dataclass(frozen=True)
class UnparsableHint:
    """A ``Retry-After`` value that matched neither integer nor date form."""

    raw: str


ParseOutcome = DelayHint | UnparsableHint


@dataclass(frozen=True)
class BoundDecision:
    """Result of checking a candidate delay against a :class:`RetryPolicy`.

    Attributes
    ----------
    accepted:
        ``True`` when the delay may be waited out.
    delay:
        The candidate delay that was checked, in seconds.
    state:
        The committed state when accepted; the unchanged input state when
        rejected.
    reason:
        Why the delay was rejected, or ``None`` when accepted.
    """

    accepted: bool
    state: RetryState
    delay: float = 0.0
    reason: StopReason | None = None
