"""Per-attempt and cumulative bound checks for ``Retry-After`` delays.

:func:`check_delay` is a pure function of the candidate delay, the current
:class:`RetryState` and the :class:`RetryPolicy`.  It runs before any wait,
so a delay that is over budget never causes the caller to sleep.
"""

from __future__ import annotations

from retryafter.models import BoundDecision, RetryPolicy, RetryState, StopReason


def check_delay(delay: float, state: RetryState, policy: RetryPolicy) -> BoundDecision:
    """Decide whether *delay* may be honoured.

    A delay longer than ``policy.max_delay`` is rejected outright, even on
    the first attempt.  Otherwise it is rejected if adding it to the
    accumulated delay would pass ``policy.deadline``.  On acceptance the
    returned decision carries the advanced state.
    """
    if delay > policy.max_delay:
        return BoundDecision(
            accepted=False,
            state=state,
            delay=delay,
            reason=StopReason.MAX_DELAY_EXCEEDED,
        )

    if state.accumulated_delay + delay > policy.deadline:
        return BoundDecision(
            accepted=False,
            state=state,
            delay=delay,
            reason=StopReason.DEADLINE_EXCEEDED,
        )

    return BoundDecision(accepted=True, state=state.advance(delay), delay=delay)
