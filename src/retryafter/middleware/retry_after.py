"""Retry-After middleware: resend throttled requests after the server's delay.

For each request the loop runs while fewer than ``attempts`` delays have
been honoured:

1. Send a copy of the original request.
2. If the status is not 301, 429 or 503 -- stop.
3. If there is no ``Retry-After`` header -- stop.
4. If the header is neither an integer nor an HTTP date -- stop (or raise
   :class:`RetryAfterHeaderError` under ``invalid_header_policy="raise"``).
5. If the delay is over ``max_delay_seconds``, or would push the total wait
   past ``deadline_seconds`` -- stop without waiting.
6. Otherwise wait for exactly the delay and go round again.

When the loop stops, every intermediate response has been closed and the
original, unmodified request is handed to the next pipeline stage, whose
response is returned.  Transport errors from ``send`` propagate
immediately and the next stage is not invoked.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

import httpx

from retryafter.config import RetryAfterConfig
from retryafter.errors import RetryAfterHeaderError
from retryafter.models import (
    RETRYABLE_STATUSES,
    BoundDecision,
    RetryPolicy,
    RetryState,
    StopReason,
    UnparsableHint,
)
from retryafter.observability import NoopMetricsHook, get_logger

from .bounds import check_delay
from .headers import header_value, parse_retry_after

log = get_logger("retryafter.middleware")

AsyncSend = Callable[[httpx.Request], Awaitable[httpx.Response]]
SyncSend = Callable[[httpx.Request], httpx.Response]


def clone_request(request: httpx.Request) -> httpx.Request:
    """Return an independent copy of *request* suitable for resending.

    The body must already have been read (``request.read()`` or
    ``await request.aread()``).
    """
    return httpx.Request(
        request.method,
        request.url,
        headers=request.headers.copy(),
        content=request.content,
        extensions=dict(request.extensions),
    )


class RetryAfter:
    """Middleware that honours ``Retry-After`` on 301, 429 and 503 responses.

    Parameters
    ----------
    config:
        Limits and error policy.  Defaults to ``RetryAfterConfig()``
        (3 attempts, 30 s per-attempt cap, 60 s cumulative deadline).
    sleep:
        Awaitable used to wait between attempts.  Defaults to
        :func:`asyncio.sleep`.
    sync_sleep:
        Blocking wait used by :meth:`handle_sync`.  Defaults to
        :func:`time.sleep`.
    clock:
        Returns the current time for HTTP-date hints.  Defaults to the
        system UTC clock.

    A single instance holds no per-request state and may serve any number
    of concurrent requests.
    """

    def __init__(
        self,
        config: RetryAfterConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
        sync_sleep: Callable[[float], Any] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config if config is not None else RetryAfterConfig()
        self._policy: RetryPolicy = self._config.policy()
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )
        self._sleep = sleep if sleep is not None else asyncio.sleep
        self._sync_sleep = sync_sleep if sync_sleep is not None else time.sleep
        self._clock = clock

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    # -- public API --------------------------------------------------------

    async def handle(
        self,
        request: httpx.Request,
        send: AsyncSend,
        proceed: AsyncSend,
    ) -> httpx.Response:
        """Run the retry loop for *request*, then defer to *proceed*.

        Parameters
        ----------
        request:
            The request to send.  It is never mutated; each attempt sends a
            copy.
        send:
            Sends one request and returns its response.
        proceed:
            The next pipeline stage.  Called exactly once with the original
            request once the loop stops; its response is returned.

        Raises
        ------
        RetryAfterHeaderError
            On an unparsable header when ``invalid_header_policy="raise"``.
        """
        await request.aread()
        state = RetryState()
        reason = StopReason.ATTEMPTS_EXHAUSTED

        while state.attempts_used < self._policy.attempts:
            response = await send(clone_request(request))
            try:
                decision = self._evaluate(request, response, state)
            finally:
                await response.aclose()

            if not decision.accepted:
                reason = self._stop_reason(request, response, decision)
                break

            state = decision.state
            self._record_retry(request, response, decision)
            await self._sleep(decision.delay)

        self._record_stop(request, state, reason)
        return await proceed(request)

    def handle_sync(
        self,
        request: httpx.Request,
        send: SyncSend,
        proceed: SyncSend,
    ) -> httpx.Response:
        """Blocking equivalent of :meth:`handle`."""
        request.read()
        state = RetryState()
        reason = StopReason.ATTEMPTS_EXHAUSTED

        while state.attempts_used < self._policy.attempts:
            response = send(clone_request(request))
            try:
                decision = self._evaluate(request, response, state)
            finally:
                response.close()

            if not decision.accepted:
                reason = self._stop_reason(request, response, decision)
                break

            state = decision.state
            self._record_retry(request, response, decision)
            self._sync_sleep(decision.delay)

        self._record_stop(request, state, reason)
        return proceed(request)

    # -- shared decision steps ----------------------------------------------

    def _evaluate(
        self,
        request: httpx.Request,
        response: httpx.Response,
        state: RetryState,
    ) -> BoundDecision:
        """Inspect *response* and decide whether to wait and resend."""
        self._metrics.increment(
            "retryafter.attempts_total",
            tags={"status": str(response.status_code)},
        )

        if response.status_code not in RETRYABLE_STATUSES:
            return BoundDecision(accepted=False, state=state, reason=StopReason.NOT_RETRYABLE)

        raw = header_value(response)
        if raw is None:
            return BoundDecision(accepted=False, state=state, reason=StopReason.NO_HEADER)

        now = self._clock() if self._clock is not None else None
        hint = parse_retry_after(raw, now=now)
        if isinstance(hint, UnparsableHint):
            return BoundDecision(accepted=False, state=state, reason=StopReason.INVALID_HEADER)

        return check_delay(hint.seconds, state, self._policy)

    def _stop_reason(
        self,
        request: httpx.Request,
        response: httpx.Response,
        decision: BoundDecision,
    ) -> StopReason:
        """Log a rejected decision; raise if the error policy demands it."""
        reason = decision.reason or StopReason.NOT_RETRYABLE
        fields: dict[str, Any] = {
            "op": "retry_after",
            "method": request.method,
            "url": str(request.url),
            "status_code": response.status_code,
            "reason": reason.value,
            "attempts_used": decision.state.attempts_used,
        }

        if reason is StopReason.INVALID_HEADER:
            raw = header_value(response)
            fields["header_value"] = raw
            log.warning("Unparsable Retry-After header", extra={"extra_fields": fields})
            if self._config.invalid_header_policy == "raise":
                self._record_stop(request, decision.state, reason)
                raise RetryAfterHeaderError(
                    message=(
                        f"Invalid Retry-After header ({raw!r}) in response "
                        f"{response.status_code} to {request.method} {request.url}"
                    ),
                    context={
                        "header_value": raw,
                        "status_code": response.status_code,
                        "url": str(request.url),
                    },
                )
        elif reason in (StopReason.MAX_DELAY_EXCEEDED, StopReason.DEADLINE_EXCEEDED):
            fields["delay_s"] = decision.delay
            fields["accumulated_delay_s"] = decision.state.accumulated_delay
            log.warning("Retry-After delay exceeds limits", extra={"extra_fields": fields})
        else:
            log.debug("Response not eligible for retry", extra={"extra_fields": fields})

        return reason

    def _record_retry(
        self,
        request: httpx.Request,
        response: httpx.Response,
        decision: BoundDecision,
    ) -> None:
        self._metrics.increment(
            "retryafter.retries_total",
            tags={"reason": str(response.status_code)},
        )
        self._metrics.timing("retryafter.delay_ms", decision.delay * 1000)
        log.info(
            "Honouring Retry-After",
            extra={
                "extra_fields": {
                    "op": "retry_after",
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "delay_s": decision.delay,
                    "attempt": decision.state.attempts_used,
                }
            },
        )

    def _record_stop(
        self,
        request: httpx.Request,
        state: RetryState,
        reason: StopReason,
    ) -> None:
        self._metrics.increment(
            "retryafter.stopped_total",
            tags={"reason": reason.value},
        )
        log.debug(
            "Retry loop finished",
            extra={
                "extra_fields": {
                    "op": "retry_after",
                    "method": request.method,
                    "url": str(request.url),
                    "reason": reason.value,
                    "attempts_used": state.attempts_used,
                    "accumulated_delay_s": state.accumulated_delay,
                }
            },
        )
