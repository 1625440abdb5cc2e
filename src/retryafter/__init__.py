"""retryafter -- Retry-After aware middleware for httpx clients.

Public re-exports
-----------------

* **Clients:** :func:`create_client`, :func:`create_async_client`
* **Middleware:** :class:`RetryAfter` and the transports that chain it
* **Configuration:** :class:`RetryAfterConfig`
* **Errors:** :class:`RetryAfterError`, :class:`RetryAfterHeaderError`, :class:`ErrorCode`
* **Models:** policy, state and parse-outcome dataclasses

Usage::

    from retryafter import RetryAfterConfig, create_async_client

    config = RetryAfterConfig(attempts=3, max_delay_seconds=30, deadline_seconds=60)
    async with create_async_client(config) as client:
        response = await client.get("https://example.com/api")
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from retryafter.client import create_async_client, create_client

# ── Configuration ───────────────────────────────────────────────────────
from retryafter.config import RetryAfterConfig

# ── Errors ──────────────────────────────────────────────────────────────
from retryafter.errors import ErrorCode, RetryAfterError, RetryAfterHeaderError

# ── Middleware ──────────────────────────────────────────────────────────
from retryafter.middleware import (
    AsyncMiddlewareTransport,
    Middleware,
    MiddlewareTransport,
    RetryAfter,
    SyncMiddleware,
    check_delay,
    parse_retry_after,
)

# ── Models ──────────────────────────────────────────────────────────────
from retryafter.models import (
    RETRYABLE_STATUSES,
    BoundDecision,
    DelayHint,
    HintSource,
    RetryPolicy,
    RetryState,
    StopReason,
    UnparsableHint,
)

__all__ = [
    # Clients
    "create_client",
    "create_async_client",
    # Configuration
    "RetryAfterConfig",
    # Errors
    "ErrorCode",
    "RetryAfterError",
    "RetryAfterHeaderError",
    # Middleware
    "RetryAfter",
    "Middleware",
    "SyncMiddleware",
    "AsyncMiddlewareTransport",
    "MiddlewareTransport",
    "check_delay",
    "parse_retry_after",
    # Models
    "RETRYABLE_STATUSES",
    "BoundDecision",
    "DelayHint",
    "HintSource",
    "RetryPolicy",
    "RetryState",
    "StopReason",
    "UnparsableHint",
]
