"""retryafter.middleware -- Retry-After handling and pipeline glue.

This sub-package provides:

* :mod:`.headers` -- ``Retry-After`` value parsing.
* :mod:`.bounds` -- Per-attempt and cumulative delay checks.
* :mod:`.retry_after` -- The retry loop controller.
* :mod:`.transport` -- httpx transports that run a middleware chain.
"""

from __future__ import annotations

from .bounds import check_delay
from .headers import RETRY_AFTER, header_value, parse_http_date, parse_retry_after
from .retry_after import RetryAfter, clone_request
from .transport import (
    AsyncMiddlewareTransport,
    Middleware,
    MiddlewareTransport,
    SyncMiddleware,
)

__all__ = [
    "RETRY_AFTER",
    "AsyncMiddlewareTransport",
    "Middleware",
    "MiddlewareTransport",
    "RetryAfter",
    "SyncMiddleware",
    "check_delay",
    "clone_request",
    "header_value",
    "parse_http_date",
    "parse_retry_after",
]
