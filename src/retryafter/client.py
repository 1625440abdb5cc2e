"""Factories for httpx clients that honour ``Retry-After``.

Usage::

    from retryafter import RetryAfterConfig, create_async_client

    async with create_async_client(RetryAfterConfig(attempts=5)) as client:
        response = await client.get("https://httpbin.org/status/429")
"""

from __future__ import annotations

from typing import Any

import httpx

from retryafter.config import RetryAfterConfig
from retryafter.middleware import AsyncMiddlewareTransport, MiddlewareTransport, RetryAfter


def create_async_client(
    config: RetryAfterConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Return an :class:`httpx.AsyncClient` that runs the Retry-After loop.

    Parameters
    ----------
    config:
        Retry limits; defaults to ``RetryAfterConfig()``.
    transport:
        Transport that performs network I/O.  Defaults to
        :class:`httpx.AsyncHTTPTransport`.
    **kwargs:
        Forwarded to :class:`httpx.AsyncClient`.
    """
    inner = transport if transport is not None else httpx.AsyncHTTPTransport()
    return httpx.AsyncClient(
        transport=AsyncMiddlewareTransport(inner, [RetryAfter(config)]),
        **kwargs,
    )


def create_client(
    config: RetryAfterConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
    **kwargs: Any,
) -> httpx.Client:
    """Blocking counterpart of :func:`create_async_client`."""
    inner = transport if transport is not None else httpx.HTTPTransport()
    return httpx.Client(
        transport=MiddlewareTransport(inner, [RetryAfter(config)]),
        **kwargs,
    )
