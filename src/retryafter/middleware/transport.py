"""httpx transports that run requests through a middleware chain.

Each middleware receives the request, a ``send`` callable that goes
straight to the wrapped transport, and a ``proceed`` callable that runs the
rest of the chain.  The last ``proceed`` in the chain is the wrapped
transport itself::

    transport = AsyncMiddlewareTransport(
        httpx.AsyncHTTPTransport(),
        [RetryAfter(RetryAfterConfig(attempts=5))],
    )
    async with httpx.AsyncClient(transport=transport) as client:
        response = await client.get("https://example.com/throttled")
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import httpx

from .retry_after import AsyncSend, SyncSend


@runtime_checkable
class Middleware(Protocol):
    """An asynchronous pipeline stage."""

    async def handle(
        self,
        request: httpx.Request,
        send: AsyncSend,
        proceed: AsyncSend,
    ) -> httpx.Response:
        ...


@runtime_checkable
class SyncMiddleware(Protocol):
    """A blocking pipeline stage."""

    def handle_sync(
        self,
        request: httpx.Request,
        send: SyncSend,
        proceed: SyncSend,
    ) -> httpx.Response:
        ...


class AsyncMiddlewareTransport(httpx.AsyncBaseTransport):
    """Async transport that runs *middlewares* in order around *transport*.

    Parameters
    ----------
    transport:
        The transport that actually performs network I/O.
    middlewares:
        Stages applied outermost first.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        middlewares: Sequence[Middleware] = (),
    ) -> None:
        self._transport = transport
        self._middlewares = tuple(middlewares)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._dispatch(0, request)

    async def _dispatch(self, index: int, request: httpx.Request) -> httpx.Response:
        if index == len(self._middlewares):
            return await self._transport.handle_async_request(request)

        async def proceed(req: httpx.Request) -> httpx.Response:
            return await self._dispatch(index + 1, req)

        return await self._middlewares[index].handle(
            request, self._transport.handle_async_request, proceed,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()


class MiddlewareTransport(httpx.BaseTransport):
    """Blocking counterpart of :class:`AsyncMiddlewareTransport`."""

    def __init__(
        self,
        transport: httpx.BaseTransport,
        middlewares: Sequence[SyncMiddleware] = (),
    ) -> None:
        self._transport = transport
        self._middlewares = tuple(middlewares)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self._dispatch(0, request)

    def _dispatch(self, index: int, request: httpx.Request) -> httpx.Response:
        if index == len(self._middlewares):
            return self._transport.handle_request(request)

        def proceed(req: httpx.Request) -> httpx.Response:
            return self._dispatch(index + 1, req)

        return self._middlewares[index].handle_sync(
            request, self._transport.handle_request, proceed,
        )

    def close(self) -> None:
        self._transport.close()
