# /fetchkit/adapters/http/aiohttp_transport.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping

import aiohttp

from fetchkit.domain.errors import FetchError, TransportError

LOG = logging.getLogger("adapter.http_transport")

_IO_ERRORS = (aiohttp.ClientError, TimeoutError, OSError)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class AiohttpResponse:
    """Wraps a live aiohttp response; errors while reading keep the received status."""

    def __init__(self, resp: aiohttp.ClientResponse, request_url: str) -> None:
        self._resp = resp
        self._request_url = request_url

    @property
    def status(self) -> int:
        return self._resp.status

    @property
    def url(self) -> str:
        return str(self._resp.url)

    @property
    def headers(self) -> Mapping[str, str]:
        return self._resp.headers

    @property
    def closed(self) -> bool:
        return self._resp.closed

    def _read_error(self, exc: BaseException) -> FetchError:
        return FetchError(_describe(exc), status=self.status, url=self._request_url)

    async def read(self) -> bytes:
        try:
            return await self._resp.read()
        except _IO_ERRORS as e:
            raise self._read_error(e) from e

    async def read_chunk(self, n: int = -1) -> bytes:
        try:
            return await self._resp.content.read(n)
        except _IO_ERRORS as e:
            raise self._read_error(e) from e

    async def iter_chunked(self, n: int) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._resp.content.iter_chunked(n):
                yield chunk
        except _IO_ERRORS as e:
            raise self._read_error(e) from e

    def release(self) -> None:
        self._resp.release()

    async def __aenter__(self) -> AiohttpResponse:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.release()


class AiohttpTransport:
    """
    Loop-aware aiohttp transport.
    The transport may be built before any loop runs (or reused across asyncio.run calls);
    the session is created lazily and rebuilt when the running loop changes.
    No timeouts and no connection cap are configured.
    """

    def __init__(self) -> None:
        self._connector: aiohttp.TCPConnector | None = None
        self._timeout = aiohttp.ClientTimeout()
        self._session: aiohttp.ClientSession | None = None
        self._loop: asyncio.AbstractEventLoop | None = None  # track owning loop

    async def _ensure_session(self) -> aiohttp.ClientSession:
        loop = asyncio.get_running_loop()
        loop_changed = self._loop is not None and self._loop is not loop

        if loop_changed:
            # old session belonged to a different (likely closed) loop -> close & reset
            try:
                if self._session and not self._session.closed:
                    await self._session.close()
            finally:
                self._session = None
                self._connector = None
                self._loop = None

        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(limit=0)
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                timeout=self._timeout,
                raise_for_status=False,
            )
            self._loop = loop

        return self._session

    async def get(self, url: str) -> AiohttpResponse:
        sess = await self._ensure_session()
        LOG.debug("transport.get", extra={"extra": {"url": url}})
        try:
            resp = await sess.get(url, allow_redirects=True)
        except _IO_ERRORS as e:
            LOG.debug("transport.error", extra={"extra": {"url": url, "error": type(e).__name__}})
            raise TransportError(_describe(e), url=url) from e
        return AiohttpResponse(resp, url)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._connector = None
        self._loop = None
