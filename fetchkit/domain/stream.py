# /fetchkit/domain/stream.py
from __future__ import annotations

from collections.abc import AsyncIterator

from fetchkit.ports.http_transport import TransportResponse

CHUNK_SIZE = 64 * 1024


class BodyStream:
    """Open response body handed to the caller, who must close it."""

    def __init__(self, resp: TransportResponse) -> None:
        self._resp = resp
        self._closed = False

    @property
    def status(self) -> int:
        return self._resp.status

    @property
    def url(self) -> str:
        return self._resp.url

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self, n: int = -1) -> bytes:
        if self._closed:
            raise ValueError("read from closed body stream")
        return await self._resp.read_chunk(n)

    def iter_chunked(self, n: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
        if self._closed:
            raise ValueError("iterate over closed body stream")
        return self._resp.iter_chunked(n)

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.iter_chunked()

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._resp.release()

    async def __aenter__(self) -> BodyStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
