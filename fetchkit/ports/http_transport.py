# /fetchkit/ports/http_transport.py
from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Protocol


class TransportResponse(Protocol):
    @property
    def status(self) -> int: ...

    @property
    def url(self) -> str: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def closed(self) -> bool: ...

    async def read(self) -> bytes:
        """Read the whole body; raise FetchError(status=...) on I/O failure."""

    async def read_chunk(self, n: int = -1) -> bytes:
        """Read up to n bytes (all remaining when n < 0); b"" at EOF."""

    def iter_chunked(self, n: int) -> AsyncIterator[bytes]:
        """Yield the body in chunks of at most n bytes."""

    def release(self) -> None:
        """Give the connection back; idempotent."""


class HTTPTransportPort(Protocol):
    async def get(self, url: str) -> TransportResponse:
        """Issue a GET; raise TransportError when no response is received."""

    async def close(self) -> None: ...
