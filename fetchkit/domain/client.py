# /fetchkit/domain/client.py
from __future__ import annotations

import json
import logging
from typing import Any

import xmltodict
from pydantic import TypeAdapter

from fetchkit.domain.errors import DecodeError, StatusError
from fetchkit.domain.stream import BodyStream
from fetchkit.ports.http_transport import HTTPTransportPort, TransportResponse

LOG = logging.getLogger("domain.client")

TEXT_ENCODING = "utf-8"


class Client:
    """
    Status-checked GET helpers over an injected transport.
    Holds nothing but the transport, so one instance can serve any number of
    concurrent calls. Every helper does exactly one round trip.
    """

    __slots__ = ("_transport",)

    def __init__(self, transport: HTTPTransportPort) -> None:
        self._transport = transport

    @property
    def transport(self) -> HTTPTransportPort:
        return self._transport

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # --- raw access ---

    async def fetch(self, url: str) -> TransportResponse:
        """Issue a GET and hand back the live response; the caller releases it."""
        LOG.debug("fetch.get", extra={"extra": {"url": url}})
        return await self._transport.get(url)

    async def _fetch_ok(self, url: str) -> TransportResponse:
        resp = await self.fetch(url)
        if resp.status != 200:
            resp.release()
            LOG.debug("fetch.status", extra={"extra": {"url": url, "status": resp.status}})
            raise StatusError.for_status(url, resp.status)
        return resp

    async def _read_ok(self, url: str) -> tuple[int, bytes]:
        resp = await self._fetch_ok(url)
        try:
            return resp.status, await resp.read()
        finally:
            resp.release()

    # --- body adapters ---

    async def get_bytes(self, url: str) -> bytes:
        _, body = await self._read_ok(url)
        return body

    async def get_string(self, url: str) -> str:
        body = await self.get_bytes(url)
        return body.decode(TEXT_ENCODING, errors="replace")

    async def get_reader(self, url: str) -> BodyStream:
        return BodyStream(await self._fetch_ok(url))

    async def get_json(self, url: str, model: Any = None) -> Any:
        """
        Decode a JSON body. Syntax errors become DecodeError; when `model` is given,
        validation errors from pydantic are raised as they are.
        """
        status, body = await self._read_ok(url)
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"JSON syntax error at {url}", status=status, url=url) from e
        return _validate(data, model)

    async def get_xml(self, url: str, model: Any = None) -> Any:
        """Decode an XML body; parse and validation errors are not wrapped."""
        _, body = await self._read_ok(url)
        return _validate(xmltodict.parse(body), model)


def _validate(data: Any, model: Any) -> Any:
    if model is None:
        return data
    return TypeAdapter(model).validate_python(data)
