# /tests/test_api.py
from __future__ import annotations

import io
import json
import logging

import pytest

from fetchkit import api
from fetchkit.adapters.http.aiohttp_transport import AiohttpTransport
from fetchkit.adapters.system.logging_cfg import JSONHandler, configure_logger
from fetchkit.config import Settings
from fetchkit.domain.client import Client
from tests.fakes import FakeTransport


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_new_client_builds_aiohttp_transport_without_a_loop() -> None:
    c = api.new_client(Settings(LOG_JSON=False))
    assert isinstance(c, Client)
    assert isinstance(c.transport, AiohttpTransport)


def test_new_client_configures_json_logging_when_asked(root_logger) -> None:
    api.new_client(Settings(LOG_JSON=True, LOG_LEVEL="DEBUG"))
    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0], JSONHandler)


def test_configure_logger_writes_json_lines(root_logger) -> None:
    buf = io.StringIO()
    configure_logger(logging.INFO, stream=buf)
    logging.getLogger("domain.batch").info("batch.done", extra={"extra": {"urls": 3}})
    logging.getLogger("domain.batch").debug("hidden")
    lines = buf.getvalue().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0]) == {
        "level": "INFO",
        "msg": "batch.done",
        "logger": "domain.batch",
        "urls": 3,
    }


@pytest.mark.asyncio
async def test_download_all_honours_batch_concurrency() -> None:
    urls = [f"http://fixture.test/{i}" for i in range(6)]
    t = FakeTransport({x: (200, x.encode()) for x in urls}, delays={x: 0.01 for x in urls})
    out = await api.download_all(Client(t), urls, cfg=Settings(BATCH_CONCURRENCY=3))
    assert [f.data for f in out] == [x.encode() for x in urls]
    assert t.max_active <= 3


@pytest.mark.asyncio
async def test_files_is_download_all() -> None:
    t = FakeTransport({"http://fixture.test/a": (200, b"a")})
    out = await api.files(Client(t), ["http://fixture.test/a"], names=["a.bin"])
    assert out[0].name == "a.bin" and out[0].data == b"a"


def test_settings_defaults() -> None:
    s = Settings()
    assert isinstance(s.LOG_JSON, bool)
    assert s.BATCH_CONCURRENCY >= 0


def test_configure_logger_includes_exception_text(root_logger) -> None:
    buf = io.StringIO()
    configure_logger("warning", stream=buf)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logging.getLogger("api").exception("download.failed")
    payload = json.loads(buf.getvalue())
    assert payload["level"] == "ERROR"
    assert "RuntimeError: boom" in payload["exc"]
