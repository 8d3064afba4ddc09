# /fetchkit/api.py
from __future__ import annotations

from collections.abc import Sequence

from fetchkit.adapters.http.aiohttp_transport import AiohttpTransport
from fetchkit.adapters.system.logging_cfg import configure_logger
from fetchkit.config import Settings, settings
from fetchkit.domain.batch import BatchFetcher, FileResult
from fetchkit.domain.client import Client


def new_client(cfg: Settings = settings) -> Client:
    """
    Build a Client over a fresh aiohttp transport.
    Safe to call before an event loop exists; close it (or use `async with`) when done.
    """
    if cfg.LOG_JSON:
        configure_logger(cfg.LOG_LEVEL)
    return Client(AiohttpTransport())


async def download_all(
    client: Client,
    urls: Sequence[str],
    names: Sequence[str] | None = None,
    *,
    cfg: Settings = settings,
) -> list[FileResult]:
    fetcher = BatchFetcher(client, concurrency=cfg.BATCH_CONCURRENCY or None)
    return await fetcher.fetch_all(urls, names)


files = download_all
