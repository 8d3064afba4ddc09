# /fetchkit/domain/batch.py
from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Coroutine, Sequence
from dataclasses import dataclass
from typing import Any

from fetchkit.domain.client import Client

LOG = logging.getLogger("domain.batch")

# ==== DTOs ====


@dataclass(slots=True)
class FileResult:
    name: str = ""
    data: bytes = b""


# ==== Service ====


class BatchFetcher:
    """
    Fetches an ordered list of URLs concurrently into positionally aligned FileResults.

    One task per URL. Task i owns slot i of a pre-sized result list, so no locking is
    needed. Tasks report on a completion queue sized to the batch; the caller drains it
    and raises the first failure it sees. Tasks still running at that point are not
    cancelled: they finish in the background and their outcome is dropped.
    """

    def __init__(self, client: Client, *, concurrency: int | None = None) -> None:
        if concurrency is not None and concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.client = client
        self.concurrency = concurrency
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    @staticmethod
    def _allocate(urls: Sequence[str], names: Sequence[str] | None) -> list[FileResult]:
        if names is None:
            return [FileResult() for _ in urls]
        if len(names) != len(urls):
            raise ValueError(f"got {len(names)} names for {len(urls)} urls")
        return [FileResult(name=n) for n in names]

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        # strong refs until done; the loop only keeps weak ones
        task = asyncio.create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _fetch_one(
        self,
        url: str,
        slot: FileResult,
        done: asyncio.Queue[Exception | None],
        sem: asyncio.Semaphore | None,
    ) -> None:
        try:
            async with sem if sem is not None else contextlib.nullcontext():
                slot.data = await self.client.get_bytes(url)
        except Exception as e:
            done.put_nowait(e)
            return
        done.put_nowait(None)

    async def fetch_all(
        self, urls: Sequence[str], names: Sequence[str] | None = None
    ) -> list[FileResult]:
        files = self._allocate(urls, names)
        n = len(files)
        if n == 0:
            return files

        done: asyncio.Queue[Exception | None] = asyncio.Queue(maxsize=n)
        sem = asyncio.Semaphore(self.concurrency) if self.concurrency else None
        LOG.debug("batch.start", extra={"extra": {"urls": n, "concurrency": self.concurrency}})

        for url, slot in zip(urls, files):
            self._spawn(self._fetch_one(url, slot, done, sem))

        for _ in range(n):
            err = await done.get()
            if err is not None:
                LOG.debug(
                    "batch.failed",
                    extra={"extra": {"urls": n, "url": getattr(err, "url", None), "error": str(err)}},
                )
                raise err

        LOG.debug("batch.done", extra={"extra": {"urls": n}})
        return files
