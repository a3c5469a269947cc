from __future__ import annotations

import asyncio
import logging
from typing import List

from .state import Batch
from ..extractors.base import LinkExtractor

logger = logging.getLogger(__name__)


class WorkerPool:
    """
    A fixed number of long-lived tasks expanding one page at a time.
    - Pull a link from the dispatch queue.
    - Ask the extractor for its links.
    - Push exactly one batch (empty on failure) back onto the frontier.
    Once the stop signal is set nothing more is extracted or delivered.
    """
    def __init__(
        self,
        dispatch: asyncio.Queue,
        frontier: asyncio.Queue,
        extractor: LinkExtractor,
        scoping_host: str,
        size: int,
        stop: asyncio.Event,
    ) -> None:
        self.dispatch = dispatch
        self.frontier = frontier
        self.extractor = extractor
        self.scoping_host = scoping_host
        self.size = size
        self.stop = stop
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> int:
        return sum(1 for t in self._tasks if not t.done())

    def start(self) -> None:
        if self._tasks:
            raise RuntimeError("worker pool already started")
        self._tasks = [
            asyncio.create_task(self._worker(), name=f"wikipath-worker-{i}")
            for i in range(self.size)
        ]

    async def shutdown(self) -> None:
        """Cancel every worker and wait until all of them have exited."""
        self.stop.set()
        for task in self._tasks:
            task.cancel()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for task, result in zip(self._tasks, results):
            if isinstance(result, Exception):
                logger.error("Worker %s died: %r", task.get_name(), result)

    async def _worker(self) -> None:
        while True:
            link = await self.dispatch.get()
            if self.stop.is_set():
                return
            links = await self._expand(link)
            if self.stop.is_set():
                # Run already concluded; nobody is waiting for this batch.
                return
            await self.frontier.put(Batch(links=links, origin=link))

    async def _expand(self, link: str) -> List[str]:
        logger.info("Crawling %s", link)
        try:
            return list(await self.extractor.extract(link, self.scoping_host))
        except Exception as exc:  # a failed page is a dead end, not a failed run
            logger.warning("Extraction error for %s: %s", link, exc)
            return []
