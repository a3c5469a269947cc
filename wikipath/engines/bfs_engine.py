from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .base import CrawlEngine, CrawlOutcome, CrawlReport
from .state import Batch, RunState
from .workers import WorkerPool
from ..config import RunConfig
from ..extractors.base import LinkExtractor
from ..utils.loader import load_symbol

logger = logging.getLogger(__name__)


class BFSCrawlEngine(CrawlEngine):
    """
    Concurrent breadth-first search from source to sink over one site's link graph.
    - The coordinator (this class) is the only reader of the frontier and the only
      writer of the visited set and the visit counter.
    - Workers expand pages and hand back one batch per dispatched link.
    - Shutdown always stops and awaits every worker before crawl() returns.
    """
    def __init__(self, config: RunConfig, extractor: LinkExtractor | None = None) -> None:
        config.validate()
        self.config = config
        self.extractor = extractor

    async def crawl(self, cancel: Optional[asyncio.Event] = None) -> CrawlReport:
        if self.extractor is not None:
            return await self._run(self.extractor, cancel)

        # Extractor built from config is owned, and closed, by this run.
        extractor = load_symbol(self.config.extractor)(self.config)
        try:
            return await self._run(extractor, cancel)
        finally:
            close = getattr(extractor, "close", None)
            if close is not None:
                await close()

    async def _run(self, extractor: LinkExtractor, cancel: Optional[asyncio.Event]) -> CrawlReport:
        cfg = self.config
        state = RunState.for_config(cfg)

        # Seed before any worker exists so the drain loop has its first unit of work.
        state.frontier.put_nowait(Batch(links=[state.source]))
        state.outstanding = 1

        pool = WorkerPool(
            state.dispatch,
            state.frontier,
            extractor,
            cfg.scoping_host,
            cfg.thread_count,
            state.stop,
        )
        pool.start()
        try:
            outcome = await self._wait_for_outcome(state, cancel)
        finally:
            await pool.shutdown()

        path = state.path_to(state.sink) if outcome is CrawlOutcome.FOUND else []
        if outcome is CrawlOutcome.FOUND:
            logger.info("Found sink %s after %s visits", state.sink, state.visit_count)
        elif outcome is CrawlOutcome.EXHAUSTED:
            logger.info("Exhausted the graph after %s visits without reaching %s", state.visit_count, state.sink)
        else:
            logger.info("Run cancelled after %s visits", state.visit_count)
        return CrawlReport(
            outcome=outcome,
            source=state.source,
            sink=state.sink,
            visit_count=state.visit_count,
            path=path,
        )

    async def _wait_for_outcome(self, state: RunState, cancel: Optional[asyncio.Event]) -> CrawlOutcome:
        drain = asyncio.create_task(self._drain(state), name="wikipath-coordinator")
        waiters = {drain}
        if cancel is not None:
            waiters.add(asyncio.create_task(cancel.wait(), name="wikipath-cancel"))

        try:
            done, pending = await asyncio.wait(
                waiters, timeout=self.config.timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            # Stop dispatching before anything else unwinds.
            state.stop.set()
            for task in waiters:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)

        if drain in done:
            return drain.result()
        return CrawlOutcome.CANCELLED

    async def _drain(self, state: RunState) -> CrawlOutcome:
        sink = state.sink
        while state.outstanding > 0:
            batch: Batch = await state.frontier.get()
            state.outstanding -= 1

            new_page = False
            for link in batch.links:
                if not state.visited.test_and_mark(link):
                    continue
                state.parents[link] = batch.origin

                if link == sink:
                    # Remaining links of this batch are left unscanned.
                    return CrawlOutcome.FOUND

                if batch.origin is not None:
                    state.visit_count += 1
                    new_page = True
                state.dispatch.put_nowait(link)
                state.outstanding += 1

            if new_page:
                logger.info("Visit count now %s", state.visit_count)

        return CrawlOutcome.EXHAUSTED
