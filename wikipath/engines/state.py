from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import RunConfig


class VisitedSet:
    """Concurrency-safe set of canonical URLs; the single record of what has been discovered."""

    def __init__(self) -> None:
        self._seen: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def test_and_mark(self, url: str) -> bool:
        """Mark url and return True if this call was the first to do so."""
        with self._lock:
            if self._seen.get(url):
                return False
            self._seen[url] = True
            return True

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return bool(self._seen.get(url))

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)


@dataclass
class Batch:
    """One page's outbound links, or the seed. Consumed exactly once by the coordinator."""
    links: List[str]
    origin: Optional[str] = None


@dataclass
class RunState:
    """
    Everything one crawl owns. Built per run so independent runs never share state.
    Workers get the queues and the stop signal only, never the visited set.
    """
    config: RunConfig
    source: str
    sink: str
    dispatch: asyncio.Queue = field(default_factory=asyncio.Queue)
    frontier: asyncio.Queue = field(default_factory=asyncio.Queue)
    visited: VisitedSet = field(default_factory=VisitedSet)
    stop: asyncio.Event = field(default_factory=asyncio.Event)
    visit_count: int = 0
    # Seed batch plus dispatched links whose batch has not come back yet.
    outstanding: int = 0
    parents: Dict[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def for_config(cls, config: RunConfig) -> "RunState":
        return cls(config=config, source=config.source, sink=config.sink)

    def path_to(self, url: str) -> List[str]:
        path: List[str] = []
        node: Optional[str] = url
        while node is not None:
            path.append(node)
            node = self.parents.get(node)
        path.reverse()
        return path
