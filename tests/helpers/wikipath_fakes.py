"""In-memory stand-ins for the network side of wikipath used in tests."""

from __future__ import annotations

import asyncio
import random
from collections import deque
from typing import Dict, Iterable, List, Optional, Tuple

from wikipath.config import RunConfig
from wikipath.engines.base import CrawlOutcome
from wikipath.extractors.base import ExtractionError

HOST = "en.wikipedia.org"


def wiki(title: str) -> str:
    return f"https://{HOST}/wiki/{title}"


def wiki_graph(edges: Dict[str, Iterable[str]]) -> Dict[str, List[str]]:
    """Turn {"A": ["B"]} into the same graph keyed by full wiki URLs."""
    return {wiki(page): [wiki(link) for link in links] for page, links in edges.items()}


def make_config(source: str, sink: str, threads: int = 3, **overrides) -> RunConfig:
    return RunConfig(source=wiki(source), sink=wiki(sink), thread_count=threads, **overrides)


class GraphExtractor:
    """Serves a fixed link graph, optionally slow or failing for some pages."""

    def __init__(
        self,
        graph: Dict[str, List[str]],
        *,
        failing: Iterable[str] = (),
        delay: float = 0.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.graph = graph
        self.failing = set(failing)
        self.delay = delay
        self.rng = rng
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.hosts: set[str] = set()

    async def extract(self, page_url: str, scoping_host: str) -> List[str]:
        self.calls.append(page_url)
        self.hosts.add(scoping_host)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.rng is not None:
                await asyncio.sleep(self.rng.random() * 0.002)
            elif self.delay:
                await asyncio.sleep(self.delay)
            else:
                await asyncio.sleep(0)
            if page_url in self.failing:
                raise ExtractionError(page_url, "simulated fetch failure")
            return list(self.graph.get(page_url, []))
        finally:
            self.in_flight -= 1


class EndlessExtractor:
    """Every page links to two brand new pages, so the crawl never runs out of work."""

    def __init__(self, delay: float = 0.005) -> None:
        self.delay = delay
        self.calls = 0

    async def extract(self, page_url: str, scoping_host: str) -> List[str]:
        self.calls += 1
        await asyncio.sleep(self.delay)
        return [f"{page_url}_0", f"{page_url}_1"]


class DemoGraphExtractor(GraphExtractor):
    """Constructible from a RunConfig, for loading through a dotted path."""

    GRAPH = wiki_graph({
        "Knowledge": ["Fact", "Belief"],
        "Fact": ["Truth"],
        "Truth": ["Philosophy"],
        "Belief": ["Knowledge"],
    })

    def __init__(self, config: RunConfig) -> None:
        super().__init__(self.GRAPH)
        self.config = config
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def reference_bfs(graph: Dict[str, List[str]], source: str, sink: str) -> Tuple[CrawlOutcome, int]:
    """Plain sequential BFS with the same counting rules as the engine."""
    if source == sink:
        return CrawlOutcome.FOUND, 0
    seen = {source}
    queue = deque([source])
    count = 0
    while queue:
        page = queue.popleft()
        for link in graph.get(page, []):
            if link in seen:
                continue
            seen.add(link)
            if link == sink:
                return CrawlOutcome.FOUND, count
            count += 1
            queue.append(link)
    return CrawlOutcome.EXHAUSTED, count


def random_graph(rng: random.Random, size: int, max_degree: int = 4) -> Dict[str, List[str]]:
    titles = [f"P{i}" for i in range(size)]
    edges = {
        title: [rng.choice(titles) for _ in range(rng.randint(0, max_degree))]
        for title in titles
    }
    return wiki_graph(edges)
