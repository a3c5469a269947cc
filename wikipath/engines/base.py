from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from abc import ABC, abstractmethod


class CrawlOutcome(str, Enum):
    FOUND = "found"
    EXHAUSTED = "exhausted"
    # Deadline elapsed or the caller signalled cancellation.
    CANCELLED = "cancelled"


@dataclass
class CrawlReport:
    outcome: CrawlOutcome
    source: str
    sink: str
    # Distinct new non-sink pages discovered, seed excluded.
    visit_count: int = 0
    # Source to sink when FOUND, otherwise empty.
    path: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.outcome is CrawlOutcome.FOUND


class CrawlEngine(ABC):
    """
    Abstract engine interface. Implementations own the crawl lifecycle.
    """
    @abstractmethod
    async def crawl(self, cancel: Optional[asyncio.Event] = None) -> CrawlReport:  # pragma: no cover - interface
        ...
