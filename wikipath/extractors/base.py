from __future__ import annotations

from typing import List, Protocol


class ExtractionError(Exception):
    """A page could not be fetched or parsed. Local to that page, never fatal to a run."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        super().__init__(f"could not extract links from {url}: {cause}")
        self.url = url
        self.cause = cause


class LinkExtractor(Protocol):
    """
    Interface for the expand-one-page step.
    Implementations bound their own latency and return only in-scope links;
    the engine never re-filters what comes back.
    """

    async def extract(self, page_url: str, scoping_host: str) -> List[str]:
        """Return the outbound links of page_url restricted to scoping_host."""
        ...
