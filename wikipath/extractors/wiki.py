from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import aiohttp
from aiohttp import ClientSession

from .base import ExtractionError
from ..config import RunConfig
from ..utils.http import create_session, fetch_text
from ..utils.parsing import extract_links

logger = logging.getLogger(__name__)


class WikiLinkExtractor:
    """
    Fetches a wiki page over HTTP and returns its same-site, query-free links.
    One aiohttp session is shared by every worker and opened on first use.
    """
    def __init__(self, config: RunConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self._session = session
        self._owns_session = session is None

    async def extract(self, page_url: str, scoping_host: str) -> List[str]:
        try:
            html = await fetch_text(
                self._get_session(),
                page_url,
                timeout=self.config.request_timeout,
                user_agent=self.config.user_agent,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            raise ExtractionError(page_url, repr(exc)) from exc

        try:
            links = extract_links(html, page_url, scoping_host)
        except Exception as exc:  # bs4 raises a grab bag on malformed markup
            raise ExtractionError(page_url, repr(exc)) from exc
        logger.debug("Extracted %s links from %s", len(links), page_url)
        return links

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "WikiLinkExtractor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self) -> ClientSession:
        if self._session is None:
            self._session = create_session()
            self._owns_session = True
        return self._session
