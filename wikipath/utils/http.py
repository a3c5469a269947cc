from __future__ import annotations

from typing import Optional
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging

logger = logging.getLogger(__name__)


async def fetch_text(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 2.0,
    user_agent: Optional[str] = None,
) -> str:
    """
    Fetch a URL and return body text.
    Raises aiohttp.ClientError or asyncio.TimeoutError; there is no retry, a failed page is a dead end.
    """
    headers = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
        resp.raise_for_status()
        text = await resp.text()
    logger.debug("Fetched %s (%s chars)", url, len(text))
    return text


def create_session() -> ClientSession:
    """
    Create a shared aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    connector = aiohttp.TCPConnector(limit=0)  # unlimited; concurrency bounded by the worker pool
    return aiohttp.ClientSession(connector=connector)
