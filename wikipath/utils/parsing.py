from __future__ import annotations

import logging
from typing import List
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """
    Normalize URL by removing fragments, so "#section" anchors collapse onto their page.
    """
    parts = list(urlparse(url))
    parts[5] = ""  # strip fragment
    return urlunparse(parts)


def is_in_scope(url: str, scoping_host: str) -> bool:
    """
    Graph nodes are pages on the scoping host without a query string.
    """
    parsed = urlparse(url)
    return bool(parsed.netloc) and parsed.netloc == scoping_host and not parsed.query


def extract_links(html: str, base_url: str, scoping_host: str) -> List[str]:
    """
    Extract absolute, in-scope links from an HTML string.
    Order follows the document; duplicates are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: dict[str, None] = {}
    for a in soup.select("a[href]"):
        href = a.get("href")
        if not href:
            continue
        try:
            link = normalize_url(urljoin(base_url, href))
            in_scope = is_in_scope(link, scoping_host)
        except ValueError as exc:
            logger.debug("Skipping unparseable href %r on %s: %r", href, base_url, exc)
            continue
        if in_scope:
            out.setdefault(link, None)
    return list(out)
