#!/usr/bin/env python3
"""
HTML link discovery.

Collects anchors from an HTML document and turns them into items.
Fragment-only, empty and non-HTTP(S) links are dropped unless asked for.
"""

import logging
from typing import List, Optional, Set
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from core.models.item import Item

logger = logging.getLogger(__name__)


def _is_http(url: str) -> bool:
    return urlparse(url).scheme.lower() in ('http', 'https')


def discover_links(html: str,
                   base_url: Optional[str] = None,
                   include_all: bool = False,
                   unique: bool = False) -> List[Item]:
    """
    Discover checkable links in an HTML document.

    Args:
        html: Document markup
        base_url: Address the document was loaded from, for relative links
        include_all: Keep fragment-only and non-HTTP(S) links too
        unique: Keep only the first anchor for each resolved URL

    Returns:
        Items in document order
    """
    soup = BeautifulSoup(html, 'html.parser')

    base_tag = soup.find('base', href=True)
    if base_tag is not None:
        base_url = urljoin(base_url or '', base_tag['href'])

    items: List[Item] = []
    seen: Set[str] = set()
    dropped = 0

    for anchor in soup.find_all('a', href=True):
        raw_href = anchor['href'].strip()
        in_page = not raw_href or raw_href.startswith('#')
        # In-page anchors keep the raw href so the checker skips them
        url = urljoin(base_url, raw_href) if base_url and not in_page else raw_href

        if not include_all and (in_page or not _is_http(url)):
            dropped += 1
            continue

        if unique:
            if url in seen:
                continue
            seen.add(url)

        items.append(Item(
            url=url,
            handle=anchor,
            text=anchor.get_text(" ", strip=True),
            source=base_url or ''
        ))

    logger.debug(f"Discovered {len(items)} links ({dropped} non-HTTP links dropped)")
    return items
