#!/usr/bin/env python3
"""
Download a page whose links are to be checked.
"""

import asyncio
import logging

import aiohttp

from core.exceptions import PageFetchError

logger = logging.getLogger(__name__)


async def fetch_page(url: str, timeout: float = 20, user_agent: str = 'Mozilla/5.0 (compatible; LinkChecker/1.0)') -> str:
    """
    Fetch HTML for link discovery.

    Args:
        url: Page address
        timeout: Request timeout in seconds
        user_agent: User-Agent header

    Returns:
        Decoded page body

    Raises:
        PageFetchError: If the page cannot be downloaded
    """
    logger.info(f"Fetching page: {url}")
    try:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout),
            headers={'User-Agent': user_agent}
        ) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                return await response.text(errors='replace')
    except asyncio.TimeoutError as e:
        raise PageFetchError(url, e) from e
    except aiohttp.ClientError as e:
        raise PageFetchError(url, e) from e
