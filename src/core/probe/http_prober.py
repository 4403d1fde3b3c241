#!/usr/bin/env python3
"""
Async HTTP probe executor.

Issues single HEAD/GET requests with aiohttp and classifies the response.
The response body is never read, so GET probes stay cheap.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from core.models.outcome import ProbeOutcome
from .base import Prober, classify_status

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; LinkChecker/1.0)'


class HttpProber(Prober):
    """aiohttp-backed prober sharing one client session across probes."""

    def __init__(self,
                 user_agent: str = DEFAULT_USER_AGENT,
                 follow_redirects: bool = True,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize HTTP prober.

        Args:
            user_agent: User-Agent header sent with every probe
            follow_redirects: Whether redirects are followed before classifying
            session: Optional externally managed session
        """
        self.user_agent = user_agent
        self.follow_redirects = follow_redirects
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={'User-Agent': self.user_agent}
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None

    async def probe(self, url: str, method: str, timeout: float) -> ProbeOutcome:
        if not self._session:
            raise RuntimeError("HttpProber must be used as async context manager")

        try:
            async with self._session.request(
                method,
                url,
                timeout=aiohttp.ClientTimeout(total=timeout),
                allow_redirects=self.follow_redirects
            ) as response:
                status = response.status
        except asyncio.TimeoutError:
            logger.debug(f"{method} timed out after {timeout}s: {url}")
            return ProbeOutcome.timeout(method, timeout)
        except aiohttp.ClientError as e:
            detail = str(e) or e.__class__.__name__
            logger.debug(f"{method} network error for {url}: {detail}")
            return ProbeOutcome.network_error(method, detail)

        logger.debug(f"{method} {url} -> {status}")
        return classify_status(method, status)
