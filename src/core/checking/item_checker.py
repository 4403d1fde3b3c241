#!/usr/bin/env python3
"""
Item checker with HEAD→GET escalation and retry.

Owns the lifecycle of one item per invocation: a cheap HEAD probe first,
retried on connectivity failures, escalated once to GET when the HEAD
status is known to be unreliable (404, 405, 5xx).
"""

import asyncio
import logging
from typing import Awaitable, Callable
from urllib.parse import urlparse

from core.exceptions import ErrorRecovery
from core.models.item import Item
from core.models.outcome import ProbeOutcome
from core.models.result import Result
from core.probe.base import Prober

logger = logging.getLogger(__name__)

CHECKABLE_SCHEMES = ('http', 'https')


def is_checkable(url: str) -> bool:
    """Return True for non-empty absolute HTTP(S) addresses."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in CHECKABLE_SCHEMES and bool(parsed.netloc)


class ItemChecker:
    """Produces exactly one terminal result per checked item."""

    def __init__(self,
                 prober: Prober,
                 timeout: float = 10.0,
                 max_retries: int = 1,
                 retry_delay: float = 0.5,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        """
        Initialize item checker.

        Args:
            prober: Probe executor used for every attempt
            timeout: Per-probe timeout in seconds
            max_retries: HEAD retries allowed on network errors and timeouts
            retry_delay: Fixed delay between retries in seconds
            sleep: Awaitable used for the retry delay
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.prober = prober
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    async def check(self, item: Item) -> Result:
        """
        Check one item.

        Args:
            item: Item to check

        Returns:
            Terminal result (ok, broken or skipped)
        """
        url = item.url
        if not is_checkable(url):
            logger.debug(f"Skipping non-HTTP(S) target: {url or 'empty link'}")
            return Result.skipped(item, "non-http")

        attempts = 0
        retry_count = 0
        while True:
            outcome = await self.prober.probe(url, 'HEAD', self.timeout)
            attempts += 1

            if outcome.is_success:
                return Result.ok(item, outcome.status_code, 'HEAD', attempts)

            if not ErrorRecovery.is_retryable_outcome(outcome):
                break

            if retry_count >= self.max_retries:
                return Result.broken(item, outcome.describe(), method='HEAD', attempts=attempts)

            logger.warning(f"{outcome.describe()}: {url} "
                           f"(attempt {retry_count + 1}/{self.max_retries}), retrying HEAD...")
            await self._sleep(self.retry_delay)
            retry_count += 1

        if ErrorRecovery.should_escalate('HEAD', outcome.status_code):
            return await self._escalate(item, outcome, attempts, retry_count)

        return Result.broken(item, outcome.describe(), status_code=outcome.status_code,
                             method='HEAD', attempts=attempts)

    async def _escalate(self, item: Item, head: ProbeOutcome, attempts: int, retry_count: int) -> Result:
        """Re-probe with GET once. A failing GET is final."""
        url = item.url
        logger.info(f"HEAD returned {head.status_code}: {url}, trying GET...")

        outcome = await self.prober.probe(url, 'GET', self.timeout)
        attempts += 1

        if outcome.is_success:
            return Result.ok(item, outcome.status_code, 'GET', attempts)

        if ErrorRecovery.is_retryable_outcome(outcome):
            reason = outcome.describe()
            if retry_count < self.max_retries:
                # GET escalation is single-shot
                logger.warning(f"{reason}: {url}, GET escalation is not retried")
                reason = f"{reason} (GET escalation not retried)"
            return Result.broken(item, reason, method='GET', attempts=attempts)

        return Result.broken(item, outcome.describe(), status_code=outcome.status_code,
                             method='GET', attempts=attempts)
