#!/usr/bin/env python3
"""
Base class for probe executors.

Defines the capability interface the item checker depends on, so real
network clients and test doubles are interchangeable.
"""

from abc import ABC, abstractmethod

from core.models.outcome import ProbeOutcome


def classify_status(method: str, status_code: int) -> ProbeOutcome:
    """
    Map a response status to a probe outcome.

    Statuses in [200, 400) are successes; everything else is reported as an
    HTTP error with the raw status so the caller can decide on escalation.
    """
    if 200 <= status_code < 400:
        return ProbeOutcome.success(method, status_code)
    return ProbeOutcome.http_error(method, status_code)


class Prober(ABC):
    """
    Abstract base class for all probe executors.

    Implementations issue exactly one request per call and never retry.
    """

    @abstractmethod
    async def probe(self, url: str, method: str, timeout: float) -> ProbeOutcome:
        """
        Probe a target once.

        Args:
            url: Target address
            method: HTTP method ("HEAD" or "GET")
            timeout: Hard timeout in seconds

        Returns:
            Classified outcome of the attempt
        """
        pass
