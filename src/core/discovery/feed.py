#!/usr/bin/env python3
"""
Admission feed for links discovered while a run is in progress.

Forwards batches from an async source into the run controller. Batches
that arrive after the run has finished are dropped.
"""

import logging
from typing import AsyncIterable, Iterable

from core.models.item import Item

logger = logging.getLogger(__name__)


class AdmissionFeed:
    """Pushes discovered batches into an active run."""

    def __init__(self, controller):
        self.controller = controller
        self.admitted = 0
        self.dropped = 0

    def push(self, batch: Iterable[Item]) -> int:
        """Admit one batch; returns how many items were admitted."""
        batch = list(batch)
        count = self.controller.admit(batch)
        self.admitted += count
        self.dropped += len(batch) - count
        return count

    async def consume(self, source: AsyncIterable[Iterable[Item]]) -> int:
        """
        Admit every batch produced by `source`.

        Returns:
            Total number of items admitted
        """
        async for batch in source:
            self.push(batch)
        logger.debug(f"Admission feed exhausted: {self.admitted} admitted, {self.dropped} dropped")
        return self.admitted
