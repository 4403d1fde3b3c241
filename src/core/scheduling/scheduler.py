#!/usr/bin/env python3
"""
Bounded-concurrency FIFO scheduler.

Admits items into the run queue and keeps at most `concurrency` checks in
flight on the running event loop. Every dispatched check is tagged with the
run epoch; completions from an abandoned run are discarded.
"""

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable, Iterable, Set

from core.models.item import Item
from core.models.result import Result
from core.models.run_state import RunState

logger = logging.getLogger(__name__)


class Scheduler:
    """Admission control loop over a shared RunState."""

    def __init__(self,
                 state: RunState,
                 check: Callable[[Item], Awaitable[Result]],
                 on_result: Callable[[Result], None],
                 concurrency: int = 5):
        """
        Initialize scheduler.

        Args:
            state: Run state shared with the run controller
            check: Coroutine function producing one terminal result per item
            on_result: Called with each result after the slot is released
            concurrency: Maximum number of checks in flight
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.state = state
        self.concurrency = concurrency
        self._check = check
        self._on_result = on_result
        self._tasks: Set[asyncio.Task] = set()

    def admit(self, items: Iterable[Item]) -> int:
        """
        Append items to the tail of the queue.

        Draining resumes immediately when the run is active.

        Returns:
            Number of items admitted
        """
        items = list(items)
        if not items:
            return 0

        self.state.queue.extend(items)
        self.state.total += len(items)
        logger.debug(f"Admitted {len(items)} items (total: {self.state.total})")

        if self.state.running:
            self.pump()
        return len(items)

    def start(self) -> None:
        """Begin draining the queue."""
        self.pump()

    def pump(self) -> None:
        """Launch checks until the concurrency limit or an empty queue is reached."""
        while self.state.active < self.concurrency and self.state.queue:
            item = self.state.queue.popleft()
            self.state.active += 1
            self._dispatch(item)

    @property
    def in_flight(self) -> int:
        """Tasks not yet completed, including ones from abandoned runs."""
        return len(self._tasks)

    def _dispatch(self, item: Item) -> None:
        task = asyncio.ensure_future(self._check(item))
        self._tasks.add(task)
        task.add_done_callback(partial(self._on_done, item, self.state.epoch))

    def _on_done(self, item: Item, epoch: int, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if epoch != self.state.epoch:
            logger.debug(f"Discarding stale result from run {epoch}: {item.url}")
            return

        result = self._result_from(item, task)

        # Release the slot and refill before the result is counted, so the
        # completion predicate sees the queue and active count it depends on.
        self.state.active -= 1
        self.pump()
        self._on_result(result)

    def _result_from(self, item: Item, task: asyncio.Task) -> Result:
        if task.cancelled():
            return Result.broken(item, "check cancelled")
        exc = task.exception()
        if exc is not None:
            logger.error(f"Unexpected error checking {item.url}: {exc}", exc_info=exc)
            return Result.broken(item, f"unexpected error: {exc}")
        return task.result()
