#!/usr/bin/env python3
"""
Run controller.

Single source of truth for a check run: owns the counters, the start and
completion transitions, and the summary emitted when the run finishes.
"""

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Optional

from core.checking.item_checker import ItemChecker
from core.exceptions import RunStateError
from core.marking import InMemoryMarker, Marker
from core.models.item import Item
from core.models.result import Result
from core.models.run_state import BrokenLink, RunState, RunSummary, utc_now
from core.notifications.base import Notifier
from core.notifications.logging_notifier import LoggingNotifier
from core.scheduling.scheduler import Scheduler

logger = logging.getLogger(__name__)


class RunController:
    """
    Drives one run at a time over a bounded-concurrency scheduler.

    All methods must be called from the event loop thread; start_run and
    admit additionally need a running loop because they dispatch checks.
    """

    def __init__(self,
                 checker: ItemChecker,
                 concurrency: int = 5,
                 marker: Optional[Marker] = None,
                 notifier: Optional[Notifier] = None):
        """
        Initialize run controller.

        Args:
            checker: Item checker used for every dispatched item
            concurrency: Maximum number of checks in flight
            marker: Marking collaborator (in-memory by default)
            notifier: Notification collaborator (logging by default)
        """
        self.state = RunState()
        self.marker = marker or InMemoryMarker()
        self.notifier = notifier or LoggingNotifier()
        self.scheduler = Scheduler(self.state, checker.check, self.on_result, concurrency)

        self.last_summary: Optional[RunSummary] = None
        self._results: List[Result] = []
        self._broken_links: List[BrokenLink] = []
        self._started_at = utc_now()
        self._finished: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def trigger_enabled(self) -> bool:
        return not self.state.running

    def start_run(self, items: Iterable[Item]) -> bool:
        """
        Start a new run over the initial items.

        Starting while a run is active has no effect.

        Returns:
            True if a run was started
        """
        if self.state.running:
            logger.debug("Run already in progress, start ignored")
            return False

        self.state.epoch += 1
        self.state.reset()
        self._results = []
        self._broken_links = []
        self.last_summary = None
        self._started_at = utc_now()
        self._finished = asyncio.Event()

        self._safely(self.marker.reset)
        self.scheduler.admit(items)

        self.state.running = True
        self._safely(self.notifier.on_trigger_state, False)
        logger.info(f"Starting run {self.state.epoch} with {self.state.total} links")
        self._safely(self.notifier.on_run_started, self.state)

        if self.state.total == 0:
            self._finish()
        else:
            self.scheduler.start()
        return True

    def admit(self, items: Iterable[Item]) -> int:
        """
        Admit newly discovered items into the active run.

        Returns:
            Number of items admitted (0 when no run is active)
        """
        items = list(items)
        if not self.state.running:
            if items:
                logger.warning(f"No active run, dropping {len(items)} discovered links")
            return 0

        count = self.scheduler.admit(items)
        if count:
            self._safely(self.notifier.on_items_admitted, count, self.state)
        return count

    def on_result(self, result: Result) -> None:
        """Record one terminal result and finish the run when everything is done."""
        if not self.state.running:
            logger.debug(f"Ignoring result outside an active run: {result.url}")
            return

        self.state.checked += 1
        if result.is_broken:
            self.state.broken += 1
            self._broken_links.append(BrokenLink(result.url, result.reason, result.status_code))
        self._results.append(result)

        self._safely(self.marker.mark, result.item, result)
        self._safely(self.notifier.on_result, result, self.state)

        if self.state.is_drained:
            self._finish()

    def abandon(self) -> None:
        """
        Stop tracking the active run without cancelling in-flight probes.

        Their eventual results are discarded by the epoch check.
        """
        if not self.state.running:
            return
        logger.warning(f"Abandoning run {self.state.epoch} with {self.state.active} checks in flight")
        self.state.epoch += 1
        self.state.running = False
        self.state.reset()
        self._safely(self.notifier.on_trigger_state, True)
        if self._finished is not None:
            self._finished.set()

    async def wait(self) -> Optional[RunSummary]:
        """
        Wait for the current run to finish.

        Returns:
            Summary of the run, or None if it was abandoned
        """
        if self._finished is None:
            raise RunStateError("wait for completion", self.state.running)
        await self._finished.wait()
        return self.last_summary

    async def run(self, items: Iterable[Item]) -> RunSummary:
        """Start a run and wait for its summary."""
        if not self.start_run(items):
            raise RunStateError("start a run", True)
        summary = await self.wait()
        if summary is None:
            raise RunStateError("collect summary of abandoned run", False)
        return summary

    def _finish(self) -> None:
        self.state.running = False

        ok = sum(1 for r in self._results if r.is_ok)
        skipped = sum(1 for r in self._results if r.is_skipped)
        summary = RunSummary(
            run_id=self.state.epoch,
            total=self.state.total,
            checked=self.state.checked,
            ok=ok,
            broken=self.state.broken,
            skipped=skipped,
            started_at=self._started_at,
            finished_at=utc_now(),
            broken_links=list(self._broken_links),
            results=list(self._results)
        )
        self.last_summary = summary
        logger.info(f"Run {summary.run_id} finished in {summary.duration:.2f}s: "
                    f"{summary.ok} ok, {summary.broken} broken, {summary.skipped} skipped")

        self._safely(self.notifier.on_run_finished, summary)
        self._safely(self.notifier.on_trigger_state, True)
        if self._finished is not None:
            self._finished.set()

    def _safely(self, hook: Callable[..., Any], *args: Any) -> None:
        """Call a marking or notification hook; its failures never stall the run."""
        try:
            hook(*args)
        except Exception as e:
            name = getattr(hook, "__qualname__", repr(hook))
            logger.error(f"{name} failed: {e}", exc_info=True)
