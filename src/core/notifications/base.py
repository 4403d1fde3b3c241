#!/usr/bin/env python3
"""
Base class for run notifications.

Notifiers observe a run: start, each terminal result, trigger state and the
final summary. They never influence scheduling.
"""

from abc import ABC
from typing import List

from core.models.result import Result
from core.models.run_state import RunState, RunSummary


class Notifier(ABC):
    """Observer of run progress. Every hook defaults to a no-op."""

    def on_run_started(self, state: RunState) -> None:
        pass

    def on_items_admitted(self, count: int, state: RunState) -> None:
        pass

    def on_result(self, result: Result, state: RunState) -> None:
        pass

    def on_run_finished(self, summary: RunSummary) -> None:
        pass

    def on_trigger_state(self, enabled: bool) -> None:
        """The start trigger is disabled while a run is active."""
        pass


class CompositeNotifier(Notifier):
    """Fans every event out to several notifiers."""

    def __init__(self, notifiers: List[Notifier]):
        self.notifiers = list(notifiers)

    def on_run_started(self, state: RunState) -> None:
        for notifier in self.notifiers:
            notifier.on_run_started(state)

    def on_items_admitted(self, count: int, state: RunState) -> None:
        for notifier in self.notifiers:
            notifier.on_items_admitted(count, state)

    def on_result(self, result: Result, state: RunState) -> None:
        for notifier in self.notifiers:
            notifier.on_result(result, state)

    def on_run_finished(self, summary: RunSummary) -> None:
        for notifier in self.notifiers:
            notifier.on_run_finished(summary)

    def on_trigger_state(self, enabled: bool) -> None:
        for notifier in self.notifiers:
            notifier.on_trigger_state(enabled)
