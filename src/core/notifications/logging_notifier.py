#!/usr/bin/env python3
"""
Logging notifier.

Reports per-item outcomes, progress and the final summary through the
standard logging system.
"""

import logging

from core.models.result import Result
from core.models.run_state import RunState, RunSummary
from .base import Notifier

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    """Writes human-readable progress events to a logger."""

    def __init__(self, log: logging.Logger = logger, max_url_length: int = 50):
        self.log = log
        self.max_url_length = max_url_length
        self.progress_text = ""
        self.percent = 0

    def _short(self, url: str) -> str:
        if len(url) <= self.max_url_length:
            return url
        return url[:self.max_url_length] + "..."

    def on_run_started(self, state: RunState) -> None:
        if state.total == 0:
            self.log.warning("No valid HTTP/HTTPS links found.")
            return
        self.log.info(f"Found {state.total} links, starting check "
                      f"(HEAD 404/405/5xx responses are retried with GET)...")

    def on_items_admitted(self, count: int, state: RunState) -> None:
        self.log.info(f"Discovered {count} new links (total: {state.total})")

    def on_result(self, result: Result, state: RunState) -> None:
        if result.is_broken:
            self.log.warning(f"Broken ({result.reason}): {self._short(result.url)}")
        elif result.is_ok:
            self.log.info(f"OK ({result.reason}, status: {result.status_code}): {result.url}")
        else:
            self.log.info(f"Skipped ({result.reason}): {result.url or 'empty link'}")

        self.progress_text = state.progress_text()
        self.percent = state.percent_complete
        self.log.debug(f"{self.percent}% - {self.progress_text}")

    def on_run_finished(self, summary: RunSummary) -> None:
        if summary.broken_links:
            self.log.warning("-" * 40)
            self.log.warning(f"Found {summary.broken} broken links:")
            for link in summary.broken_links:
                self.log.warning(f"- {link.url} (reason: {link.reason})")
            self.log.warning("-" * 40)
        self.log.info(summary.headline())
