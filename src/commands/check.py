#!/usr/bin/env python3
"""
Check command endpoints for validating links on a page or in a URL list.
"""

import asyncio
import logging
from argparse import Namespace
from typing import List

from .base import BaseCommand
from core.check_service import discover_from_source, run_check
from core.config import Config
from core.discovery.url_list import read_url_list
from core.formatters import format_summary, write_report
from core.marking import InMemoryMarker
from core.models.item import Item
from core.models.run_state import RunSummary

logger = logging.getLogger(__name__)

EXIT_BROKEN_LINKS = 3


class CheckCommand(BaseCommand):
    """Check links for reachability."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute check subcommand."""
        try:
            if subcommand == "page":
                return self.page(args)
            elif subcommand == "urls":
                return self.urls(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"check {subcommand}")

    def page(self, args: Namespace) -> int:
        """Check every link found on a web page or local HTML file."""
        config = self._effective_config(args)
        items = asyncio.run(discover_from_source(
            args.source,
            config,
            base_url=getattr(args, 'base_url', None),
            include_all=getattr(args, 'include_all', False),
            unique=getattr(args, 'unique', False)
        ))
        return self._run(items, config, args, source=args.source)

    def urls(self, args: Namespace) -> int:
        """Check URLs listed in a text file."""
        config = self._effective_config(args)
        items = read_url_list(args.file)
        return self._run(items, config, args, source=args.file)

    def _effective_config(self, args: Namespace) -> Config:
        retry_delay_ms = getattr(args, 'retry_delay_ms', None)
        return self.config.with_overrides(
            check_timeout=getattr(args, 'timeout', None),
            concurrent_checks=getattr(args, 'concurrency', None),
            max_retries=getattr(args, 'retries', None),
            retry_delay=retry_delay_ms / 1000 if retry_delay_ms is not None else None
        )

    def _run(self, items: List[Item], config: Config, args: Namespace, source: str) -> int:
        if not items:
            print("No valid HTTP/HTTPS links found.")
        else:
            print(f"🔗 Checking {len(items)} links from {source} "
                  f"(concurrency {config.checker.concurrent_checks}, retries {config.checker.max_retries})...")

        summary = run_check(items, config, marker=InMemoryMarker())
        print(format_summary(summary))

        output = getattr(args, 'output', None)
        if output:
            path = write_report(summary, output)
            print(f"📄 Report written to {path}")

        if getattr(args, 'slack', False):
            self._send_slack(summary, config, source)

        return EXIT_BROKEN_LINKS if summary.has_broken else 0

    def _send_slack(self, summary: RunSummary, config: Config, source: str) -> bool:
        from integrations.slack_notifier import SlackNotifier
        try:
            notifier = SlackNotifier(config.integrations.slack_webhook_url)
        except ValueError as e:
            self.logger.error(f"Slack not configured: {e}")
            return False

        sent = notifier.send_run_summary(summary, source)
        if sent:
            print("💬 Summary sent to Slack")
        else:
            print("⚠️  Failed to send summary to Slack")
        return sent
