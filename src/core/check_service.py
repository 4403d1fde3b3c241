#!/usr/bin/env python3
"""
Link check service.

Wires configuration, the HTTP prober, the item checker and a run controller
together, and offers a synchronous entry point for command-line use.
"""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterable, Iterable, List, Optional

from core.checking.item_checker import ItemChecker, is_checkable
from core.config import Config
from core.discovery.feed import AdmissionFeed
from core.discovery.html_links import discover_links
from core.discovery.page_fetcher import fetch_page
from core.marking import Marker
from core.models.item import Item
from core.models.run_state import RunSummary
from core.notifications.base import Notifier
from core.probe.base import Prober
from core.probe.http_prober import HttpProber
from core.run_controller import RunController

logger = logging.getLogger(__name__)


def build_controller(prober: Prober,
                     config: Config,
                     marker: Optional[Marker] = None,
                     notifier: Optional[Notifier] = None) -> RunController:
    """Create a run controller configured from `config`."""
    settings = config.checker
    checker = ItemChecker(
        prober,
        timeout=settings.check_timeout,
        max_retries=settings.max_retries,
        retry_delay=settings.retry_delay
    )
    return RunController(checker, concurrency=settings.concurrent_checks,
                         marker=marker, notifier=notifier)


async def check_items(items: Iterable[Item],
                      config: Config,
                      marker: Optional[Marker] = None,
                      notifier: Optional[Notifier] = None,
                      discovered: Optional[AsyncIterable[List[Item]]] = None) -> RunSummary:
    """
    Check items with a real HTTP prober and wait for the summary.

    Args:
        items: Initial items
        config: Application configuration
        marker: Optional marking collaborator
        notifier: Optional notification collaborator
        discovered: Optional async source of batches found during the run

    Returns:
        Summary of the completed run
    """
    async with HttpProber(user_agent=config.checker.user_agent,
                          follow_redirects=config.checker.follow_redirects) as prober:
        controller = build_controller(prober, config, marker, notifier)
        if not controller.start_run(items):
            raise RuntimeError("Run controller unexpectedly busy")

        feed_task = None
        if discovered is not None:
            feed_task = asyncio.ensure_future(AdmissionFeed(controller).consume(discovered))

        summary = await controller.wait()

        if feed_task is not None:
            await _stop_feed(feed_task)
        return summary


async def _stop_feed(feed_task: asyncio.Future) -> None:
    """Cancel the discovery feed if still running and surface its failure, if any."""
    if not feed_task.done():
        feed_task.cancel()
    try:
        await feed_task
    except asyncio.CancelledError:
        logger.debug("Discovery feed cancelled at end of run")
    except Exception as e:
        logger.error(f"Link discovery failed during run: {e}", exc_info=True)


async def discover_from_source(source: str,
                               config: Config,
                               base_url: Optional[str] = None,
                               include_all: bool = False,
                               unique: bool = False) -> List[Item]:
    """
    Discover links from a page URL or a local HTML file.

    Args:
        source: http(s) page address or path to an HTML file
        config: Application configuration
        base_url: Base for relative links (defaults to the page URL)
        include_all: Keep fragment-only and non-HTTP(S) links
        unique: Drop repeated URLs
    """
    if is_checkable(source):
        html = await fetch_page(source, timeout=config.checker.page_timeout,
                                user_agent=config.checker.user_agent)
        base_url = base_url or source
    else:
        path = Path(source)
        html = path.read_text(encoding='utf-8', errors='replace')

    return discover_links(html, base_url=base_url, include_all=include_all, unique=unique)


def run_check(items: Iterable[Item],
              config: Config,
              marker: Optional[Marker] = None,
              notifier: Optional[Notifier] = None) -> RunSummary:
    """Convenience function to run a check from synchronous code."""
    items = list(items)
    return asyncio.run(check_items(items, config, marker=marker, notifier=notifier))
