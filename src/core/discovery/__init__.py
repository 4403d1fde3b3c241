#!/usr/bin/env python3
"""
Item discovery: finding links to check and feeding them into a run.
"""

from .html_links import discover_links
from .url_list import read_url_list
from .page_fetcher import fetch_page
from .feed import AdmissionFeed

__all__ = ['discover_links', 'read_url_list', 'fetch_page', 'AdmissionFeed']
