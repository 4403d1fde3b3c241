#!/usr/bin/env python3
"""
Item data model.

An item is anything with a target address that can be probed. Identity is
by reference: the same instance flows through retries, marking and results.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class Item:
    """A single checkable reference (usually a hyperlink)."""
    url: str
    handle: Optional[Any] = None
    text: str = ""
    source: str = ""

    def __post_init__(self):
        self.url = (self.url or "").strip()
        self.text = (self.text or "").strip()

    def __repr__(self):
        return f"Item(url='{self.url[:80]}', source='{self.source}')"
