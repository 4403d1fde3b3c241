#!/usr/bin/env python3
"""
Marking of checked items.

A marker applies a persistent "broken" marker to items with a broken
result and clears it for items that check out fine. Calls are idempotent.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from core.models.item import Item
from core.models.result import Result

logger = logging.getLogger(__name__)


class Marker(ABC):
    """Abstract marking collaborator."""

    @abstractmethod
    def reset(self) -> None:
        """Clear every marker applied by a previous run."""
        pass

    @abstractmethod
    def mark(self, item: Item, result: Result) -> None:
        """Apply or clear the marker for an item given its terminal result."""
        pass


class InMemoryMarker(Marker):
    """Keeps broken markers keyed by item, with the broken reason."""

    def __init__(self):
        self._broken: Dict[int, str] = {}
        self._items: Dict[int, Item] = {}
        self._checked: Dict[int, Item] = {}

    def reset(self) -> None:
        cleared = len(self._broken)
        self._broken.clear()
        self._items.clear()
        self._checked.clear()
        if cleared:
            logger.debug(f"Cleared {cleared} broken markers")

    def mark(self, item: Item, result: Result) -> None:
        key = id(item)
        if not result.is_skipped:
            self._checked[key] = item

        if result.is_broken:
            self._broken[key] = f"Broken link: {result.reason}\nURL: {result.url}"
            self._items[key] = item
        elif result.is_ok:
            self._broken.pop(key, None)
            self._items.pop(key, None)

    def is_broken(self, item: Item) -> bool:
        return id(item) in self._broken

    def is_checked(self, item: Item) -> bool:
        return id(item) in self._checked

    def title_for(self, item: Item) -> Optional[str]:
        """Tooltip-style marker text for a broken item."""
        return self._broken.get(id(item))

    def broken_items(self) -> List[Item]:
        return list(self._items.values())
