#!/usr/bin/env python3
"""
Per-item checking: method fallback and retry on top of a prober.
"""

from .item_checker import ItemChecker, is_checkable

__all__ = ['ItemChecker', 'is_checkable']
