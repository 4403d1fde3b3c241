#!/usr/bin/env python3
"""
Run notifications: observers of progress and final summaries.
"""

from .base import CompositeNotifier, Notifier
from .logging_notifier import LoggingNotifier

__all__ = ['Notifier', 'CompositeNotifier', 'LoggingNotifier']
