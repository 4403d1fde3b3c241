#!/usr/bin/env python3
"""
Bounded-concurrency scheduling of item checks.
"""

from .scheduler import Scheduler

__all__ = ['Scheduler']
