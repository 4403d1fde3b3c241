#!/usr/bin/env python3
"""
Probe executors.

A prober performs one HTTP-method attempt against one target and classifies
what happened. Retry and escalation policy belong to the item checker.
"""

from .base import Prober, classify_status
from .http_prober import HttpProber

__all__ = ['Prober', 'HttpProber', 'classify_status']
