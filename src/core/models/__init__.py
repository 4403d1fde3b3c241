#!/usr/bin/env python3
"""
Core data models for link checking.

Contains all data structures used throughout the application.
"""

from .item import Item
from .outcome import OutcomeKind, ProbeOutcome
from .result import Result, ResultStatus
from .run_state import BrokenLink, RunState, RunSummary

__all__ = [
    'Item', 'OutcomeKind', 'ProbeOutcome', 'Result', 'ResultStatus',
    'BrokenLink', 'RunState', 'RunSummary'
]
