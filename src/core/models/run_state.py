#!/usr/bin/env python3
"""
Run state and run summary data models.

RunState holds the counters and queue of one run. It is owned by a single
RunController and shared with its Scheduler; nothing else mutates it.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from .item import Item
from .result import Result


@dataclass
class RunState:
    """Mutable per-run counters and pending queue."""
    total: int = 0
    checked: int = 0
    broken: int = 0
    active: int = 0
    queue: Deque[Item] = field(default_factory=deque)
    running: bool = False
    epoch: int = 0

    def reset(self) -> None:
        """Zero counters and clear the queue. The epoch is left to the caller."""
        self.total = 0
        self.checked = 0
        self.broken = 0
        self.active = 0
        self.queue.clear()

    @property
    def is_drained(self) -> bool:
        """All admitted items have a terminal result and nothing is in flight."""
        return self.checked == self.total and self.active == 0 and not self.queue

    @property
    def percent_complete(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.checked / self.total * 100)

    def progress_text(self) -> str:
        return f"Checking: {self.checked}/{self.total} (broken: {self.broken})"


@dataclass
class BrokenLink:
    """A broken target and the reason it was classified broken."""
    url: str
    reason: str
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'url': self.url, 'reason': self.reason, 'status_code': self.status_code}


@dataclass
class RunSummary:
    """Final summary emitted once per completed run."""
    run_id: int
    total: int
    checked: int
    ok: int
    broken: int
    skipped: int
    started_at: datetime
    finished_at: datetime
    broken_links: List[BrokenLink] = field(default_factory=list)
    results: List[Result] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def has_broken(self) -> bool:
        return self.broken > 0

    def headline(self) -> str:
        """One-line human summary of the run."""
        text = f"Check complete! {self.total} links."
        if self.broken:
            text += f" {self.broken} broken links found."
        else:
            text += " All links are reachable!"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'run_id': self.run_id,
            'total': self.total,
            'checked': self.checked,
            'ok': self.ok,
            'broken': self.broken,
            'skipped': self.skipped,
            'started_at': self.started_at.isoformat(),
            'finished_at': self.finished_at.isoformat(),
            'duration': round(self.duration, 3),
            'broken_links': [link.to_dict() for link in self.broken_links],
            'results': [result.to_dict() for result in self.results],
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
