#!/usr/bin/env python3
"""
Result data model.

Terminal classification of an item for the current run. Exactly one result
is produced per item per run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .item import Item


class ResultStatus(Enum):
    """Terminal result variants."""
    OK = "ok"
    BROKEN = "broken"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Result:
    """Terminal result for one item."""
    item: Item
    status: ResultStatus
    reason: str = ""
    status_code: Optional[int] = None
    attempts: int = 0
    method: Optional[str] = None

    @classmethod
    def ok(cls, item: Item, status_code: int, method: str, attempts: int) -> 'Result':
        return cls(item, ResultStatus.OK, reason=f"method {method}", status_code=status_code,
                   attempts=attempts, method=method)

    @classmethod
    def broken(cls, item: Item, reason: str, status_code: Optional[int] = None,
               method: Optional[str] = None, attempts: int = 0) -> 'Result':
        return cls(item, ResultStatus.BROKEN, reason=reason, status_code=status_code,
                   attempts=attempts, method=method)

    @classmethod
    def skipped(cls, item: Item, reason: str = "non-http") -> 'Result':
        return cls(item, ResultStatus.SKIPPED, reason=reason)

    @property
    def url(self) -> str:
        return self.item.url

    @property
    def is_ok(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def is_broken(self) -> bool:
        return self.status is ResultStatus.BROKEN

    @property
    def is_skipped(self) -> bool:
        return self.status is ResultStatus.SKIPPED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON/CSV reports."""
        return {
            'url': self.url,
            'status': self.status.value,
            'status_code': self.status_code,
            'reason': self.reason,
            'attempts': self.attempts,
            'method': self.method,
        }

    def __repr__(self):
        return f"Result(status={self.status.value}, url='{self.url[:60]}', reason='{self.reason}')"
