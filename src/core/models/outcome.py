#!/usr/bin/env python3
"""
Probe outcome data model.

A probe outcome describes a single HTTP attempt. It is immutable and is
consumed by the item checker straight away.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeKind(Enum):
    """Classification of one probe attempt."""
    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one HTTP-method attempt against one target."""
    kind: OutcomeKind
    method: str
    status_code: Optional[int] = None
    detail: str = ""

    @classmethod
    def success(cls, method: str, status_code: int) -> 'ProbeOutcome':
        return cls(OutcomeKind.SUCCESS, method, status_code=status_code)

    @classmethod
    def http_error(cls, method: str, status_code: int) -> 'ProbeOutcome':
        return cls(OutcomeKind.HTTP_ERROR, method, status_code=status_code)

    @classmethod
    def network_error(cls, method: str, detail: str) -> 'ProbeOutcome':
        return cls(OutcomeKind.NETWORK_ERROR, method, detail=detail or "Unknown Error")

    @classmethod
    def timeout(cls, method: str, timeout_seconds: Optional[float] = None) -> 'ProbeOutcome':
        detail = f"after {timeout_seconds:g}s" if timeout_seconds is not None else ""
        return cls(OutcomeKind.TIMEOUT, method, detail=detail)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def is_transient(self) -> bool:
        """Connectivity failures are the only retryable outcomes."""
        return self.kind in (OutcomeKind.NETWORK_ERROR, OutcomeKind.TIMEOUT)

    def describe(self) -> str:
        """Human-readable description used as a result reason."""
        if self.kind is OutcomeKind.SUCCESS:
            return f"{self.method} ok ({self.status_code})"
        if self.kind is OutcomeKind.HTTP_ERROR:
            return f"{self.method} error {self.status_code}"
        if self.kind is OutcomeKind.TIMEOUT:
            suffix = f" {self.detail}" if self.detail else ""
            return f"{self.method} timeout{suffix}"
        return f"{self.method} network error ({self.detail})"
