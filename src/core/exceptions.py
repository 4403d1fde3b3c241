#!/usr/bin/env python3
"""
Standardized exception hierarchy for the link checker.

Provides specific exception types for different error conditions with
proper error context. Individual probe failures are never raised: they are
classified into outcomes and results. Exceptions here cover configuration,
discovery and run lifecycle problems.
"""

from typing import Optional, Dict, Any


class LinkCheckerError(Exception):
    """Base exception for all link checker errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Discovery-related exceptions
class DiscoveryError(LinkCheckerError):
    """Base exception for item discovery errors."""
    pass


class PageFetchError(DiscoveryError):
    """Failed to download the document that links are discovered from."""

    def __init__(self, url: str, original_error: Exception):
        message = f"Failed to fetch page {url}"
        context = {
            'url': url,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class UrlListError(DiscoveryError):
    """Failed to read a list of URLs."""

    def __init__(self, path: str, original_error: Exception):
        message = f"Failed to read URL list from {path}"
        context = {
            'path': path,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Run lifecycle exceptions
class RunStateError(LinkCheckerError):
    """Operation is not valid in the current run state."""

    def __init__(self, operation: str, running: bool):
        state = "running" if running else "idle"
        message = f"Cannot {operation} while run is {state}"
        context = {
            'operation': operation,
            'running': running
        }
        super().__init__(message, context=context)


# Configuration-related exceptions
class ConfigurationError(LinkCheckerError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)


# Recovery utilities
class ErrorRecovery:
    """Utilities for retry decisions on probe outcomes."""

    # HEAD responses that are unreliable enough to warrant a GET
    ESCALATION_STATUSES = frozenset({404, 405})

    @staticmethod
    def is_retryable_outcome(outcome) -> bool:
        """Check if a probe outcome is a transient connectivity failure."""
        return outcome.is_transient

    @staticmethod
    def should_escalate(method: str, status_code: Optional[int]) -> bool:
        """Check if a HEAD status should be re-probed with GET."""
        if method != 'HEAD' or status_code is None:
            return False
        return status_code in ErrorRecovery.ESCALATION_STATUSES or 500 <= status_code < 600
