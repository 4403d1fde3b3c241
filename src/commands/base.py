#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from argparse import Namespace

from core.config import Config, get_config
from core.exceptions import ConfigurationError, DiscoveryError

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all command endpoints.

    Provides configuration access and error handling that all commands use.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize base command.

        Args:
            config: Optional configuration. If None, uses the global configuration.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._config = config

    @property
    def config(self) -> Config:
        """Get configuration, loading it on first use."""
        if self._config is None:
            self._config = get_config()
        return self._config

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """
        Get list of available subcommands for this command.

        Returns:
            List of subcommand names
        """
        # Public methods other than the base interface are subcommands
        methods = []
        for attr_name in dir(self):
            if attr_name.startswith('_') or attr_name in ['execute', 'get_available_subcommands', 'handle_error', 'config']:
                continue
            if callable(getattr(self, attr_name)):
                methods.append(attr_name)
        return methods

    def handle_error(self, error: Exception, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        # Map common exceptions to exit codes
        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130
        elif isinstance(error, (FileNotFoundError, DiscoveryError)):
            self.logger.error(error_msg)
            return 2
        elif isinstance(error, ConfigurationError):
            self.logger.error(error_msg)
            return 22
        elif isinstance(error, PermissionError):
            self.logger.error(error_msg)
            return 13
        elif isinstance(error, ValueError):
            self.logger.error(error_msg, exc_info=True)
            return 22
        else:
            self.logger.error(error_msg, exc_info=True)
            return 1
