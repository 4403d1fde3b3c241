#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including environment variables, defaults, and validation.
"""

import os
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any

from .env_loader import load_env_file, get_env_bool
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class CheckerConfig:
    """Link checking configuration."""
    check_timeout: float = 10.0
    concurrent_checks: int = 5
    max_retries: int = 1
    retry_delay: float = 0.5  # seconds
    user_agent: str = "Mozilla/5.0 (compatible; LinkChecker/1.0)"
    follow_redirects: bool = True
    page_timeout: float = 20.0

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass
class IntegrationConfig:
    """External integration configuration."""
    slack_webhook_url: Optional[str] = None


@dataclass
class Config:
    """Master configuration container."""
    checker: CheckerConfig = field(default_factory=CheckerConfig)
    integrations: IntegrationConfig = field(default_factory=IntegrationConfig)

    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    def has_slack(self) -> bool:
        """Check if Slack integration is available."""
        return bool(self.integrations.slack_webhook_url)

    def with_overrides(self, **overrides: Any) -> 'Config':
        """Copy with checker fields replaced; None values are ignored."""
        values = {k: v for k, v in overrides.items() if v is not None}
        config = replace(self, checker=replace(self.checker, **values))
        validate_config(config)
        return config


def validate_config(config: Config) -> None:
    """Validate configuration values."""
    errors = []
    checker = config.checker

    if checker.check_timeout < 0.1:
        errors.append("CHECK_TIMEOUT must be at least 0.1 seconds")

    if checker.concurrent_checks < 1 or checker.concurrent_checks > 100:
        errors.append("CONCURRENT_CHECKS must be between 1 and 100")

    if checker.max_retries < 0 or checker.max_retries > 10:
        errors.append("MAX_RETRIES must be between 0 and 10")

    if checker.retry_delay < 0:
        errors.append("RETRY_DELAY_MS must not be negative")

    if checker.page_timeout < 0.1:
        errors.append("PAGE_TIMEOUT must be at least 0.1 seconds")

    if checker.log_level not in VALID_LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}")

    if errors:
        raise ConfigurationError('checker', '; '.join(errors))


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to .env file relative to project root
        """
        self._config: Optional[Config] = None
        load_env_file(env_file_path)

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""
        try:
            checker_config = CheckerConfig(
                check_timeout=float(os.getenv('CHECK_TIMEOUT', '10')),
                concurrent_checks=int(os.getenv('CONCURRENT_CHECKS', '5')),
                max_retries=int(os.getenv('MAX_RETRIES', '1')),
                retry_delay=int(os.getenv('RETRY_DELAY_MS', '500')) / 1000,
                user_agent=os.getenv('CHECK_USER_AGENT', 'Mozilla/5.0 (compatible; LinkChecker/1.0)'),
                follow_redirects=get_env_bool('FOLLOW_REDIRECTS', True),
                page_timeout=float(os.getenv('PAGE_TIMEOUT', '20')),
                log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
                verbose_logging=get_env_bool('VERBOSE_LOGGING', False)
            )
        except ValueError as e:
            raise ConfigurationError('environment', str(e)) from e

        integration_config = IntegrationConfig(
            slack_webhook_url=os.getenv('SLACK_WEBHOOK_URL') or None
        )

        config = Config(checker=checker_config, integrations=integration_config)
        validate_config(config)
        logger.debug("Configuration validation passed")
        return config

    def update_logging(self, verbose: bool = False) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        level_name = 'DEBUG' if verbose else config.checker.log_level
        numeric_level = getattr(logging, level_name)
        logging.getLogger().setLevel(numeric_level)

        # Configure format
        if config.checker.verbose_logging or verbose:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        # Update existing handlers
        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
            handler.setFormatter(formatter)

    def get_integration_status(self) -> Dict[str, bool]:
        """Get status of all integrations."""
        config = self.get_config()
        return {
            'slack_webhook': config.has_slack()
        }


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
