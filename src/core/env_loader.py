#!/usr/bin/env python3
"""
Environment variable loader with .env file support.

Safely loads environment variables from .env file if present.
"""

import os
from pathlib import Path
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# src/core/env_loader.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def load_env_file(env_file_path: str = ".env", root: Optional[Path] = None) -> int:
    """
    Load environment variables from .env file if it exists.

    Args:
        env_file_path: Path to .env file (default: ".env" in project root)
        root: Directory the path is relative to (default: project root)

    Returns:
        Number of variables loaded
    """
    env_path = (root or PROJECT_ROOT) / env_file_path

    if not env_path.exists():
        logger.debug(f"No .env file found at {env_path}")
        return 0

    try:
        with open(env_path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.error(f"Error loading .env file {env_path}: {e}")
        return 0

    loaded_count = 0
    for line_num, line in enumerate(lines, 1):
        line = line.strip()

        # Skip empty lines and comments
        if not line or line.startswith('#'):
            continue

        # Parse KEY=VALUE format
        if '=' not in line:
            logger.warning(f"Invalid .env format at line {line_num}: {line}")
            continue

        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip()

        # Remove quotes if present
        if value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        elif value.startswith("'") and value.endswith("'"):
            value = value[1:-1]

        # Only set if not already in environment (env vars take precedence)
        if key not in os.environ:
            os.environ[key] = value
            loaded_count += 1
            logger.debug(f"Loaded {key} from .env")
        else:
            logger.debug(f"Skipped {key} (already in environment)")

    logger.info(f"Loaded {loaded_count} variables from {env_path}")
    return loaded_count


def get_env_var(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Raises:
        ValueError: If required variable is missing
    """
    value = os.environ.get(key, default)

    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set")

    return value


def get_env_bool(key: str, default: bool = False) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')
