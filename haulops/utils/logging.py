"""
Logging utilities for the HaulOps backend.

Acceptable logging:
- High-level events (e.g., "Operator list served from cache")
- Table names, ids and row counts
- Fallback decisions (e.g., "daily volume: falling back to client aggregation")
- Sanitized backend error messages

Never log Supabase keys or operator passwords.
"""

import logging
from typing import Optional

from haulops.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from haulops.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Trucks schema verified")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
