"""
================================================================================
webquery Common Utilities
================================================================================

Centralized Loguru logging configuration.

Exports:
    - init_logger: Configure loguru sinks from the `logging` config section
    - get_logger: Return the logger, initializing it on first use

Usage:
    from webquery.common import init_logger

    init_logger(level="DEBUG")

================================================================================
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config_loader import ConfigLoader


DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
)

_logger_initialized: bool = False


def init_logger(level: Optional[str] = None, format_str: Optional[str] = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Safe to call more than once; only the first call configures sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    config = ConfigLoader()
    log_level = (level or config.get("logging.level", "INFO")).upper()
    log_format = format_str or config.get("logging.format", DEFAULT_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    log_file = config.get("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def get_logger():
    """Return the configured Loguru logger, initializing it if needed."""
    if not _logger_initialized:
        init_logger()
    return logger


__all__ = [
    "init_logger",
    "get_logger",
]
