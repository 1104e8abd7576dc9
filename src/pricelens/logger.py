"""
Logging configuration for Pricelens.
"""
import logging
import sys
from typing import Optional

from .config import Config


def setup_logger(
    name: str,
    level: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Use config defaults if not specified
    level = level or Config.LOG_LEVEL
    format_string = format_string or Config.LOG_FORMAT

    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    # Console handler
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    # Formatter
    formatter = logging.Formatter(format_string)
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


# Create default logger for the package
logger = setup_logger("pricelens")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Module names that already carry the package prefix are not prefixed twice.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    if name == "pricelens" or name.startswith("pricelens."):
        return setup_logger(name)
    return setup_logger(f"pricelens.{name}")
