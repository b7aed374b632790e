"""Logging helpers for RatingMatrix.

Provides debug(), info(), warn(), error() functions for consistent logging.
Debug output is controlled by the RATINGMATRIX_DEBUG environment variable.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "ratingmatrix"

_logger: Optional[logging.Logger] = None


def is_debug_enabled() -> bool:
    """Return True when RATINGMATRIX_DEBUG=1 is set."""
    return os.getenv("RATINGMATRIX_DEBUG", "0") == "1"


def setup_logger() -> logging.Logger:
    global _logger
    if _logger is not None:
        return _logger
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if is_debug_enabled() else logging.INFO)
    _logger = logger
    return logger


def debug(msg: str) -> None:
    """Log a debug message."""
    setup_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message."""
    setup_logger().info(msg)


def warn(msg: str) -> None:
    """Log a warning message."""
    setup_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message."""
    setup_logger().error(msg)
