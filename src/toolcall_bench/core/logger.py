"""Logging utilities for the tool-calling benchmark."""

import logging
import sys
from typing import Callable, Optional

_LOGGER_NAME = "toolcall_bench"

LineLogger = Callable[[str], None]


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the package.

    Args:
        name: Optional sub-logger name. If None, returns the root package logger.

    Returns:
        The requested logger.
    """
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def setup_logging(
    level: int = logging.INFO, format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """Setup default logging configuration for the package.

    This adds a StreamHandler to the package's root logger.
    Should typically be called by the application driving the benchmark, not by the library itself.

    Args:
        level: Logging level.
        format_str: Log format string.
    """
    logger = logging.getLogger(_LOGGER_NAME)

    # Avoid adding multiple handlers if called multiple times
    if logger.handlers and not all(isinstance(h, logging.NullHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(format_str)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)


def emit_line(line_logger: Optional[LineLogger], enabled: bool, line: str) -> None:
    """Forward a progress line to the caller-supplied callback when line logging is enabled.

    The line is always mirrored to the package logger at debug level.
    """
    logging.getLogger(_LOGGER_NAME).debug(line)
    if enabled and line_logger is not None:
        line_logger(line)


# Set default NullHandler to avoid "No handler found" warnings
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
