"""Logging helpers for the drink builder.

The engine is a library: its loggers live under the ``drink_builder``
hierarchy, which carries only a NullHandler. Applications that want console
output call configure_logging() once at startup.

Usage:
    from drink_builder.logging_utils import get_logger

    logger = get_logger(__name__)
    logger.info("Loaded catalog")
"""

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "drink_builder"
CONSOLE_HANDLER_NAME = "drink_builder.console"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(
    level: int = logging.INFO,
    format_str: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Send drink_builder log records to a console stream.

    Meant for applications and scripts. Repeat calls reuse the existing
    console handler and only update the level and format.

    Args:
        level: Level for the drink_builder hierarchy
        format_str: Log message format
        date_format: Date format for timestamps
        stream: Output stream (default: sys.stderr)

    Returns:
        The console handler
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    handler = next((h for h in root.handlers if h.get_name() == CONSOLE_HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(CONSOLE_HANDLER_NAME)
        root.addHandler(handler)
    handler.setFormatter(logging.Formatter(format_str, date_format))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, placed under the drink_builder hierarchy."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_verbose(verbose: bool) -> None:
    """DEBUG when verbose, WARNING otherwise."""
    set_level(logging.DEBUG if verbose else logging.WARNING)


def set_level(level: int) -> None:
    """Set the level of the drink_builder logger hierarchy."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
