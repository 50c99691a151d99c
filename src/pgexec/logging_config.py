"""
Logging configuration for the pgexec CLI.

Provides:
- Consistent log formatting
- Configurable log levels (DEBUG, INFO, WARNING, ERROR)
- Console output on stderr (stdout carries the result table) and an
  optional log file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


# Default format: timestamp, level, name, message
DEFAULT_FORMAT = "%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Detailed format for debugging (includes filename, line number)
DEBUG_FORMAT = (
    "%(asctime)s [%(levelname)-8s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s"
)


def setup_logging(
    *,
    name: str = "pgexec",
    level: str = "WARNING",
    log_file: Optional[str] = None,
    quiet: bool = False,
    debug: bool = False,
) -> logging.Logger:
    """
    Setup the package logger.

    Args:
        name: Logger name; "pgexec" covers every module in the package
        level: Console log level string (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path (always receives DEBUG)
        quiet: If True, only show errors on console
        debug: If True, use detailed debug format and DEBUG level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level
    logger.handlers.clear()
    logger.propagate = False

    numeric_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.ERROR if quiet else numeric_level)

    log_format = DEBUG_FORMAT if debug else DEFAULT_FORMAT
    console_handler.setFormatter(logging.Formatter(log_format, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(file_handler)

        logger.debug(f"Logging to file: {log_file}")

    return logger


def add_logging_args(parser) -> None:
    """
    Add standard logging arguments to an ArgumentParser.

    Adds:
        --log-level: Set console log level (DEBUG, INFO, WARNING, ERROR)
        --log-file: Optional log file path
        --quiet: Suppress console output except errors
        --debug: Enable detailed debug logging (and tracebacks on failure)
    """
    log_group = parser.add_argument_group("logging")

    log_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set console log level (default: WARNING)",
    )

    log_group.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path",
    )

    log_group.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress console log output except errors",
    )

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable detailed debug logging with file/line info",
    )
