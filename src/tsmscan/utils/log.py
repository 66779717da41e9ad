"""
tsmscan Logging Utilities
=========================

Logger configuration for the scanner and the CLI: console handler, optional
file handler with rotation, and a per-module ``get_logger`` helper.

Set ``TSMSCAN_DEBUG=1`` to force DEBUG level everywhere.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

# Debug mode forced through the environment
DEBUG_MODE = os.getenv("TSMSCAN_DEBUG", "0") == "1"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str) -> int:
    if DEBUG_MODE:
        return logging.DEBUG
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def configure_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console: bool = True,
    fmt: str = DEFAULT_FORMAT,
    rotate_max_bytes: int = 10 * 1024 * 1024,
    rotate_backups: int = 5,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        log_file: Optional log file path, rotated by size
        console: Log to stderr (stdout is left to the report)
        fmt: Message format
    """
    numeric_level = _resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Drop existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=rotate_max_bytes,
            backupCount=rotate_backups,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def setup_logging(log_file: Path | None = None, level: str = "INFO") -> None:
    """Configure root logging with an optional log file."""
    configure_logging(level=level, log_file=str(log_file) if log_file else None)


def setup_logging_from_settings(settings) -> None:
    """Apply the LOG_* fields of a Settings instance."""
    configure_logging(
        level=settings.LOG_LEVEL,
        log_file=settings.LOG_FILE,
        fmt=settings.LOG_FORMAT,
    )


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """
    Create or fetch a tsmscan logger.

    Args:
        name: Logger name (usually __name__)
        level: Optional log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_resolve_level(level))
    return logger


__all__ = [
    "configure_logging",
    "setup_logging",
    "setup_logging_from_settings",
    "get_logger",
]
