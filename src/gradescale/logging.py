"""Centralized logging configuration for gradescale.

Provides a rotating file log shared by the classifier, the roster store and
its storage backends.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "gradescale.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_DIR_ENV = "GRADESCALE_LOG_DIR"
LOG_LEVEL_ENV = "GRADESCALE_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "gradescale"


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Set up logging with a rotating file handler.

    Args:
        log_dir: Directory for log files. Defaults to 'logs' in the current
                 directory. Overridden by the GRADESCALE_LOG_DIR variable.
        log_file: Log file name. Defaults to 'gradescale.log'.
        max_bytes: Maximum size per log file before rotation.
        backup_count: Number of rotated files to keep.
        level: Log level name. Overridden by GRADESCALE_LOG_LEVEL.
        console: Whether to also log to stderr.

    Returns:
        The root gradescale logger.
    """
    if log_dir is None:
        log_dir = os.environ.get(LOG_DIR_ENV, DEFAULT_LOG_DIR)
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    # Repeated setup must not stack handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = log_dir / log_file
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.info("gradescale logging initialized (level=%s, file=%s)", level, log_path)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'roster.store'). Prefixed with
              'gradescale.' unless already present.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 500) -> str:
    """Truncate a long payload before logging it.

    Args:
        output: The text to truncate.
        max_length: Maximum length before truncation.

    Returns:
        The text, cut at max_length with a marker if it was longer.
    """
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [truncated, {len(output) - max_length} more chars]"
