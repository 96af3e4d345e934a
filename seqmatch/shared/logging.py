"""
SEQMATCH — Shared Logging Configuration

Centralized logging setup for all SEQMATCH components.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .settings import LOG_DIR, LOG_LEVEL


# =============================================================================
# Log Format
# =============================================================================
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


# =============================================================================
# Logger Factory
# =============================================================================
def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger for a component.

    Args:
        name: Logger name (typically one of the component names below)
        level: Optional log level override

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    return logger


def configure_file_logging(
    logger: logging.Logger,
    filename: str,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
    log_dir: Optional[str] = None,
) -> Path:
    """
    Add file logging to a logger with rotation.

    Args:
        logger: Logger to configure
        filename: Name of the log file (placed in LOG_DIR)
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep
        log_dir: Directory override (defaults to LOG_DIR)

    Returns:
        Path of the log file
    """
    log_path = Path(log_dir or LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)
    return log_path / filename


# =============================================================================
# Component Loggers
# =============================================================================
ROOT_LOGGER = "seqmatch"
ENGINE_LOGGER = "seqmatch.engine"
MATCHING_LOGGER = "seqmatch.matching"
EVENTS_LOGGER = "seqmatch.events"
