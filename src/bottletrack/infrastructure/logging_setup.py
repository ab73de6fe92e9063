"""Logging configuration for the ``bottletrack`` logger tree.

Console output goes to stderr so commands that print JSON on stdout stay
machine-readable.  A rotating file keeps the full history.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from bottletrack.infrastructure import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("bottletrack")
    level = getattr(logging, settings.log_level(), logging.INFO)
    logger.setLevel(level)

    # Already configured by an earlier call in this process.
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = settings.log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / "bottletrack.log",
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger
