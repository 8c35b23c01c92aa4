"""Process-wide logging setup for the kvlet command line."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import ConfigError

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(path: str | Path, level: str = "INFO") -> logging.Logger:
    """Attach a file handler to the ``kvlet`` logger.

    Calling this again with the same path leaves a single handler in place.
    Raises ``ConfigError`` when the log file cannot be opened.
    """
    log_path = Path(path)
    logger = logging.getLogger("kvlet")
    logger.setLevel(level.upper())
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(log_path):
            return logger

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot open log file {log_path}: {exc}") from exc
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
