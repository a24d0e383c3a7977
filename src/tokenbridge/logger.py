"""
File-based logging for tokenbridge.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. Entry points (CLI, API server) call
``setup_logging()`` once, which attaches:
- a rotating file handler under $TOKENBRIDGE_HOME/logs (5MB, 3 backups)
- optionally a stderr handler for --verbose runs
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import tokenbridge_home

LOGGER_NAME = "tokenbridge"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_dir() -> Path:
    return tokenbridge_home() / "logs"


def log_file() -> Path:
    return log_dir() / "tokenbridge.log"


def setup_logging(level: str = "INFO", console: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Safe to call repeatedly; existing handlers are closed and replaced so
    reloads don't duplicate output.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    try:
        log_dir().mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file(),
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        # Read-only home directory; fall back to stderr only
        console = True
        sys.stderr.write(f"tokenbridge: file logging disabled ({e})\n")

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    return logger
