"""Logging configuration for the Arhan agent.

Log records go to stderr by default. Since stderr shares the terminal with
the streamed model output, a rotating log file can be configured instead
via ``--log-file`` or ``ARHAN_LOG_FILE``.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "arhan"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _resolve_level(level: str | None) -> int:
    # CLI flag > env var > default
    resolved = (level or os.environ.get("ARHAN_LOG_LEVEL") or "WARNING").upper()
    numeric_level = getattr(logging, resolved, None)
    if not isinstance(numeric_level, int):
        print(f"Warning: Invalid log level '{resolved}', using WARNING", file=sys.stderr)
        return logging.WARNING
    return numeric_level


def setup_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """Configure logging for the agent.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR). Falls back to
            ARHAN_LOG_LEVEL, then WARNING.
        log_file: Optional path of a rotating log file. Falls back to
            ARHAN_LOG_FILE; when neither is set records go to stderr.

    Returns:
        The configured ``arhan`` package logger.
    """
    numeric_level = _resolve_level(level)
    log_file = log_file or os.environ.get("ARHAN_LOG_FILE")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # replace handlers so repeated calls (tests, REPL restarts) don't stack them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler: logging.Handler
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__).
    """
    return logging.getLogger(name)
