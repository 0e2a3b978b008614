"""Logging configuration for blog_notes.

Logs go to stderr because stdout carries the MCP STDIO transport.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from blog_notes.config import ServerConfig
from blog_notes.log_system.correlation import CorrelationIdFilter

LOGGER_NAME = "blog_notes"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def _make_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    return handler


def setup_logging(config: ServerConfig, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once; previously installed handlers are replaced.

    Args:
        config: Server configuration (log_level is used)
        log_file: Optional file to log to in addition to stderr

    Returns:
        The configured package logger
    """
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr)))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_make_handler(logging.FileHandler(log_file, encoding="utf-8")))

    logger.setLevel(level)
    logger.propagate = False
    return logger
