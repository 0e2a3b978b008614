"""Unified logger facade.

All modules fetch loggers through UnifiedLogger.get_logger(__name__) so that
they inherit the handlers installed on the ``blog_notes`` package logger.
"""

import logging
from pathlib import Path
from typing import List, Optional

from blog_notes.config import ServerConfig
from blog_notes.logging_config import LOGGER_NAME, setup_logging


class UnifiedLogger:
    """Process-wide entry point to blog_notes logging."""

    _initialized = False

    @classmethod
    def initialize_default(cls, config: ServerConfig) -> None:
        """Log to stderr at the configured level."""
        setup_logging(config)
        cls._initialized = True

    @classmethod
    def initialize_from_config(cls, destinations: List[dict], config: ServerConfig) -> None:
        """Initialize from a list of destination dicts.

        Each dict has ``type`` (stderr or file), ``enabled`` and ``settings``.
        A file destination reads its path from ``settings["path"]``.
        """
        log_file: Optional[Path] = None
        for dest in destinations:
            if not dest.get("enabled", True):
                continue
            if dest.get("type") == "file":
                path = dest.get("settings", {}).get("path")
                if path:
                    log_file = Path(path).expanduser()

        setup_logging(config, log_file=log_file)
        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not name.startswith(LOGGER_NAME):
            name = f"{LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._initialized

    @classmethod
    async def close(cls) -> None:
        """Flush and close handlers on the package logger."""
        package_logger = logging.getLogger(LOGGER_NAME)
        for handler in list(package_logger.handlers):
            handler.flush()
            handler.close()
            package_logger.removeHandler(handler)
        cls._initialized = False
