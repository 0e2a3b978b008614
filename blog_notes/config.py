"""Server configuration for blog_notes.

Configuration is read from environment variables:

- BLOG_NOTES_LOG_LEVEL: logging level name (default INFO)
- BLOG_NOTES_DB_PATH: SQLite database path (default ~/.blog_notes/blog_notes.db)
- BLOG_NOTES_USER_ID: identity that owns every record (default: OS login name)
- BLOG_NOTES_RECOMMENDATION_LIMIT: default number of recommendations (default 5)
- BLOG_NOTES_LOG_FILE: also write logs to this file (default: stderr only)
"""

import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_DB_PATH = Path.home() / ".blog_notes" / "blog_notes.db"


@dataclass
class ServerConfig:
    """Runtime configuration for the MCP server."""

    name: str = "blog_notes"
    log_level: str = "INFO"
    db_path: Path = DEFAULT_DB_PATH
    user_id: Optional[str] = None
    recommendation_limit: int = 5
    logging_destinations: Dict[str, Any] = field(default_factory=dict)


def _default_user() -> Optional[str]:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def _logging_destinations(log_file: str) -> Dict[str, Any]:
    if not log_file:
        return {}
    return {
        "destinations": [
            {"type": "stderr", "enabled": True},
            {"type": "file", "enabled": True, "settings": {"path": log_file}},
        ]
    }


def load_config() -> ServerConfig:
    """Build a ServerConfig from the environment.

    Returns:
        Fresh ServerConfig instance
    """
    user_id = os.environ.get("BLOG_NOTES_USER_ID")
    if user_id is None:
        user_id = _default_user()

    limit = os.environ.get("BLOG_NOTES_RECOMMENDATION_LIMIT", "")
    db_path = os.environ.get("BLOG_NOTES_DB_PATH", "").strip()

    return ServerConfig(
        log_level=os.environ.get("BLOG_NOTES_LOG_LEVEL", "INFO").upper(),
        db_path=Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH,
        user_id=(user_id.strip() or None) if user_id else None,
        recommendation_limit=int(limit) if limit.isdigit() and int(limit) > 0 else 5,
        logging_destinations=_logging_destinations(os.environ.get("BLOG_NOTES_LOG_FILE", "").strip()),
    )


_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
