"""Correlation ids for tying log records to a single tool call.

A correlation id looks like ``req_<12 hex chars>``. Tool calls get a fresh
one each; server startup uses a ``startup_`` id until initialization ends.
"""

import logging
import uuid
from contextvars import ContextVar, Token
from typing import Optional

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_initialization_correlation_id: Optional[str] = None


def generate_correlation_id() -> str:
    """Generate a new request correlation id."""
    return f"req_{uuid.uuid4().hex[:12]}"


def set_correlation_id(correlation_id: str) -> Token:
    """Bind a correlation id to the current context.

    Returns:
        Token that can be passed to reset_correlation_id()
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> Optional[str]:
    """Current correlation id, falling back to the initialization id."""
    return _correlation_id.get() or _initialization_correlation_id


def set_initialization_correlation_id(correlation_id: str) -> None:
    global _initialization_correlation_id
    _initialization_correlation_id = correlation_id


def clear_initialization_correlation_id() -> None:
    global _initialization_correlation_id
    _initialization_correlation_id = None


class CorrelationIdFilter(logging.Filter):
    """Attach ``correlation_id`` to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True
