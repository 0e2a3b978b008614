"""Log each tool call under its own correlation id."""

import functools
import time
from typing import Any, Callable, Dict, Optional

from blog_notes.log_system.correlation import (
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from blog_notes.log_system.unified_logger import UnifiedLogger

# Arguments never worth logging
_SKIPPED_ARGS = {"ctx"}
_MAX_VALUE_LENGTH = 80


def _summarize(kwargs: Dict[str, Any]) -> str:
    parts = []
    for name, value in kwargs.items():
        if name in _SKIPPED_ARGS:
            continue
        text = repr(value)
        if len(text) > _MAX_VALUE_LENGTH:
            text = text[:_MAX_VALUE_LENGTH] + "..."
        parts.append(f"{name}={text}")
    return ", ".join(parts)


def tool_logger(func: Callable, config: Optional[Dict[str, Any]] = None) -> Callable:
    """Wrap a tool so its calls, outcome and duration are logged.

    Args:
        func: Async tool function
        config: Server config as a dict; ``log_level`` DEBUG also logs arguments
    """
    log_arguments = (config or {}).get("log_level", "INFO") == "DEBUG"

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logger = UnifiedLogger.get_logger(__name__)
        token = set_correlation_id(generate_correlation_id())
        start = time.perf_counter()

        if log_arguments:
            logger.debug(f"Tool {func.__name__} called with {_summarize(kwargs)}")
        else:
            logger.info(f"Tool {func.__name__} called")

        try:
            result = await func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - start) * 1000
            success = result.get("success") if isinstance(result, dict) else None
            logger.info(f"Tool {func.__name__} finished in {elapsed_ms:.1f}ms (success={success})")
            return result
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"Tool {func.__name__} raised {type(e).__name__} after {elapsed_ms:.1f}ms")
            raise
        finally:
            reset_correlation_id(token)

    return wrapper
