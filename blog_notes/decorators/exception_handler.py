"""Turn expected failures into structured tool results.

BlogNotesError subclasses become ``{"success": False, "error": ...}`` so the
client sees a short message. Anything else is a bug: it is logged with its
traceback and re-raised for the MCP layer to report.
"""

import functools
from typing import Any, Callable, Dict

from blog_notes.errors import BlogNotesError
from blog_notes.log_system.unified_logger import UnifiedLogger


def error_result(error: BlogNotesError) -> Dict[str, Any]:
    return {
        "success": False,
        "error": str(error),
        "error_type": type(error).__name__,
    }


def exception_handler(func: Callable) -> Callable:
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logger = UnifiedLogger.get_logger(__name__)
        try:
            return await func(*args, **kwargs)
        except BlogNotesError as e:
            logger.warning(f"{func.__name__} failed: {type(e).__name__}: {e}")
            return error_result(e)
        except Exception:
            logger.exception(f"Unexpected error in {func.__name__}")
            raise

    return wrapper
