"""Decorators applied to every MCP tool."""

from .exception_handler import exception_handler
from .tool_logger import tool_logger
from .type_converter import type_converter

__all__ = ["exception_handler", "tool_logger", "type_converter"]
