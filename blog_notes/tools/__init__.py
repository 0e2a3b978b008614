"""MCP tools for blog_notes."""

from .blog_tools import blog_tools
from .note_tools import note_tools
from .profile_tools import profile_tools

all_tools = blog_tools + note_tools + profile_tools

__all__ = ["all_tools", "blog_tools", "note_tools", "profile_tools"]
