"""MCP server package initialization"""

from blog_notes.server.app import create_mcp_server, server

__all__ = ["server", "create_mcp_server"]
