"""Fixtures for end-to-end tests through an MCP client session."""

from typing import Tuple

import pytest
from mcp import types
from mcp.client.session import ClientSession
from mcp.shared.memory import create_connected_server_and_client_session

from blog_notes.server.app import server


def extract_text_content(result: types.CallToolResult) -> str:
    """Return the text of the first text content block of a tool result."""
    for content in result.content:
        if isinstance(content, types.TextContent):
            return content.text
    raise AssertionError(f"No text content in tool result: {result}")


def extract_error_text(result: types.CallToolResult) -> str:
    """Return the error message of a failed tool result."""
    assert result.isError, f"Expected an error result, got: {result}"
    return extract_text_content(result)


@pytest.fixture
async def mcp_session(in_memory_db) -> Tuple[ClientSession, str]:
    """Client session connected in-process to the blog_notes server."""
    async with create_connected_server_and_client_session(server._mcp_server) as session:
        yield session, "memory"
