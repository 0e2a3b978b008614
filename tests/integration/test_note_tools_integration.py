"""MCP Tools Integration Tests.

These tests drive the blog_notes tools through a real MCP client session,
covering registration, argument handling and the decorator chain.
"""

import json
import uuid

import pytest

from .conftest import extract_text_content

# Use anyio instead of pytest-asyncio to match SDK approach
pytestmark = pytest.mark.anyio

EXPECTED_TOOLS = [
    "add_blog", "update_blog", "remove_blog", "list_blogs", "visit_blog", "seed_blogs",
    "add_article", "list_articles", "mark_article_read", "mark_article_unread",
    "update_reading_progress", "delete_article",
    "open_note_session", "add_note", "reset_note_session", "close_note_session",
    "list_notes", "export_notes",
    "get_profile", "save_profile", "recommend_articles",
]


def unique_id() -> str:
    """Generate a unique ID for test isolation."""
    return str(uuid.uuid4())[:8]


async def call(session, name, arguments=None) -> dict:
    result = await session.call_tool(name, arguments or {})
    assert not result.isError, f"Tool {name} failed: {result}"
    return json.loads(extract_text_content(result))


async def create_blog(session) -> dict:
    data = await call(session, "add_blog", {"name": f"Blog {unique_id()}", "url": "https://example.com"})
    assert data["success"] is True
    return data["blog"]


class TestToolDiscovery:
    """Test tool discovery."""

    async def test_all_tools_discoverable(self, mcp_session):
        """Verify every tool is registered."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        tool_names = [tool.name for tool in tools_response.tools]

        for expected in EXPECTED_TOOLS:
            assert expected in tool_names, f"Tool {expected} not found in {tool_names} (transport: {transport})"

    async def test_no_kwargs_or_ctx_in_schemas(self, mcp_session):
        """Test that no tool exposes kwargs or the injected context."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        for tool in tools_response.tools:
            properties = (tool.inputSchema or {}).get("properties", {})
            assert "kwargs" not in properties, f"Tool {tool.name} has kwargs (transport: {transport})"
            assert "ctx" not in properties, f"Tool {tool.name} exposes ctx (transport: {transport})"

    async def test_tools_have_descriptions(self, mcp_session):
        """Test that all tools have descriptions."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        for tool in tools_response.tools:
            assert tool.description, f"Tool {tool.name} missing description (transport: {transport})"


class TestBlogExecution:
    """Test blog tools through the client."""

    async def test_list_blogs_empty(self, mcp_session):
        """Test list_blogs returns an empty list when no blogs exist."""
        session, _ = mcp_session

        data = await call(session, "list_blogs")

        assert data["success"] is True
        assert data["count"] == 0
        assert data["blogs"] == []

    async def test_add_and_list_blog(self, mcp_session):
        """Test a new blog shows up with zero counts."""
        session, _ = mcp_session
        blog = await create_blog(session)

        data = await call(session, "list_blogs")

        assert data["count"] == 1
        listed = data["blogs"][0]
        assert listed["id"] == blog["id"]
        assert listed["total_articles"] == 0
        assert listed["total_notes"] == 0

    async def test_missing_blog_is_error_result(self, mcp_session):
        """Test expected failures come back as success=False, not protocol errors."""
        session, _ = mcp_session

        data = await call(session, "remove_blog", {"blog_id": 9999})

        assert data["success"] is False
        assert data["error_type"] == "NotFoundError"
        assert "9999" in data["error"]


class TestNoteFlow:
    """Test a full note-taking session through the client."""

    async def test_session_notes_and_export(self, mcp_session):
        """Test notes in one session share an article and export together."""
        session, _ = mcp_session
        blog = await create_blog(session)

        opened = await call(session, "open_note_session", {"blog_id": blog["id"]})
        session_id = opened["session_id"]

        for i in range(2):
            added = await call(session, "add_note", {
                "blog_id": blog["id"],
                "excerpt": f"quote {i}",
                "personal_note": f"thought {i}",
                "article_title": "Post",
                "article_url": "https://example.com/post",
                "session_id": session_id,
            })
            assert added["success"] is True

        closed = await call(session, "close_note_session", {"session_id": session_id})
        assert closed["success"] is True

        articles = await call(session, "list_articles", {"blog_id": blog["id"]})
        assert articles["count"] == 1

        listed = await call(session, "list_notes", {"blog_id": blog["id"], "grouped": True})
        assert listed["count"] == 2
        assert len(listed["groups"]) == 1
        assert listed["groups"][0]["article_title"] == "Post"

        export = await call(session, "export_notes", {"export_format": "markdown", "blog_id": blog["id"]})
        assert export["success"] is True
        assert export["note_count"] == 2
        assert "## Post" in export["content"]
        assert export["filename"].endswith("-notes.md")

    async def test_add_note_requires_text(self, mcp_session):
        """Test empty notes are rejected with a validation error."""
        session, _ = mcp_session
        blog = await create_blog(session)

        data = await call(session, "add_note", {"blog_id": blog["id"], "excerpt": "", "personal_note": "x"})

        assert data["success"] is False
        assert data["error_type"] == "ValidationError"

    async def test_export_invalid_format(self, mcp_session):
        """Test unknown export formats are rejected."""
        session, _ = mcp_session

        data = await call(session, "export_notes", {"export_format": "pdf"})

        assert data["success"] is False
        assert data["error_type"] == "ValidationError"


class TestRecommendations:
    """Test profile and recommendation tools through the client."""

    async def test_recommend_without_profile(self, mcp_session):
        """Test recommendations ask for a profile first."""
        session, _ = mcp_session

        data = await call(session, "recommend_articles")

        assert data["success"] is False
        assert data["error_type"] == "ConfigurationError"

    async def test_recommend_with_profile(self, mcp_session):
        """Test a saved profile ranks matching unread articles first."""
        session, _ = mcp_session
        blog = await create_blog(session)
        await call(session, "add_article", {"blog_id": blog["id"], "title": "Gardening", "url": "https://e.com/1"})
        await call(session, "add_article", {"blog_id": blog["id"], "title": "Robotics today", "url": "https://e.com/2"})

        saved = await call(session, "save_profile", {
            "interests": ["robotics"],
            "expertise_areas": {"control": "intermediate"},
            "learning_goals": ["build a robot arm"],
        })
        assert saved["success"] is True

        data = await call(session, "recommend_articles", {"limit": 5})

        assert data["count"] == 2
        assert data["recommendations"][0]["title"] == "Robotics today"
        assert data["recommendations"][0]["score"] == 2
