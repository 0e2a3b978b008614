"""Unit tests for article resolution and note creation."""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch

from blog_notes.errors import NotFoundError, PersistenceError, ValidationError
from blog_notes.services.article_resolver import NoteEntrySession, resolve
from blog_notes.services.note_entry import NoteSessionRegistry, create_note
from blog_notes.storage.database import add_blog, list_articles, list_notes
from tests.utils import TEST_USER

# Mark all tests as async
pytestmark = pytest.mark.anyio


@pytest.fixture
async def blog(in_memory_db):
    return await add_blog(TEST_USER, name="Test Blog", url="https://example.com")


@pytest.fixture
def session(blog):
    return NoteEntrySession(blog_id=blog.id, user_id=TEST_USER)


class TestArticleResolver:
    """Tests for resolve()."""

    async def test_no_metadata_returns_none(self, blog, session):
        """Test that a note without title or url stays uncategorized."""
        assert await resolve(session, blog.id, TEST_USER) is None
        assert await resolve(session, blog.id, TEST_USER, title="  ", url="") is None
        assert await list_articles(TEST_USER) == []

    async def test_title_only_creates_nothing(self, blog, session):
        """Test that both title and url are needed to create an article."""
        assert await resolve(session, blog.id, TEST_USER, title="Post") is None
        assert await list_articles(TEST_USER) == []

    async def test_creates_article_once_per_session(self, blog, session):
        """Test resolving twice with unchanged metadata reuses the article."""
        first = await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")
        second = await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")

        articles = await list_articles(TEST_USER)
        assert first == second
        assert len(articles) == 1
        assert articles[0].id == first
        assert session.article_id == first

    async def test_changed_metadata_invalidates_cache(self, blog, session):
        """Test that editing the title resolves a new article."""
        first = await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")
        second = await resolve(session, blog.id, TEST_USER, title="Post v2", url="https://example.com/p")

        assert first != second
        assert len(await list_articles(TEST_USER)) == 2
        assert session.resolved_title == "Post v2"

    async def test_cleared_metadata_after_resolution(self, blog, session):
        """Test that clearing the fields drops the cached article."""
        await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")

        assert await resolve(session, blog.id, TEST_USER) is None
        assert session.article_id is None

    async def test_reset_forces_new_article(self, blog, session):
        """Test that an explicit reset creates a fresh article."""
        first = await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")
        session.reset()
        second = await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")

        assert first != second

    async def test_edit_and_revert_creates_second_article(self, blog, session):
        """Test reuse only covers the most recently resolved title and url."""
        a1 = await resolve(session, blog.id, TEST_USER, title="A", url="https://example.com/a")
        b = await resolve(session, blog.id, TEST_USER, title="B", url="https://example.com/b")
        a2 = await resolve(session, blog.id, TEST_USER, title="A", url="https://example.com/a")

        assert len({a1, b, a2}) == 3
        assert sorted(a.title for a in await list_articles(TEST_USER)) == ["A", "A", "B"]

    async def test_separate_sessions_do_not_share_cache(self, blog):
        """Test that each session resolves independently."""
        one = NoteEntrySession(blog_id=blog.id, user_id=TEST_USER)
        two = NoteEntrySession(blog_id=blog.id, user_id=TEST_USER)

        a = await resolve(one, blog.id, TEST_USER, title="Post", url="https://example.com/p")
        b = await resolve(two, blog.id, TEST_USER, title="Post", url="https://example.com/p")

        assert a != b

    async def test_store_failure_leaves_session_unchanged(self, blog, session):
        """Test that a failed insert propagates and caches nothing."""
        failing = AsyncMock(side_effect=PersistenceError("store_error", "disk full"))

        with patch("blog_notes.services.article_resolver.database.add_article", failing):
            with pytest.raises(PersistenceError):
                await resolve(session, blog.id, TEST_USER, title="Post", url="https://example.com/p")

        assert session.article_id is None


class TestCreateNote:
    """Tests for the note creation path."""

    async def test_create_uncategorized_note(self, blog, session):
        """Test a note without article metadata."""
        note = await create_note(session, excerpt="quote", personal_note="thought")

        assert note.article_id is None
        assert note.article_title is None
        assert note.blog_id == blog.id

    async def test_notes_in_session_share_article(self, blog, session):
        """Test several notes on one article create a single article row."""
        first = await create_note(
            session, "quote 1", "thought 1", article_title="Post", article_url="https://example.com/p"
        )
        second = await create_note(
            session, "quote 2", "thought 2", article_title="Post", article_url="https://example.com/p"
        )

        assert first.article_id == second.article_id
        assert len(await list_articles(TEST_USER)) == 1
        assert second.article_title == "Post"
        assert second.article_url == "https://example.com/p"

    async def test_concurrent_notes_create_one_article(self, blog, session):
        """Test concurrent submissions on one session are serialized."""
        notes = await asyncio.gather(*[
            create_note(session, f"quote {i}", f"thought {i}", article_title="T", article_url="https://t")
            for i in range(5)
        ])

        articles = await list_articles(TEST_USER)
        assert len(articles) == 1
        assert {note.article_id for note in notes} == {articles[0].id}
        assert len(await list_notes(TEST_USER)) == 5

    async def test_snapshot_kept_without_article(self, blog, session):
        """Test a title-only note keeps the title snapshot but has no article."""
        note = await create_note(session, "quote", "thought", article_title="Post")

        assert note.article_id is None
        assert note.article_title == "Post"

    @pytest.mark.parametrize(
        "excerpt,personal_note",
        [("", "thought"), ("quote", ""), ("   ", "thought"), ("quote", "\n")],
    )
    async def test_requires_text(self, blog, session, excerpt, personal_note):
        """Test excerpt and personal note must both be non-empty."""
        with pytest.raises(ValidationError):
            await create_note(session, excerpt, personal_note)

        assert await list_notes(TEST_USER) == []

    async def test_missing_blog(self, in_memory_db):
        """Test notes on a missing blog are rejected."""
        session = NoteEntrySession(blog_id=999, user_id=TEST_USER)

        with pytest.raises(NotFoundError):
            await create_note(session, "quote", "thought")

    async def test_article_failure_writes_no_note(self, blog, session):
        """Test that a failed article insert aborts the note."""
        failing = AsyncMock(side_effect=PersistenceError("store_error", "disk full"))

        with patch("blog_notes.services.article_resolver.database.add_article", failing):
            with pytest.raises(PersistenceError):
                await create_note(
                    session, "quote", "thought", article_title="Post", article_url="https://example.com/p"
                )

        assert await list_notes(TEST_USER) == []


class TestNoteSessionRegistry:
    """Tests for the session registry."""

    def test_open_get_close(self):
        """Test the basic session lifecycle."""
        registry = NoteSessionRegistry()
        session = registry.open(blog_id=1, user_id=TEST_USER)

        assert registry.get(session.session_id, TEST_USER) is session
        assert registry.close(session.session_id, TEST_USER) is True
        assert registry.close(session.session_id, TEST_USER) is False
        assert len(registry) == 0

    def test_get_unknown_raises(self):
        """Test looking up a missing session."""
        with pytest.raises(NotFoundError):
            NoteSessionRegistry().get("nope", TEST_USER)

    def test_sessions_are_per_user(self):
        """Test that another user cannot use a session."""
        registry = NoteSessionRegistry()
        session = registry.open(blog_id=1, user_id=TEST_USER)

        with pytest.raises(NotFoundError):
            registry.get(session.session_id, "intruder")

    def test_reset_clears_article(self):
        """Test reset() through the registry."""
        registry = NoteSessionRegistry()
        session = registry.open(blog_id=1, user_id=TEST_USER)
        session.article_id = 7

        registry.reset(session.session_id, TEST_USER)

        assert session.article_id is None

    def test_oldest_session_evicted_at_capacity(self):
        """Test the registry keeps at most max_sessions open."""
        registry = NoteSessionRegistry(max_sessions=2)
        first = registry.open(blog_id=1, user_id=TEST_USER)
        second = registry.open(blog_id=1, user_id=TEST_USER)
        third = registry.open(blog_id=2, user_id=TEST_USER)

        assert len(registry) == 2
        with pytest.raises(NotFoundError):
            registry.get(first.session_id, TEST_USER)
        assert registry.get(second.session_id, TEST_USER) is second
        assert registry.get(third.session_id, TEST_USER) is third
