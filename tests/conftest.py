"""Shared fixtures for blog_notes tests."""

from unittest.mock import AsyncMock, patch

import aiosqlite
import pytest

from blog_notes.config import reset_config
from blog_notes.storage.database import init_database
from tests.utils import TEST_USER


@pytest.fixture(autouse=True)
def configured_user(monkeypatch, tmp_path):
    """Run every test as TEST_USER against a throwaway database path."""
    monkeypatch.setenv("BLOG_NOTES_USER_ID", TEST_USER)
    monkeypatch.setenv("BLOG_NOTES_DB_PATH", str(tmp_path / "blog_notes.db"))
    reset_config()
    yield TEST_USER
    reset_config()


@pytest.fixture
async def in_memory_db():
    """Create an in-memory database for testing."""
    db = await aiosqlite.connect(":memory:")
    db.row_factory = aiosqlite.Row
    await init_database(db)

    # Patch get_database to return our in-memory connection
    with patch("blog_notes.storage.database.get_database", AsyncMock(return_value=db)):
        yield db

    await db.close()


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on the asyncio backend."""
    return "asyncio"
