"""Test helpers shared across the suite."""

from datetime import datetime, timedelta, timezone

from blog_notes.models.schemas import Note

TEST_USER = "test-user"
BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_note(
    note_id: int,
    excerpt: str = "excerpt",
    personal_note: str = "thoughts",
    article_id=None,
    article_title=None,
    article_url=None,
    blog_id: int = 1,
    minutes: int = 0,
) -> Note:
    """Build a Note without touching the database."""
    return Note(
        id=note_id,
        user_id=TEST_USER,
        blog_id=blog_id,
        article_id=article_id,
        article_title=article_title,
        article_url=article_url,
        excerpt=excerpt,
        personal_note=personal_note,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
