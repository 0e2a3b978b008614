"""Database storage for blog_notes.

This module provides async SQLite database operations for blogs, articles,
notes and user profiles. Every operation is scoped to the owning user id.
Database location: ~/.blog_notes/blog_notes.db (or BLOG_NOTES_DB_PATH env var)
"""

import functools
import json
import aiosqlite
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from blog_notes.config import get_config
from blog_notes.errors import PersistenceError
from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.models.schemas import (
    Article,
    Blog,
    ContentDepth,
    ExpertiseLevel,
    Note,
    PreferredLength,
    ReadingPreferences,
    ReadingStatus,
    UserProfile,
)


def _get_db_path() -> Path:
    """Database path from the server config (BLOG_NOTES_DB_PATH or the default)."""
    return get_config().db_path


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _store_call(func):
    """Translate aiosqlite failures into PersistenceError."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except aiosqlite.IntegrityError as e:
            UnifiedLogger.get_logger(__name__).warning(f"{func.__name__} rejected: {e}")
            raise PersistenceError("constraint_violation", f"{func.__name__} rejected by store: {e}") from e
        except aiosqlite.Error as e:
            UnifiedLogger.get_logger(__name__).error(f"{func.__name__} failed: {e}")
            raise PersistenceError("store_error", f"{func.__name__} failed: {e}") from e

    return wrapper


# Singleton connection
_db_connection: Optional[aiosqlite.Connection] = None


async def get_database() -> aiosqlite.Connection:
    """Get or create a singleton database connection.

    Returns:
        Active database connection
    """
    global _db_connection

    if _db_connection is None:
        db_path = _get_db_path()
        # Ensure directory exists
        db_path.parent.mkdir(parents=True, exist_ok=True)

        _db_connection = await aiosqlite.connect(db_path)
        _db_connection.row_factory = aiosqlite.Row
        await init_database(_db_connection)

    return _db_connection


async def init_database(db: Optional[aiosqlite.Connection] = None) -> None:
    """Initialize database tables if they don't exist.

    Args:
        db: Optional database connection (uses singleton if not provided)
    """
    if db is None:
        db = await get_database()

    await db.execute("PRAGMA foreign_keys = ON")

    await db.execute("""
        CREATE TABLE IF NOT EXISTS blogs (
            id INTEGER PRIMARY KEY,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            url TEXT NOT NULL,
            category TEXT,
            last_visited TIMESTAMP,
            created_at TIMESTAMP NOT NULL,
            UNIQUE (user_id, name)
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS articles (
            id INTEGER PRIMARY KEY,
            user_id TEXT NOT NULL,
            blog_id INTEGER NOT NULL,
            title TEXT NOT NULL,
            url TEXT NOT NULL,
            author TEXT,
            date_published TIMESTAMP,
            is_read BOOLEAN NOT NULL DEFAULT FALSE,
            date_read TIMESTAMP,
            reading_status TEXT NOT NULL DEFAULT 'not_started'
                CHECK (reading_status IN ('not_started', 'in_progress', 'completed')),
            progress_updated_at TIMESTAMP,
            created_at TIMESTAMP NOT NULL,
            FOREIGN KEY (blog_id) REFERENCES blogs(id) ON DELETE CASCADE
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS notes (
            id INTEGER PRIMARY KEY,
            user_id TEXT NOT NULL,
            blog_id INTEGER NOT NULL,
            article_id INTEGER,
            article_title TEXT,
            article_url TEXT,
            excerpt TEXT NOT NULL CHECK (length(excerpt) > 0),
            personal_note TEXT NOT NULL CHECK (length(personal_note) > 0),
            created_at TIMESTAMP NOT NULL,
            FOREIGN KEY (blog_id) REFERENCES blogs(id) ON DELETE CASCADE,
            FOREIGN KEY (article_id) REFERENCES articles(id) ON DELETE SET NULL
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS user_profiles (
            user_id TEXT PRIMARY KEY,
            interests TEXT NOT NULL DEFAULT '[]',
            expertise_areas TEXT NOT NULL DEFAULT '{}',
            reading_preferences TEXT NOT NULL DEFAULT '{}',
            learning_goals TEXT NOT NULL DEFAULT '[]',
            updated_at TIMESTAMP NOT NULL
        )
    """)

    # Create indexes for faster lookups
    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_blogs_user_id ON blogs(user_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_articles_blog_id ON articles(blog_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_articles_is_read ON articles(is_read)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_notes_blog_id ON notes(blog_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_notes_user_created ON notes(user_id, created_at)
    """)

    await db.commit()


def _row_to_blog(row: aiosqlite.Row) -> Blog:
    return Blog(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        url=row["url"],
        category=row["category"],
        last_visited=_parse_ts(row["last_visited"]),
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_article(row: aiosqlite.Row) -> Article:
    return Article(
        id=row["id"],
        user_id=row["user_id"],
        blog_id=row["blog_id"],
        title=row["title"],
        url=row["url"],
        author=row["author"],
        date_published=_parse_ts(row["date_published"]),
        is_read=bool(row["is_read"]),
        date_read=_parse_ts(row["date_read"]),
        reading_status=ReadingStatus(row["reading_status"]),
        progress_updated_at=_parse_ts(row["progress_updated_at"]),
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_note(row: aiosqlite.Row) -> Note:
    return Note(
        id=row["id"],
        user_id=row["user_id"],
        blog_id=row["blog_id"],
        article_id=row["article_id"],
        article_title=row["article_title"],
        article_url=row["article_url"],
        excerpt=row["excerpt"],
        personal_note=row["personal_note"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


# ---------------------------------------------------------------------------
# Blogs
# ---------------------------------------------------------------------------


@_store_call
async def add_blog(
    user_id: str,
    name: str,
    url: str,
    category: Optional[str] = None,
) -> Blog:
    """Add a new blog for a user.

    Args:
        user_id: Owning user
        name: Display name, unique per user
        url: Homepage URL of the blog
        category: Optional free-text category

    Returns:
        The created Blog object

    Raises:
        PersistenceError: If the user already has a blog with that name
    """
    db = await get_database()
    created_at = _now()

    cursor = await db.execute(
        """
        INSERT INTO blogs (user_id, name, url, category, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (user_id, name, url, category, created_at),
    )
    await db.commit()

    return Blog(
        id=cursor.lastrowid,
        user_id=user_id,
        name=name,
        url=url,
        category=category,
        last_visited=None,
        created_at=datetime.fromisoformat(created_at),
    )


@_store_call
async def get_blog(user_id: str, blog_id: int) -> Optional[Blog]:
    """Get one of the user's blogs by id.

    Returns:
        Blog object if found, None otherwise
    """
    db = await get_database()

    cursor = await db.execute(
        "SELECT * FROM blogs WHERE id = ? AND user_id = ?", (blog_id, user_id)
    )
    row = await cursor.fetchone()

    return _row_to_blog(row) if row else None


@_store_call
async def list_blogs(user_id: str) -> List[dict]:
    """List the user's blogs with article and note counts, ordered by name.

    Returns:
        List of dicts with blog info and counts
    """
    db = await get_database()

    cursor = await db.execute(
        """
        SELECT b.*,
               (SELECT COUNT(*) FROM articles a WHERE a.blog_id = b.id) AS total_articles,
               (SELECT COUNT(*) FROM articles a
                 WHERE a.blog_id = b.id AND a.is_read = 0) AS unread_articles,
               (SELECT COUNT(*) FROM notes n WHERE n.blog_id = b.id) AS total_notes
        FROM blogs b
        WHERE b.user_id = ?
        ORDER BY b.name
        """,
        (user_id,),
    )

    blogs = []
    async for row in cursor:
        blogs.append({
            "id": row["id"],
            "name": row["name"],
            "url": row["url"],
            "category": row["category"],
            "last_visited": row["last_visited"],
            "total_articles": row["total_articles"],
            "unread_articles": row["unread_articles"] or 0,
            "total_notes": row["total_notes"],
        })

    return blogs


@_store_call
async def get_blog_names(user_id: str) -> Dict[int, str]:
    """Map blog id to blog name for all of the user's blogs."""
    db = await get_database()

    cursor = await db.execute("SELECT id, name FROM blogs WHERE user_id = ?", (user_id,))
    return {row["id"]: row["name"] async for row in cursor}


@_store_call
async def update_blog(
    user_id: str,
    blog_id: int,
    name: Optional[str] = None,
    url: Optional[str] = None,
    category: Optional[str] = None,
) -> Optional[Blog]:
    """Update the given fields of a blog; None leaves a field unchanged.

    Returns:
        Updated Blog object if found, None otherwise
    """
    db = await get_database()

    changes = {"name": name, "url": url, "category": category}
    assignments = [(column, value) for column, value in changes.items() if value is not None]

    if assignments:
        set_clause = ", ".join(f"{column} = ?" for column, _ in assignments)
        await db.execute(
            f"UPDATE blogs SET {set_clause} WHERE id = ? AND user_id = ?",
            [value for _, value in assignments] + [blog_id, user_id],
        )
        await db.commit()

    return await get_blog(user_id, blog_id)


@_store_call
async def touch_blog(user_id: str, blog_id: int) -> Optional[Blog]:
    """Set a blog's last_visited timestamp to now.

    Returns:
        Updated Blog object if found, None otherwise
    """
    db = await get_database()

    await db.execute(
        "UPDATE blogs SET last_visited = ? WHERE id = ? AND user_id = ?",
        (_now(), blog_id, user_id),
    )
    await db.commit()

    return await get_blog(user_id, blog_id)


@_store_call
async def remove_blog(user_id: str, blog_id: int) -> Tuple[bool, int, int]:
    """Remove a blog together with its articles and notes.

    Returns:
        Tuple of (success, articles_deleted, notes_deleted)
    """
    db = await get_database()

    cursor = await db.execute(
        "SELECT id FROM blogs WHERE id = ? AND user_id = ?", (blog_id, user_id)
    )
    if await cursor.fetchone() is None:
        return (False, 0, 0)

    cursor = await db.execute(
        "SELECT COUNT(*) AS count FROM articles WHERE blog_id = ?", (blog_id,)
    )
    article_count = (await cursor.fetchone())["count"]

    cursor = await db.execute(
        "SELECT COUNT(*) AS count FROM notes WHERE blog_id = ?", (blog_id,)
    )
    note_count = (await cursor.fetchone())["count"]

    # Explicit deletes keep this correct even without foreign key enforcement
    await db.execute("DELETE FROM notes WHERE blog_id = ?", (blog_id,))
    await db.execute("DELETE FROM articles WHERE blog_id = ?", (blog_id,))
    await db.execute("DELETE FROM blogs WHERE id = ?", (blog_id,))
    await db.commit()

    return (True, article_count, note_count)


@_store_call
async def seed_blogs(user_id: str, blogs: List[dict]) -> int:
    """Add a batch of blogs, skipping names the user already has.

    Args:
        user_id: Owning user
        blogs: List of dicts with name, url and optional category

    Returns:
        Number of blogs actually added
    """
    db = await get_database()
    added_count = 0

    for blog in blogs:
        try:
            await db.execute(
                """
                INSERT INTO blogs (user_id, name, url, category, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, blog["name"], blog["url"], blog.get("category"), _now()),
            )
            added_count += 1
        except aiosqlite.IntegrityError:
            # Duplicate name, skip
            pass

    await db.commit()
    return added_count


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------


@_store_call
async def add_article(
    user_id: str,
    blog_id: int,
    title: str,
    url: str,
    author: Optional[str] = None,
    date_published: Optional[datetime] = None,
) -> Article:
    """Create an article under one of the user's blogs.

    Raises:
        PersistenceError: If the blog does not exist or the row is rejected
    """
    db = await get_database()
    created_at = _now()

    cursor = await db.execute(
        """
        INSERT INTO articles (user_id, blog_id, title, url, author, date_published, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            blog_id,
            title,
            url,
            author,
            date_published.isoformat() if date_published else None,
            created_at,
        ),
    )
    await db.commit()

    return Article(
        id=cursor.lastrowid,
        user_id=user_id,
        blog_id=blog_id,
        title=title,
        url=url,
        author=author,
        date_published=date_published,
        is_read=False,
        created_at=datetime.fromisoformat(created_at),
    )


@_store_call
async def get_article(user_id: str, article_id: int) -> Optional[Article]:
    db = await get_database()

    cursor = await db.execute(
        "SELECT * FROM articles WHERE id = ? AND user_id = ?", (article_id, user_id)
    )
    row = await cursor.fetchone()

    return _row_to_article(row) if row else None


@_store_call
async def list_articles(
    user_id: str,
    blog_id: Optional[int] = None,
    include_read: bool = True,
    limit: Optional[int] = None,
) -> List[Article]:
    """List the user's articles, newest first.

    Args:
        user_id: Owning user
        blog_id: Optional blog to filter by
        include_read: Whether to include read articles (default: True)
        limit: Optional maximum number of articles

    Returns:
        List of Article objects ordered by publish date, then creation date
    """
    db = await get_database()

    query = "SELECT * FROM articles WHERE user_id = ?"
    params: List = [user_id]

    if blog_id is not None:
        query += " AND blog_id = ?"
        params.append(blog_id)

    if not include_read:
        query += " AND is_read = 0"

    query += " ORDER BY COALESCE(date_published, created_at) DESC, id DESC"

    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    cursor = await db.execute(query, params)
    return [_row_to_article(row) async for row in cursor]


async def _set_article_read(user_id: str, article_id: int, is_read: bool) -> Optional[Article]:
    db = await get_database()

    await db.execute(
        "UPDATE articles SET is_read = ?, date_read = ? WHERE id = ? AND user_id = ?",
        (1 if is_read else 0, _now() if is_read else None, article_id, user_id),
    )
    await db.commit()

    return await get_article(user_id, article_id)


@_store_call
async def mark_article_read(user_id: str, article_id: int) -> Optional[Article]:
    """Mark an article as read and stamp date_read.

    Returns:
        Updated Article object if found, None otherwise
    """
    return await _set_article_read(user_id, article_id, True)


@_store_call
async def mark_article_unread(user_id: str, article_id: int) -> Optional[Article]:
    """Mark an article as unread and clear date_read.

    Returns:
        Updated Article object if found, None otherwise
    """
    return await _set_article_read(user_id, article_id, False)


@_store_call
async def update_reading_progress(
    user_id: str, article_id: int, status: ReadingStatus
) -> Optional[Article]:
    """Set an article's reading status and stamp progress_updated_at."""
    db = await get_database()

    await db.execute(
        """
        UPDATE articles SET reading_status = ?, progress_updated_at = ?
        WHERE id = ? AND user_id = ?
        """,
        (status.value, _now(), article_id, user_id),
    )
    await db.commit()

    return await get_article(user_id, article_id)


@_store_call
async def delete_article(user_id: str, article_id: int) -> bool:
    """Delete an article. Notes that referenced it become uncategorized.

    Returns:
        True if an article was deleted
    """
    db = await get_database()

    await db.execute(
        "UPDATE notes SET article_id = NULL WHERE article_id = ? AND user_id = ?",
        (article_id, user_id),
    )
    cursor = await db.execute(
        "DELETE FROM articles WHERE id = ? AND user_id = ?", (article_id, user_id)
    )
    await db.commit()

    return cursor.rowcount > 0


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


@_store_call
async def add_note(
    user_id: str,
    blog_id: int,
    excerpt: str,
    personal_note: str,
    article_id: Optional[int] = None,
    article_title: Optional[str] = None,
    article_url: Optional[str] = None,
) -> Note:
    """Insert a note. created_at is set here and never changes afterwards."""
    db = await get_database()
    created_at = _now()

    cursor = await db.execute(
        """
        INSERT INTO notes (user_id, blog_id, article_id, article_title, article_url,
                           excerpt, personal_note, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (user_id, blog_id, article_id, article_title, article_url, excerpt, personal_note, created_at),
    )
    await db.commit()

    return Note(
        id=cursor.lastrowid,
        user_id=user_id,
        blog_id=blog_id,
        article_id=article_id,
        article_title=article_title,
        article_url=article_url,
        excerpt=excerpt,
        personal_note=personal_note,
        created_at=datetime.fromisoformat(created_at),
    )


@_store_call
async def list_notes(user_id: str, blog_id: Optional[int] = None) -> List[Note]:
    """List the user's notes, newest first, optionally for one blog."""
    db = await get_database()

    query = "SELECT * FROM notes WHERE user_id = ?"
    params: List = [user_id]

    if blog_id is not None:
        query += " AND blog_id = ?"
        params.append(blog_id)

    query += " ORDER BY created_at DESC, id DESC"

    cursor = await db.execute(query, params)
    return [_row_to_note(row) async for row in cursor]


# ---------------------------------------------------------------------------
# User profiles
# ---------------------------------------------------------------------------


@_store_call
async def get_profile(user_id: str) -> Optional[UserProfile]:
    db = await get_database()

    cursor = await db.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,))
    row = await cursor.fetchone()

    if row is None:
        return None

    preferences = json.loads(row["reading_preferences"])
    return UserProfile(
        user_id=row["user_id"],
        interests=json.loads(row["interests"]),
        expertise_areas={
            topic: ExpertiseLevel(level)
            for topic, level in json.loads(row["expertise_areas"]).items()
        },
        reading_preferences=ReadingPreferences(
            preferred_length=PreferredLength(preferences["preferred_length"])
            if preferences.get("preferred_length")
            else None,
            content_depth=ContentDepth(preferences["content_depth"])
            if preferences.get("content_depth")
            else None,
        ),
        learning_goals=json.loads(row["learning_goals"]),
    )


@_store_call
async def save_profile(profile: UserProfile) -> UserProfile:
    """Create or wholesale replace the user's profile."""
    db = await get_database()
    preferences = profile.reading_preferences

    await db.execute(
        """
        INSERT INTO user_profiles (user_id, interests, expertise_areas,
                                   reading_preferences, learning_goals, updated_at)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id) DO UPDATE SET
            interests = excluded.interests,
            expertise_areas = excluded.expertise_areas,
            reading_preferences = excluded.reading_preferences,
            learning_goals = excluded.learning_goals,
            updated_at = excluded.updated_at
        """,
        (
            profile.user_id,
            json.dumps(profile.interests),
            json.dumps({topic: level.value for topic, level in profile.expertise_areas.items()}),
            json.dumps({
                "preferred_length": preferences.preferred_length.value
                if preferences.preferred_length
                else None,
                "content_depth": preferences.content_depth.value
                if preferences.content_depth
                else None,
            }),
            json.dumps(profile.learning_goals),
            _now(),
        ),
    )
    await db.commit()

    return profile


async def close_database() -> None:
    """Close the database connection."""
    global _db_connection

    if _db_connection is not None:
        await _db_connection.close()
        _db_connection = None
