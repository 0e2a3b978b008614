"""Note taking and export MCP tools.

Notes are added through a note session: open one for a blog, add as many
notes as you like (the article is created once, on the first note that
names it), then close it. Changing the article title or URL within a
session starts a new article.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings and 0 for optional integers.
"""

from typing import Any, Dict

from mcp.server.fastmcp import Context

from blog_notes.errors import NotFoundError, ValidationError
from blog_notes.identity import require_user
from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.models.schemas import Note
from blog_notes.services.exporter import build_export, note_to_dict
from blog_notes.services.note_entry import create_note, note_sessions
from blog_notes.services import note_grouping
from blog_notes.services.note_view import view
from blog_notes.storage import database
from blog_notes.tools.blog_tools import parse_date


def _note_to_dict(note: Note) -> Dict[str, Any]:
    data = note_to_dict(note, {})
    del data["blog_name"]
    return data


async def open_note_session(blog_id: int, ctx: Context = None) -> Dict[str, Any]:
    """Start taking notes on a blog.

    Args:
        blog_id: ID of the blog the notes are for
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success, session_id and blog
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"open_note_session called: blog_id={blog_id}")

    user = require_user()
    blog = await database.get_blog(user.id, blog_id)
    if blog is None:
        raise NotFoundError(f"Blog with id {blog_id} not found")

    session = note_sessions.open(blog_id=blog.id, user_id=user.id)

    return {
        "success": True,
        "session_id": session.session_id,
        "blog": {"id": blog.id, "name": blog.name},
    }


async def add_note(
    blog_id: int,
    excerpt: str,
    personal_note: str,
    article_title: str = "",
    article_url: str = "",
    author: str = "",
    date_published: str = "",
    session_id: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Save an excerpt and your thoughts on it.

    When article_title and article_url are both given, the note is attached
    to an article. Within one session the article is created only once and
    reused for later notes with the same title and URL.

    Args:
        blog_id: ID of the blog; with a session_id it must match the session's blog (or be 0)
        excerpt: Text quoted from the article (required)
        personal_note: Your notes on the excerpt (required)
        article_title: Article title (empty string for an uncategorized note)
        article_url: Article URL (empty string for an uncategorized note)
        author: Article author, used if the article is created (optional)
        date_published: Article publish date in ISO format (optional)
        session_id: Session from open_note_session (empty string for a one-off note)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success, the created note and the session_id used
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"add_note called: blog_id={blog_id}, session_id={session_id}")

    user = require_user()
    if session_id:
        session = note_sessions.get(session_id, user.id)
        if blog_id and blog_id != session.blog_id:
            raise ValidationError(
                f"Note session '{session_id}' is for blog {session.blog_id}, not blog {blog_id}"
            )
    else:
        session = note_sessions.open(blog_id=blog_id, user_id=user.id)

    try:
        note = await create_note(
            session,
            excerpt=excerpt,
            personal_note=personal_note,
            article_title=article_title,
            article_url=article_url,
            author=author,
            date_published=parse_date(date_published, "date_published"),
        )
    finally:
        if not session_id:
            note_sessions.close(session.session_id, user.id)

    return {
        "success": True,
        "note": _note_to_dict(note),
        "session_id": session_id or None,
    }


async def reset_note_session(session_id: str, ctx: Context = None) -> Dict[str, Any]:
    """Forget the article resolved in a session; the next note resolves afresh.

    Args:
        session_id: Session from open_note_session
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and session_id
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"reset_note_session called: session_id={session_id}")

    user = require_user()
    note_sessions.reset(session_id, user.id)

    return {
        "success": True,
        "session_id": session_id,
    }


async def close_note_session(session_id: str, ctx: Context = None) -> Dict[str, Any]:
    """Finish a note session.

    Args:
        session_id: Session from open_note_session
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"close_note_session called: session_id={session_id}")

    user = require_user()
    if not note_sessions.close(session_id, user.id):
        raise NotFoundError(f"Note session '{session_id}' not found")

    return {"success": True}


async def list_notes(
    blog_id: int = 0,
    article_filter: str = "all",
    query: str = "",
    sort: str = "newest",
    grouped: bool = False,
    ctx: Context = None,
) -> Dict[str, Any]:
    """List notes with optional filtering, search and sorting.

    Args:
        blog_id: Only notes on this blog (0 for all blogs)
        article_filter: all, with-article or without-article
        query: Case-insensitive text searched in excerpt, personal note and article title
        sort: newest, oldest or article (by article title)
        grouped: Also return the notes grouped by article
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of matching notes
        - notes: list of note objects in the requested order
        - groups: list of {article_key, article_title, article_url, notes}
          when grouped is true
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"list_notes called: blog_id={blog_id}, article_filter={article_filter}, query={query}, sort={sort}")

    user = require_user()
    notes = await database.list_notes(user.id, blog_id=blog_id or None)
    selected = view(notes, note_filter=article_filter, query=query, sort=sort)

    result: Dict[str, Any] = {
        "success": True,
        "count": len(selected),
        "notes": [_note_to_dict(n) for n in selected],
    }

    if grouped:
        result["groups"] = [
            {
                "article_key": key,
                "article_title": group.title,
                "article_url": group.url,
                "notes": [_note_to_dict(n) for n in group.notes],
            }
            for key, group in note_grouping.group_by_article(selected).items()
        ]

    return result


async def export_notes(
    export_format: str = "markdown",
    blog_id: int = 0,
    ctx: Context = None,
) -> Dict[str, Any]:
    """Export notes as Markdown, JSON or CSV.

    Args:
        export_format: markdown, json or csv
        blog_id: Export only this blog's notes (0 exports every blog)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - filename: suggested file name, e.g. my-notes.md
        - mime_type: content type of the export
        - note_count: number of notes exported
        - content: the exported text
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"export_notes called: export_format={export_format}, blog_id={blog_id}")

    user = require_user()
    if blog_id and await database.get_blog(user.id, blog_id) is None:
        raise NotFoundError(f"Blog with id {blog_id} not found")

    # A failed fetch raises PersistenceError before anything is formatted
    blog_names = await database.get_blog_names(user.id)
    notes = await database.list_notes(user.id, blog_id=blog_id or None)

    export = build_export(notes, blog_names, export_format, blog_id=blog_id or None)

    return {
        "success": True,
        "filename": export.filename,
        "mime_type": export.mime_type,
        "note_count": len(notes),
        "content": export.content,
    }


# List of note tools for registration
note_tools = [
    open_note_session,
    add_note,
    reset_note_session,
    close_note_session,
    list_notes,
    export_notes,
]
