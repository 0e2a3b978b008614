"""Note creation and entry sessions.

A note is created in three steps: validate the text, resolve the article
(which may create one), then insert the note with a snapshot of the article
title and URL. If article resolution fails the note is never written.
"""

from datetime import datetime
from typing import Dict, Optional

from blog_notes.errors import NotFoundError, ValidationError
from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.models.schemas import Note
from blog_notes.services.article_resolver import NoteEntrySession, resolve
from blog_notes.storage import database


async def create_note(
    session: NoteEntrySession,
    excerpt: str,
    personal_note: str,
    article_title: Optional[str] = None,
    article_url: Optional[str] = None,
    author: Optional[str] = None,
    date_published: Optional[datetime] = None,
) -> Note:
    """Create a note on the session's blog.

    Submissions on the same session are serialized so that concurrent calls
    cannot both create an article.

    Raises:
        ValidationError: If the excerpt or personal note is empty
        NotFoundError: If the session's blog no longer exists
        PersistenceError: If the article or note cannot be stored
    """
    logger = UnifiedLogger.get_logger(__name__)

    excerpt = (excerpt or "").strip()
    personal_note = (personal_note or "").strip()
    if not excerpt:
        raise ValidationError("Excerpt is required")
    if not personal_note:
        raise ValidationError("Personal note is required")

    async with session.lock:
        blog = await database.get_blog(session.user_id, session.blog_id)
        if blog is None:
            raise NotFoundError(f"Blog with id {session.blog_id} not found")

        article_id = await resolve(
            session,
            blog_id=session.blog_id,
            user_id=session.user_id,
            title=article_title,
            url=article_url,
            author=author,
            date_published=date_published,
        )

        note = await database.add_note(
            user_id=session.user_id,
            blog_id=session.blog_id,
            excerpt=excerpt,
            personal_note=personal_note,
            article_id=article_id,
            article_title=(article_title or "").strip() or None,
            article_url=(article_url or "").strip() or None,
        )

    logger.info(f"Created note {note.id} on blog '{blog.name}' (article={article_id})")
    return note


MAX_OPEN_SESSIONS = 100


class NoteSessionRegistry:
    """Open note-entry sessions, keyed by session id.

    Sessions live in memory until closed or until the process exits. At most
    max_sessions are kept; opening one more evicts the oldest.
    """

    def __init__(self, max_sessions: int = MAX_OPEN_SESSIONS):
        self._sessions: Dict[str, NoteEntrySession] = {}
        self._max_sessions = max_sessions

    def open(self, blog_id: int, user_id: str) -> NoteEntrySession:
        while len(self._sessions) >= self._max_sessions:
            oldest = next(iter(self._sessions))
            UnifiedLogger.get_logger(__name__).info(f"Evicting note session {oldest}")
            del self._sessions[oldest]

        session = NoteEntrySession(blog_id=blog_id, user_id=user_id)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str, user_id: str) -> NoteEntrySession:
        """Look up an open session owned by user_id.

        Raises:
            NotFoundError: If there is no such open session
        """
        session = self._sessions.get(session_id)
        if session is None or session.user_id != user_id:
            raise NotFoundError(f"Note session '{session_id}' not found")
        return session

    def reset(self, session_id: str, user_id: str) -> NoteEntrySession:
        session = self.get(session_id, user_id)
        session.reset()
        return session

    def close(self, session_id: str, user_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None or session.user_id != user_id:
            return False
        del self._sessions[session_id]
        return True

    def __len__(self) -> int:
        return len(self._sessions)


# Sessions opened through the MCP tools
note_sessions = NoteSessionRegistry()
