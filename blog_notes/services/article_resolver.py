"""Article resolution for note entry.

When a note is entered with article metadata, the resolver decides whether
to reuse the article already created during the current entry session or to
create a new one. While the title/url pair stays the same, at most one
article is written per session. Reuse only covers the most recent pair:
editing the metadata away and back again (A, then B, then A) creates a
second article for A.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.storage import database


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class NoteEntrySession:
    """State for one open note-entry interaction on a blog.

    article_id caches the article resolved in this session; resolved_title and
    resolved_url record which metadata it was resolved for.
    """

    blog_id: int
    user_id: str
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    article_id: Optional[int] = None
    resolved_title: Optional[str] = None
    resolved_url: Optional[str] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    def reset(self) -> None:
        """Forget the resolved article so the next note resolves afresh."""
        self.article_id = None
        self.resolved_title = None
        self.resolved_url = None

    def matches(self, title: Optional[str], url: Optional[str]) -> bool:
        return self.resolved_title == _clean(title) and self.resolved_url == _clean(url)


async def resolve(
    session: NoteEntrySession,
    blog_id: int,
    user_id: str,
    title: Optional[str] = None,
    url: Optional[str] = None,
    author: Optional[str] = None,
    date_published: Optional[datetime] = None,
) -> Optional[int]:
    """Resolve the article a new note should reference.

    Args:
        session: Entry session holding the cached resolution; updated in place
        blog_id: Blog the note belongs to
        user_id: Owning user
        title: Article title entered with the note
        url: Article URL entered with the note
        author: Optional author, only used when an article is created
        date_published: Optional publish date, only used when an article is created

    Returns:
        The article id to attach to the note, or None for an uncategorized note

    Raises:
        PersistenceError: If creating the article fails. The session is left unchanged.
    """
    logger = UnifiedLogger.get_logger(__name__)
    title, url = _clean(title), _clean(url)

    if session.article_id is not None:
        if session.matches(title, url):
            logger.debug(f"Reusing article {session.article_id} for session {session.session_id}")
            return session.article_id
        logger.info(f"Article details changed in session {session.session_id}, resolving again")
        session.reset()

    if not (title and url):
        # Both are needed to create an article; the note keeps whatever snapshot it has
        return None

    article = await database.add_article(
        user_id=user_id,
        blog_id=blog_id,
        title=title,
        url=url,
        author=_clean(author),
        date_published=date_published,
    )
    logger.info(f"Created article {article.id} '{title}' for session {session.session_id}")

    session.article_id = article.id
    session.resolved_title = title
    session.resolved_url = url
    return article.id
