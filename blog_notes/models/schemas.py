"""Data models for blog_notes.

This module defines the core data structures for blogs, articles, notes and
user profiles, plus the enumerations used to filter, sort and export notes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

UNCATEGORIZED = "uncategorized"

# Group key for a note: its article id, or the UNCATEGORIZED sentinel
ArticleKey = Union[int, str]


class ReadingStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ExpertiseLevel(str, Enum):
    """Self-assessed expertise in a topic, ordered beginner < expert."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def weight(self) -> int:
        return _EXPERTISE_WEIGHTS[self]


_EXPERTISE_WEIGHTS = {
    ExpertiseLevel.BEGINNER: 1,
    ExpertiseLevel.INTERMEDIATE: 2,
    ExpertiseLevel.ADVANCED: 3,
    ExpertiseLevel.EXPERT: 4,
}


class PreferredLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ContentDepth(str, Enum):
    OVERVIEW = "overview"
    DETAILED = "detailed"
    TECHNICAL = "technical"


class NoteFilter(str, Enum):
    ALL = "all"
    WITH_ARTICLE = "with-article"
    WITHOUT_ARTICLE = "without-article"


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    ARTICLE = "article"


class ExportFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    CSV = "csv"

    @property
    def extension(self) -> str:
        return {"markdown": "md", "json": "json", "csv": "csv"}[self.value]

    @property
    def mime_type(self) -> str:
        return {
            "markdown": "text/markdown",
            "json": "application/json",
            "csv": "text/csv",
        }[self.value]


@dataclass
class Blog:
    """A blog the user follows."""

    id: int
    user_id: str
    name: str
    url: str
    category: Optional[str]
    last_visited: Optional[datetime]
    created_at: Optional[datetime] = None


@dataclass
class Article:
    """An article belonging to a blog, with read and progress state."""

    id: int
    user_id: str
    blog_id: int
    title: str
    url: str
    author: Optional[str]
    date_published: Optional[datetime]
    is_read: bool
    date_read: Optional[datetime] = None
    reading_status: ReadingStatus = ReadingStatus.NOT_STARTED
    progress_updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class Note:
    """An excerpt plus personal annotation, optionally tied to an article.

    article_title/article_url are a snapshot taken when the note was created
    and are never re-synced from the article.
    """

    id: int
    user_id: str
    blog_id: int
    article_id: Optional[int]
    article_title: Optional[str]
    article_url: Optional[str]
    excerpt: str
    personal_note: str
    created_at: datetime


@dataclass
class ReadingPreferences:
    preferred_length: Optional[PreferredLength] = None
    content_depth: Optional[ContentDepth] = None


@dataclass
class UserProfile:
    """Interests and expertise used to rank unread articles."""

    user_id: str
    interests: List[str] = field(default_factory=list)
    expertise_areas: Dict[str, ExpertiseLevel] = field(default_factory=dict)
    reading_preferences: ReadingPreferences = field(default_factory=ReadingPreferences)
    learning_goals: List[str] = field(default_factory=list)
