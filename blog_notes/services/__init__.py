"""Services for blog_notes."""

from .article_resolver import NoteEntrySession, resolve
from .exporter import ExportResult, build_export, format_notes, suggest_filename
from .note_entry import NoteSessionRegistry, create_note, note_sessions
from .note_grouping import NoteGroup, group_by_article
from .note_view import view
from .recommender import ScoredArticle, aggregate_expertise, rank

__all__ = [
    "NoteEntrySession",
    "resolve",
    "ExportResult",
    "build_export",
    "format_notes",
    "suggest_filename",
    "NoteSessionRegistry",
    "create_note",
    "note_sessions",
    "NoteGroup",
    "group_by_article",
    "view",
    "ScoredArticle",
    "aggregate_expertise",
    "rank",
]
