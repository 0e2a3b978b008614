"""Filtering, searching and sorting of note lists.

view() is pure: it returns a new list and never touches its input.
"""

from typing import List, Sequence, Union

from blog_notes.errors import ValidationError
from blog_notes.models.schemas import Note, NoteFilter, SortOrder


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid value '{value}', expected one of: {choices}") from None


def has_article(note: Note) -> bool:
    return bool(note.article_title)


def matches_query(note: Note, query: str) -> bool:
    """Case-insensitive substring match on excerpt, personal note or article title."""
    if not query:
        return True
    needle = query.lower()
    return (
        needle in note.excerpt.lower()
        or needle in note.personal_note.lower()
        or needle in (note.article_title or "").lower()
    )


def filter_notes(notes: Sequence[Note], note_filter: NoteFilter) -> List[Note]:
    if note_filter is NoteFilter.WITH_ARTICLE:
        return [note for note in notes if has_article(note)]
    if note_filter is NoteFilter.WITHOUT_ARTICLE:
        return [note for note in notes if not has_article(note)]
    return list(notes)


def sort_notes(notes: Sequence[Note], sort: SortOrder) -> List[Note]:
    # sorted() is stable, including with reverse=True
    if sort is SortOrder.NEWEST:
        return sorted(notes, key=lambda note: note.created_at, reverse=True)
    if sort is SortOrder.OLDEST:
        return sorted(notes, key=lambda note: note.created_at)
    return sorted(notes, key=lambda note: note.article_title or "")


def view(
    notes: Sequence[Note],
    note_filter: Union[NoteFilter, str] = NoteFilter.ALL,
    query: str = "",
    sort: Union[SortOrder, str] = SortOrder.NEWEST,
) -> List[Note]:
    """Apply filter, then search, then sort.

    Args:
        notes: Source notes (not modified)
        note_filter: all, with-article or without-article
        query: Search text; empty matches everything
        sort: newest, oldest or article

    Returns:
        New list of the matching notes in the requested order

    Raises:
        ValidationError: If note_filter or sort is not a known value
    """
    note_filter = _coerce(NoteFilter, note_filter)
    sort = _coerce(SortOrder, sort)
    query = query or ""

    selected = [note for note in filter_notes(notes, note_filter) if matches_query(note, query)]
    return sort_notes(selected, sort)
