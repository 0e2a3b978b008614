"""Group notes by the article they belong to."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from blog_notes.models.schemas import UNCATEGORIZED, ArticleKey, Note


@dataclass
class NoteGroup:
    """Notes sharing one article key.

    title and url come from the first note seen for the key.
    """

    title: Optional[str]
    url: Optional[str]
    notes: List[Note] = field(default_factory=list)


def article_key(note: Note) -> ArticleKey:
    return note.article_id if note.article_id is not None else UNCATEGORIZED


def group_by_article(notes: Iterable[Note]) -> Dict[ArticleKey, NoteGroup]:
    """Partition notes by article.

    Keys appear in order of first occurrence and notes keep their input order
    within each group. Notes without an article go under "uncategorized".
    """
    groups: Dict[ArticleKey, NoteGroup] = {}

    for note in notes:
        key = article_key(note)
        group = groups.get(key)
        if group is None:
            group = groups[key] = NoteGroup(title=note.article_title, url=note.article_url)
        group.notes.append(note)

    return groups
