"""Export notes as Markdown, JSON or CSV.

All formatters accept any list of notes, including an empty one. A blog_id
selects the single-blog layout; without it notes are laid out per blog.
"""

import csv
import io
import json
import re
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Union

from blog_notes.errors import ValidationError
from blog_notes.models.schemas import ExportFormat, Note
from blog_notes.services.note_grouping import group_by_article

UNKNOWN_BLOG = "Unknown Blog"
UNTITLED_ARTICLE = "Untitled Article"
CSV_HEADERS = ["Blog", "Article Title", "Article URL", "Excerpt", "Personal Note", "Created At"]


@dataclass
class ExportResult:
    content: str
    filename: str
    mime_type: str


def format_timestamp(value: datetime) -> str:
    """ISO 8601 timestamp in the local timezone, to the second."""
    return value.astimezone().isoformat(timespec="seconds")


def blog_name_for(blog_names: Mapping[int, str], blog_id: int) -> str:
    return blog_names.get(blog_id) or UNKNOWN_BLOG


def note_to_dict(note: Note, blog_names: Mapping[int, str]) -> dict:
    """Every Note field plus the resolved blog_name, JSON-ready."""
    data = {}
    for f in fields(Note):
        value = getattr(note, f.name)
        data[f.name] = value.isoformat() if isinstance(value, datetime) else value
    data["blog_name"] = blog_name_for(blog_names, note.blog_id)
    return data


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def _blockquote(text: str) -> List[str]:
    return [f"> {line}" if line else ">" for line in text.splitlines() or [""]]


def _note_lines(note: Note) -> List[str]:
    lines = _blockquote(note.excerpt)
    lines.append("")
    lines.append(note.personal_note)
    lines.append("")
    lines.append(f"_Added on {format_timestamp(note.created_at)}_")
    lines.append("")
    return lines


def _article_sections(notes: Sequence[Note], level: int, rule_after_each: bool) -> List[str]:
    lines: List[str] = []
    heading = "#" * level

    for group in group_by_article(notes).values():
        lines.append(f"{heading} {group.title or UNTITLED_ARTICLE}")
        if group.url:
            lines.append(f"[View Article]({group.url})")
        lines.append("")
        for note in group.notes:
            lines.extend(_note_lines(note))
        if rule_after_each:
            lines.extend(["---", ""])

    return lines


def format_markdown(
    notes: Sequence[Note],
    blog_names: Mapping[int, str],
    blog_id: Optional[int] = None,
) -> str:
    """Render notes as a Markdown document.

    Single-blog layout: ``# Notes for <blog>`` with a ``##`` section per
    article. Multi-blog layout: ``# My Notes`` with a ``##`` section per blog
    and ``###`` per article. Top-level sections end with a horizontal rule.
    """
    if blog_id is not None:
        lines = [f"# Notes for {blog_name_for(blog_names, blog_id)}", ""]
        lines.extend(_article_sections(notes, level=2, rule_after_each=True))
    else:
        lines = ["# My Notes", ""]
        by_blog: Dict[str, List[Note]] = {}
        for note in notes:
            by_blog.setdefault(blog_name_for(blog_names, note.blog_id), []).append(note)
        for blog_name, blog_notes in by_blog.items():
            lines.extend([f"## {blog_name}", ""])
            lines.extend(_article_sections(blog_notes, level=3, rule_after_each=False))
            lines.extend(["---", ""])

    if not notes:
        lines.extend(["_No notes yet._", ""])

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# JSON / CSV
# ---------------------------------------------------------------------------


def format_json(notes: Sequence[Note], blog_names: Mapping[int, str]) -> str:
    """Pretty-printed JSON array of notes, each with a blog_name field."""
    return json.dumps(
        [note_to_dict(note, blog_names) for note in notes],
        indent=2,
        ensure_ascii=False,
    )


def format_csv(
    notes: Sequence[Note],
    blog_names: Mapping[int, str],
    blog_id: Optional[int] = None,
) -> str:
    """CSV with every field quoted and embedded quotes doubled.

    The Blog column is left out of a single-blog export. Rows are joined with
    newlines and there is no trailing newline.
    """
    single_blog = blog_id is not None
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(CSV_HEADERS[1:] if single_blog else CSV_HEADERS)
    for note in notes:
        row = [
            note.article_title or "",
            note.article_url or "",
            note.excerpt,
            note.personal_note,
            format_timestamp(note.created_at),
        ]
        if not single_blog:
            row.insert(0, blog_name_for(blog_names, note.blog_id))
        writer.writerow(row)

    return output.getvalue()[:-1]


def format_notes(
    notes: Sequence[Note],
    blog_names: Mapping[int, str],
    export_format: Union[ExportFormat, str],
    blog_id: Optional[int] = None,
) -> str:
    """Render notes in the requested format.

    Raises:
        ValidationError: If export_format is not markdown, json or csv
    """
    export_format = parse_format(export_format)

    if export_format is ExportFormat.MARKDOWN:
        return format_markdown(notes, blog_names, blog_id)
    if export_format is ExportFormat.JSON:
        return format_json(notes, blog_names)
    return format_csv(notes, blog_names, blog_id)


def parse_format(value: Union[ExportFormat, str]) -> ExportFormat:
    if isinstance(value, ExportFormat):
        return value
    try:
        return ExportFormat((value or "").lower())
    except ValueError:
        raise ValidationError(
            f"Invalid export format '{value}', expected markdown, json or csv"
        ) from None


def suggest_filename(blog_name: Optional[str], export_format: Union[ExportFormat, str]) -> str:
    """``<blog-slug>-notes.<ext>``, or ``my-notes.<ext>`` without a blog."""
    slug = re.sub(r"[^a-z0-9]+", "-", (blog_name or "").lower()).strip("-") or "my"
    return f"{slug}-notes.{parse_format(export_format).extension}"


def build_export(
    notes: Sequence[Note],
    blog_names: Mapping[int, str],
    export_format: Union[ExportFormat, str],
    blog_id: Optional[int] = None,
) -> ExportResult:
    export_format = parse_format(export_format)
    blog_name = blog_name_for(blog_names, blog_id) if blog_id is not None else None

    return ExportResult(
        content=format_notes(notes, blog_names, export_format, blog_id),
        filename=suggest_filename(blog_name, export_format),
        mime_type=export_format.mime_type,
    )
