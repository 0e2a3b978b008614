"""Unit tests for filtering, searching and sorting notes."""

import copy

import pytest

from blog_notes.errors import ValidationError
from blog_notes.models.schemas import NoteFilter, SortOrder
from blog_notes.services.note_view import view
from tests.utils import make_note


@pytest.fixture
def notes():
    return [
        make_note(1, excerpt="Attention is all you need", personal_note="classic", article_title="Transformers", minutes=10),
        make_note(2, excerpt="Scaling laws", personal_note="Compute matters", minutes=30),
        make_note(3, excerpt="RLHF overview", personal_note="read later", article_title="Alignment", minutes=20),
        make_note(4, excerpt="Tokenizers", personal_note="BPE details", article_title="", minutes=0),
    ]


def ids(notes):
    return [note.id for note in notes]


class TestFilter:
    """Tests for the article-presence filter."""

    def test_all_is_identity(self, notes):
        """Test that 'all' keeps every note."""
        assert sorted(ids(view(notes, NoteFilter.ALL))) == [1, 2, 3, 4]

    def test_with_article(self, notes):
        """Test that only notes with a non-empty title are kept."""
        assert sorted(ids(view(notes, "with-article"))) == [1, 3]

    def test_without_article(self, notes):
        """Test the complement of with-article, empty titles included."""
        assert sorted(ids(view(notes, "without-article"))) == [2, 4]

    def test_invalid_filter(self, notes):
        """Test unknown filter values are rejected."""
        with pytest.raises(ValidationError):
            view(notes, "some-article")


class TestSearch:
    """Tests for free-text search."""

    def test_empty_query_matches_all(self, notes):
        """Test an empty query matches everything."""
        assert len(view(notes, query="")) == 4

    def test_matches_excerpt_case_insensitive(self, notes):
        """Test searching the excerpt ignores case."""
        assert ids(view(notes, query="ATTENTION")) == [1]

    def test_matches_personal_note(self, notes):
        """Test searching the personal note."""
        assert ids(view(notes, query="compute")) == [2]

    def test_matches_article_title(self, notes):
        """Test searching the article title."""
        assert ids(view(notes, query="align")) == [3]

    def test_filter_and_search_combine(self, notes):
        """Test filter and search are both applied."""
        assert ids(view(notes, "without-article", query="e")) == [2, 4]
        assert ids(view(notes, "with-article", query="scaling")) == []


class TestSort:
    """Tests for sort orders."""

    def test_newest(self, notes):
        """Test newest first."""
        assert ids(view(notes, sort=SortOrder.NEWEST)) == [2, 3, 1, 4]

    def test_oldest(self, notes):
        """Test oldest first."""
        assert ids(view(notes, sort="oldest")) == [4, 1, 3, 2]

    def test_article_title_order(self):
        """Test untitled notes sort first, then lexical by title."""
        notes = [
            make_note(1, article_title="Zed"),
            make_note(2, article_title=""),
            make_note(3, article_title="Apple"),
        ]

        result = view(notes, sort="article")

        assert [n.article_title for n in result] == ["", "Apple", "Zed"]

    def test_none_title_sorts_as_empty(self):
        """Test a missing title sorts like an empty one."""
        notes = [make_note(1, article_title="B"), make_note(2, article_title=None)]

        assert ids(view(notes, sort="article")) == [2, 1]

    @pytest.mark.parametrize("sort", ["newest", "oldest", "article"])
    def test_stable_for_equal_keys(self, sort):
        """Test equal keys keep their input order in every sort."""
        notes = [make_note(i, article_title="Same") for i in (5, 3, 9, 1)]

        assert ids(view(notes, sort=sort)) == [5, 3, 9, 1]

    def test_invalid_sort(self, notes):
        """Test unknown sort values are rejected."""
        with pytest.raises(ValidationError):
            view(notes, sort="random")


class TestPurity:
    """Tests that view() has no side effects."""

    def test_does_not_mutate_input(self, notes):
        """Test the input list and notes are untouched."""
        before = copy.deepcopy(notes)

        view(notes, "with-article", query="a", sort="article")

        assert notes == before

    def test_returns_new_list(self, notes):
        """Test the identity filter still returns a fresh list."""
        assert view(notes) is not notes

    def test_repeatable(self, notes):
        """Test identical arguments give identical output."""
        first = view(notes, "all", "e", "oldest")
        second = view(notes, "all", "e", "oldest")

        assert first == second
