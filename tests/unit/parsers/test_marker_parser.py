import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from book_notes.errors import ParseError, StorageError
from book_notes.parsers.marker_parser import MarkerParser
from book_notes.parsers.models import Book, Chapter, Document, Paragraph


def _para(tag: str, length: int = 80) -> str:
    """A paragraph line of exactly `length` characters starting with `tag`."""
    return (tag + " " + "x" * length)[:length]


def _parse(text: str) -> Document:
    return MarkerParser().parse(io.StringIO(text))


SAMPLE = "\n".join(
    [
        "An Inquiry into the Nature and Causes",
        "",
        "BOOK I.",
        "Of the Causes of Improvement",
        "",
        "CHAPTER I.",
        "Of the Division of Labour",
        "",
        _para("p1.1.1"),
        "",
        _para("p1.1.2"),
        "   3   ",
        "CHAPTER II.",
        "Of the Principle which gives Occasion to the Division of Labour",
        _para("p1.2.1"),
        "",
        "BOOK II.",
        "  Of the Nature of Stock  ",
        "CHAPTER I.",
        "Of the Division of Stock",
        _para("p2.1.1"),
        _para("p2.1.2"),
        _para("p2.1.3"),
        "",
    ]
)


class TestStructure:
    def test_counts_at_every_level(self) -> None:
        document = _parse(SAMPLE)

        assert len(document.books) == 2
        assert [len(b.chapters) for b in document.books] == [2, 1]
        assert [
            [len(c.paragraphs) for c in b.chapters] for b in document.books
        ] == [[2, 1], [3]]

    def test_titles_come_from_the_next_line_trimmed(self) -> None:
        document = _parse(SAMPLE)

        assert [b.title for b in document.books] == [
            "Of the Causes of Improvement",
            "Of the Nature of Stock",
        ]
        assert [c.title for c in document.books[0].chapters] == [
            "Of the Division of Labour",
            "Of the Principle which gives Occasion to the Division of Labour",
        ]

    def test_paragraphs_are_in_file_order(self) -> None:
        document = _parse(SAMPLE)

        contents = [
            p.content[:6]
            for b in document.books
            for c in b.chapters
            for p in c.paragraphs
        ]
        assert contents == ["p1.1.1", "p1.1.2", "p1.2.1", "p2.1.1", "p2.1.2", "p2.1.3"]

    def test_paragraph_content_is_trimmed(self) -> None:
        line = "    " + "y" * 70 + "   "
        document = _parse(f"BOOK\nB\nCHAPTER\nC\n{line}\n")

        assert document.books[0].chapters[0].paragraphs == [Paragraph("y" * 70)]

    def test_short_lines_before_first_book_are_skipped(self) -> None:
        document = _parse("Title page\n\nPreface\nBOOK I\nB\n")

        assert document == Document(books=[Book(title="B")])

    def test_book_without_chapters(self) -> None:
        document = _parse("BOOK I\nFirst\nBOOK II\nSecond\n")

        assert [b.title for b in document.books] == ["First", "Second"]
        assert all(b.chapters == [] for b in document.books)

    def test_empty_input(self) -> None:
        assert _parse("") == Document()

    def test_markers_are_case_sensitive(self) -> None:
        # "Book" and "chapter" lines are short, so they are simply skipped
        document = _parse("BOOK\nB\nCHAPTER\nC\nBook two\nchapter two\n")

        assert len(document.books) == 1
        assert len(document.books[0].chapters) == 1

    def test_marker_prefix_is_enough(self) -> None:
        document = _parse("BOOKS AND MORE\nB\nCHAPTERS\nC\n")

        assert document.books[0].title == "B"
        assert document.books[0].chapters[0].title == "C"

    def test_long_marker_line_is_a_marker_not_a_paragraph(self) -> None:
        marker = "CHAPTER " + "z" * 80
        document = _parse(f"BOOK\nB\n{marker}\nTitle\n")

        assert document.books[0].chapters == [Chapter(title="Title")]

    def test_title_line_is_taken_verbatim_even_if_long(self) -> None:
        title = "t" * 90
        document = _parse(f"BOOK\n{title}\n")

        assert document.books[0].title == title

    def test_windows_line_endings(self) -> None:
        text = "BOOK I\r\nB\r\nCHAPTER I\r\nC\r\n" + "w" * 70 + "\r\n"
        document = _parse(text)

        assert document.books[0].title == "B"
        assert document.books[0].chapters[0].paragraphs == [Paragraph("w" * 70)]


class TestThreshold:
    def test_line_of_69_characters_is_not_a_paragraph(self) -> None:
        document = _parse("BOOK\nB\nCHAPTER\nC\n" + "a" * 69 + "\n")

        assert document.books[0].chapters[0].paragraphs == []

    def test_line_of_70_characters_is_a_paragraph(self) -> None:
        document = _parse("BOOK\nB\nCHAPTER\nC\n" + "a" * 70 + "\n")

        assert document.books[0].chapters[0].paragraphs == [Paragraph("a" * 70)]

    def test_last_line_without_newline_is_measured_the_same(self) -> None:
        document = _parse("BOOK\nB\nCHAPTER\nC\n" + "a" * 70)

        assert len(document.books[0].chapters[0].paragraphs) == 1

    def test_custom_threshold(self) -> None:
        parser = MarkerParser(min_paragraph_length=10)
        document = parser.parse(io.StringIO("BOOK\nB\nCHAPTER\nC\nten chars!\n"))

        assert document.books[0].chapters[0].paragraphs == [Paragraph("ten chars!")]

    def test_invalid_threshold_raises(self) -> None:
        with pytest.raises(ValueError, match="min_paragraph_length must be > 0"):
            MarkerParser(min_paragraph_length=0)


class TestParseErrors:
    def test_paragraph_before_any_book(self) -> None:
        with pytest.raises(ParseError, match="before any BOOK") as exc_info:
            _parse("Preface\n" + "a" * 75 + "\n")

        assert exc_info.value.line_number == 2

    def test_paragraph_before_any_chapter(self) -> None:
        with pytest.raises(ParseError, match="before any CHAPTER") as exc_info:
            _parse("BOOK I\nB\n" + "a" * 75 + "\n")

        assert exc_info.value.line_number == 3

    def test_paragraph_after_new_book_before_its_chapter(self) -> None:
        text = "BOOK I\nB1\nCHAPTER I\nC1\nBOOK II\nB2\n" + "a" * 75 + "\n"

        with pytest.raises(ParseError, match="in book 'B2'"):
            _parse(text)

    def test_chapter_before_any_book(self) -> None:
        with pytest.raises(ParseError, match="CHAPTER marker before any BOOK") as exc_info:
            _parse("\nCHAPTER I\nC\n")

        assert exc_info.value.line_number == 2

    def test_marker_on_last_line_without_title(self) -> None:
        with pytest.raises(ParseError, match="BOOK marker without a title line"):
            _parse("BOOK I\nB\nCHAPTER I\nC\nBOOK II")

    def test_error_message_carries_line_number(self) -> None:
        with pytest.raises(ParseError, match="^line 1: "):
            _parse("CHAPTER I\nC\n")


class TestDeterminism:
    def test_parsing_twice_gives_equal_trees(self) -> None:
        assert _parse(SAMPLE) == _parse(SAMPLE)

    def test_models_are_frozen(self) -> None:
        paragraph = Paragraph(content="text")

        with pytest.raises(AttributeError):
            paragraph.content = "modified"  # type: ignore


class TestParseFile:
    def test_parse_file(self, tmp_path: Path) -> None:
        path = tmp_path / "book.txt"
        path.write_text(SAMPLE, encoding="utf-8")

        assert MarkerParser().parse_file(path) == _parse(SAMPLE)

    def test_missing_file_raises_storage_error(self, tmp_path: Path) -> None:
        with pytest.raises(StorageError, match="Cannot read"):
            MarkerParser().parse_file(tmp_path / "missing.txt")

    def test_undecodable_file_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.txt"
        path.write_bytes("BOOK\nCaf\xe9\n".encode("latin-1"))

        with pytest.raises(StorageError):
            MarkerParser().parse_file(path)


def test_metrics_hook_receives_counts() -> None:
    metrics_hook = MagicMock()
    parser = MarkerParser(metrics_hook=metrics_hook)

    parser.parse(io.StringIO(SAMPLE))

    gauges = {c.args[0]: c.args[1] for c in metrics_hook.record_gauge.call_args_list}
    assert gauges == {"parse_books": 2, "parse_chapters": 3, "parse_paragraphs": 6}
    metrics_hook.record_latency.assert_called_once()
    assert metrics_hook.record_latency.call_args[0][0] == "parse_duration"
