# src/book_notes/parsers/marker_parser.py

import logging
from collections.abc import Iterator
from time import monotonic
from typing import TextIO

from book_notes.errors import ParseError
from book_notes.observability import names
from book_notes.observability.base import MetricsHook, NoOpMetricsHook

from .base import DocumentParser
from .models import Book, Chapter, Document, Paragraph

logger = logging.getLogger(__name__)


class MarkerParser(DocumentParser):
    """
    Line-oriented parser for marker-structured plain text.

    - A line starting with BOOK opens a book, the next line is its title
    - A line starting with CHAPTER opens a chapter, the next line is its title
    - Any other line at least min_paragraph_length long is a paragraph
    - Everything else (blank lines, page artifacts, short headers) is skipped
    """

    BOOK_MARKER = "BOOK"
    CHAPTER_MARKER = "CHAPTER"
    MIN_PARAGRAPH_LENGTH = 70

    def __init__(
        self,
        min_paragraph_length: int = MIN_PARAGRAPH_LENGTH,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        if min_paragraph_length <= 0:
            raise ValueError("min_paragraph_length must be > 0")
        self._min_paragraph_length = min_paragraph_length
        self.metrics_hook = metrics_hook

    def parse(self, source: TextIO) -> Document:
        start = monotonic()
        document = Document()
        book: Book | None = None
        chapter: Chapter | None = None

        lines = self._numbered_lines(source)
        for line_number, line in lines:
            if line.startswith(self.BOOK_MARKER):
                title = self._read_title(lines, line_number, self.BOOK_MARKER)
                book = Book(title=title)
                document.books.append(book)
                chapter = None
                logger.debug("Line %d: book %r", line_number, book.title)

            elif line.startswith(self.CHAPTER_MARKER):
                if book is None:
                    raise ParseError("CHAPTER marker before any BOOK", line_number)
                chapter = Chapter(
                    title=self._read_title(lines, line_number, self.CHAPTER_MARKER)
                )
                book.chapters.append(chapter)
                logger.debug("Line %d: chapter %r", line_number, chapter.title)

            elif len(line) >= self._min_paragraph_length:
                if book is None:
                    raise ParseError("paragraph before any BOOK", line_number)
                if chapter is None:
                    raise ParseError(
                        f"paragraph before any CHAPTER in book {book.title!r}",
                        line_number,
                    )
                chapter.paragraphs.append(Paragraph(content=line.strip()))

        elapsed_ms = 1000 * (monotonic() - start)
        self._record(document, elapsed_ms)
        return document

    def _numbered_lines(self, source: TextIO) -> Iterator[tuple[int, str]]:
        # Raw line without its terminator; surrounding spaces still count
        # toward the paragraph threshold.
        for line_number, raw in enumerate(source, start=1):
            yield line_number, raw.rstrip("\r\n")

    def _read_title(
        self, lines: Iterator[tuple[int, str]], line_number: int, marker: str
    ) -> str:
        try:
            _, title = next(lines)
        except StopIteration:
            raise ParseError(
                f"{marker} marker without a title line", line_number
            ) from None
        return title.strip()

    def _record(self, document: Document, elapsed_ms: float) -> None:
        chapters = [c for b in document.books for c in b.chapters]
        paragraphs = sum(len(c.paragraphs) for c in chapters)

        self.metrics_hook.record_latency(names.PARSE_DURATION, elapsed_ms)
        self.metrics_hook.record_gauge(names.PARSE_BOOKS, len(document.books))
        self.metrics_hook.record_gauge(names.PARSE_CHAPTERS, len(chapters))
        self.metrics_hook.record_gauge(names.PARSE_PARAGRAPHS, paragraphs)

        logger.info(
            "Parsed document: books=%d, chapters=%d, paragraphs=%d",
            len(document.books),
            len(chapters),
            paragraphs,
        )
