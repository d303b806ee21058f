# src/book_notes/parsers/models.py

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Paragraph:
    content: str


@dataclass(frozen=True)
class Chapter:
    title: str
    paragraphs: list[Paragraph] = field(default_factory=list)


@dataclass(frozen=True)
class Book:
    title: str
    chapters: list[Chapter] = field(default_factory=list)


@dataclass(frozen=True)
class Document:
    books: list[Book] = field(default_factory=list)
