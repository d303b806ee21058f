# src/book_notes/summarization/models.py

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict


class Notes(BaseModel):
    """The one record every generation call must return.

    Shared by paragraph, chapter and book summaries.
    """

    model_config = ConfigDict(extra="forbid")

    summary: str


@dataclass(frozen=True)
class ChapterSummary:
    title: str
    summary: str


@dataclass(frozen=True)
class BookSummary:
    title: str
    chapter_summaries: list[ChapterSummary] = field(default_factory=list)
    summary: str | None = None  # Book-level synthesis, rich pipeline only
