# src/book_notes/summarization/config.py

from dataclasses import dataclass
from typing import Literal

from .context import DEFAULT_CONTEXT_CHAR_BUDGET

Pipeline = Literal["terse", "rich"]

DEFAULT_CHAPTER_WORDS: dict[str, int] = {
    "terse": 300,
    "rich": 1000,
}


@dataclass(frozen=True)
class SummarizationConfig:
    """How the traversal summarizes and what it writes.

    terse: book title, then (chapter title, chapter summary) per chapter.
    rich: terse output plus a book-level synthesis and the concatenation
    of all chapter summaries.
    """

    pipeline: Pipeline = "terse"
    chapter_word_target: int | None = None  # None: per-pipeline default
    context_char_budget: int | None = DEFAULT_CONTEXT_CHAR_BUDGET  # None: unbounded
    include_paragraph_summaries: bool = False
    prompt_version: str = "1.0"

    @property
    def chapter_words(self) -> int:
        if self.chapter_word_target is not None:
            return self.chapter_word_target
        return DEFAULT_CHAPTER_WORDS[self.pipeline]
