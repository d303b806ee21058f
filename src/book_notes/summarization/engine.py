# src/book_notes/summarization/engine.py

"""Depth-first, strictly sequential summarization of a parsed document.

Each generation prompt embeds the finished summaries of the earlier
siblings at the same level, so no unit can start before the one before it
has returned. Context never crosses a book boundary.
"""

import asyncio
import logging
from time import monotonic

from book_notes.errors import SummarizationCancelled
from book_notes.llms.structured import StructuredGenerator
from book_notes.observability import names
from book_notes.observability.base import MetricsHook, NoOpMetricsHook
from book_notes.parsers.models import Book, Chapter, Document, Paragraph
from book_notes.prompts.prompts_library import PromptsLibrary
from book_notes.retry import RetryPolicy

from .config import SummarizationConfig
from .context import SEPARATOR, RollingContext
from .models import BookSummary, ChapterSummary, Notes
from .sink import OutputSink

logger = logging.getLogger(__name__)


class SummarizationEngine:
    def __init__(
        self,
        generator: StructuredGenerator,
        sink: OutputSink,
        *,
        config: SummarizationConfig = SummarizationConfig(),
        retry_policy: RetryPolicy | None = None,
        prompts: PromptsLibrary | None = None,
        cancel_event: asyncio.Event | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._generator = generator
        self._sink = sink
        self._config = config
        self._retry = retry_policy or RetryPolicy(metrics_hook=metrics_hook)
        self._cancel_event = cancel_event
        self.metrics_hook = metrics_hook

        prompts = prompts or PromptsLibrary()
        version = config.prompt_version
        self._paragraph_prompt = prompts.get("paragraph_summary", version)
        self._chapter_prompt = prompts.get("chapter_summary", version)
        self._book_prompt = prompts.get("book_summary", version)

    async def summarize_document(self, document: Document) -> list[BookSummary]:
        logger.info(
            "Summarizing %d books (pipeline=%s)",
            len(document.books),
            self._config.pipeline,
        )
        results = []
        for book in document.books:
            self._check_cancelled()
            results.append(await self.summarize_book(book))
        return results

    async def summarize_book(self, book: Book) -> BookSummary:
        self._write(book.title)

        context = RollingContext(self._config.context_char_budget)
        chapter_summaries: list[ChapterSummary] = []
        for chapter in book.chapters:
            self._check_cancelled()
            summary = await self.summarize_chapter(context.text, chapter)
            context.append(summary)
            chapter_summaries.append(ChapterSummary(title=chapter.title, summary=summary))

        if context.dropped:
            logger.debug(
                "Chapter context for %r dropped %d oldest summaries",
                book.title,
                context.dropped,
            )

        book_summary = None
        if self._config.pipeline == "rich" and chapter_summaries:
            self._check_cancelled()
            all_chapters = SEPARATOR.join(c.summary for c in chapter_summaries)
            prompt = self._book_prompt.render(
                title=book.title, chapter_summaries=all_chapters
            )
            book_summary = await self._generate(prompt, level="book")
            self._write(book_summary)
            self._write(all_chapters)

        logger.info("Summarized book %r (%d chapters)", book.title, len(book.chapters))
        return BookSummary(
            title=book.title,
            chapter_summaries=chapter_summaries,
            summary=book_summary,
        )

    async def summarize_chapter(self, prior_context: str, chapter: Chapter) -> str:
        context = RollingContext(self._config.context_char_budget)
        paragraph_summaries: list[str] = []
        for paragraph in chapter.paragraphs:
            self._check_cancelled()
            summary = await self.summarize_paragraph(context.text, paragraph)
            context.append(summary)
            paragraph_summaries.append(summary)

        prompt = self._chapter_prompt.render(
            previous_summaries=prior_context,
            paragraph_summaries=SEPARATOR.join(paragraph_summaries),
            target_words=self._config.chapter_words,
        )
        summary = await self._generate(prompt, level="chapter")

        self._write(chapter.title)
        self._write(summary)
        if self._config.include_paragraph_summaries:
            for paragraph_summary in paragraph_summaries:
                self._write(paragraph_summary)

        logger.info(
            "Summarized chapter %r (%d paragraphs)",
            chapter.title,
            len(chapter.paragraphs),
        )
        return summary

    async def summarize_paragraph(
        self, prior_context: str, paragraph: Paragraph
    ) -> str:
        prompt = self._paragraph_prompt.render(
            previous_summaries=prior_context,
            paragraph=paragraph.content,
        )
        return await self._generate(prompt, level="paragraph")

    async def _generate(self, prompt: str, *, level: str) -> str:
        start = monotonic()
        logger.debug("Generating %s summary: prompt=%d chars", level, len(prompt))

        notes = await self._retry.run(
            lambda: self._generator.generate(prompt, Notes),
            description=f"{level} summary",
        )

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(
            names.SUMMARY_DURATION, elapsed_ms, labels={"level": level}
        )
        self.metrics_hook.increment(names.SUMMARIES_TOTAL, labels={"level": level})
        return notes.summary

    def _write(self, fragment: str) -> None:
        self._sink.write(fragment)
        self.metrics_hook.increment(names.FRAGMENTS_WRITTEN_TOTAL)

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            logger.warning("Cancellation requested, stopping before next unit")
            raise SummarizationCancelled("summarization cancelled")
