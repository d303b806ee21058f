# src/book_notes/pipeline.py

"""One run: parse the document, then summarize it into a fresh artifact."""

import asyncio
import logging
from time import monotonic

from .config import RunConfig
from .llms.factory import create_llm_client
from .llms.structured import LLMStructuredGenerator, StructuredGenerator
from .observability.base import MetricsHook, NoOpMetricsHook
from .parsers.base import DocumentParser
from .parsers.marker_parser import MarkerParser
from .prompts.prompts_library import PromptsLibrary
from .retry import RetryPolicy
from .summarization.engine import SummarizationEngine
from .summarization.models import BookSummary
from .summarization.sink import FileOutputSink

logger = logging.getLogger(__name__)


async def summarize_file(
    config: RunConfig,
    *,
    generator: StructuredGenerator | None = None,
    parser: DocumentParser | None = None,
    prompts: PromptsLibrary | None = None,
    cancel_event: asyncio.Event | None = None,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> list[BookSummary]:
    """Parse config.input_path and write layered notes to the output path.

    Parsing completes before the output file is touched, so a ParseError
    leaves any previous artifact in place.

    Raises:
        StorageError: Input unreadable or output unwritable.
        ParseError: Input violates the marker grammar.
        ModelError: A generation call failed after all retries.
        SummarizationCancelled: cancel_event was set mid-run.
    """
    start = monotonic()

    parser = parser or MarkerParser(metrics_hook=metrics_hook)
    document = parser.parse_file(config.input_path)

    if generator is None:
        client = create_llm_client(config.llm, metrics_hook=metrics_hook)
        generator = LLMStructuredGenerator(
            client,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
        )

    output_path = config.resolve_output_path()
    with FileOutputSink(output_path) as sink:
        engine = SummarizationEngine(
            generator,
            sink,
            config=config.summarization,
            retry_policy=RetryPolicy.from_config(config.retry, metrics_hook),
            prompts=prompts,
            cancel_event=cancel_event,
            metrics_hook=metrics_hook,
        )
        results = await engine.summarize_document(document)

    logger.info("Wrote %s in %.1fs", output_path, monotonic() - start)
    return results
