# Errors
from .errors import (
    BookNotesError,
    GenerationError,
    ModelError,
    ParseError,
    PromptError,
    ResponseFormatError,
    StorageError,
    SummarizationCancelled,
    TransportError,
)

# LLMs
from .llms import LLMConfig, LLMStructuredGenerator, StructuredGenerator

# Observability
from .observability import MetricsHook, NoOpMetricsHook

# Parsers
from .parsers import Book, Chapter, Document, DocumentParser, MarkerParser, Paragraph

# Pipeline
from .config import RunConfig
from .pipeline import summarize_file

# Prompts
from .prompts import Prompt, PromptsLibrary

# Retry
from .retry import RetryConfig, RetryPolicy, with_retry

# Summarization
from .summarization import (
    BookSummary,
    ChapterSummary,
    FileOutputSink,
    MemoryOutputSink,
    Notes,
    OutputSink,
    SummarizationConfig,
    SummarizationEngine,
)

__all__ = [
    # Errors
    "BookNotesError",
    "GenerationError",
    "ModelError",
    "ParseError",
    "PromptError",
    "ResponseFormatError",
    "StorageError",
    "SummarizationCancelled",
    "TransportError",
    # LLMs
    "LLMConfig",
    "LLMStructuredGenerator",
    "StructuredGenerator",
    # Observability
    "MetricsHook",
    "NoOpMetricsHook",
    # Parsers
    "Book",
    "Chapter",
    "Document",
    "DocumentParser",
    "MarkerParser",
    "Paragraph",
    # Pipeline
    "RunConfig",
    "summarize_file",
    # Prompts
    "Prompt",
    "PromptsLibrary",
    # Retry
    "RetryConfig",
    "RetryPolicy",
    "with_retry",
    # Summarization
    "BookSummary",
    "ChapterSummary",
    "FileOutputSink",
    "MemoryOutputSink",
    "Notes",
    "OutputSink",
    "SummarizationConfig",
    "SummarizationEngine",
]
