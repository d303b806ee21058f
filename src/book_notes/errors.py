# src/book_notes/errors.py

"""Error kinds raised by book-notes.

Every error propagates up through the traversal and ends the run.
Only GenerationError subclasses are ever retried.
"""


class BookNotesError(Exception):
    """Base class for all book-notes errors."""


class StorageError(BookNotesError):
    """Opening, reading or writing an input/output file failed."""


class ParseError(BookNotesError):
    """The input document violates the marker grammar."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class PromptError(BookNotesError):
    """A prompt template is missing or cannot be loaded."""


class GenerationError(BookNotesError):
    """A single generation attempt failed. Retryable."""


class TransportError(GenerationError):
    """The provider could not be reached or returned an API error."""


class ResponseFormatError(GenerationError):
    """The provider answered, but not with the expected record."""


class ModelError(BookNotesError):
    """Generation failed after the retry budget was exhausted."""

    def __init__(self, message: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message)


class SummarizationCancelled(BookNotesError):
    """The run was cancelled between two units of work."""
