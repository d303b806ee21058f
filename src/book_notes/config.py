# src/book_notes/config.py

from dataclasses import dataclass, field
from pathlib import Path

from .llms.config import LLMConfig
from .retry import RetryConfig
from .summarization.config import SummarizationConfig

OUTPUT_SUFFIX = ".notes.txt"


@dataclass(frozen=True)
class RunConfig:
    """Static configuration for one run over one document.

    Immutable. Explicit. No magic defaults from environment.
    """

    input_path: Path
    llm: LLMConfig
    output_path: Path | None = None
    output_dir: Path | None = None  # Ignored when output_path is set
    retry: RetryConfig = field(default_factory=RetryConfig)
    summarization: SummarizationConfig = field(default_factory=SummarizationConfig)

    def resolve_output_path(self) -> Path:
        if self.output_path is not None:
            return self.output_path
        directory = self.output_dir or self.input_path.parent
        return directory / f"{self.input_path.stem}{OUTPUT_SUFFIX}"
