from .config import SummarizationConfig
from .context import RollingContext
from .engine import SummarizationEngine
from .models import BookSummary, ChapterSummary, Notes
from .sink import FileOutputSink, MemoryOutputSink, OutputSink

__all__ = [
    "BookSummary",
    "ChapterSummary",
    "FileOutputSink",
    "MemoryOutputSink",
    "Notes",
    "OutputSink",
    "RollingContext",
    "SummarizationConfig",
    "SummarizationEngine",
]
