from .base import DocumentParser
from .marker_parser import MarkerParser
from .models import Book, Chapter, Document, Paragraph

__all__ = [
    "Book",
    "Chapter",
    "Document",
    "DocumentParser",
    "MarkerParser",
    "Paragraph",
]
