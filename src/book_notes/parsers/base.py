# src/book_notes/parsers/base.py

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO

from book_notes.errors import StorageError

from .models import Document

logger = logging.getLogger(__name__)


class DocumentParser(ABC):
    @abstractmethod
    def parse(self, source: TextIO) -> Document:
        """
        Parse a document and return its book/chapter/paragraph tree.

        Requirements:
        - Deterministic output for same input
        - Order of every sequence is file order
        - Structural violations raise ParseError, never crash
        """
        raise NotImplementedError

    def parse_file(self, path: str | Path) -> Document:
        """Parse a UTF-8 file. I/O and decoding failures become StorageError."""
        path = Path(path)
        logger.info("Parsing %s", path)
        try:
            with open(path, encoding="utf-8") as f:
                return self.parse(f)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
