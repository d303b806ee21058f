# src/book_notes/summarization/sink.py

import logging
import os
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Protocol

from book_notes.errors import StorageError

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = "\n\n"


class OutputSink(Protocol):
    """Durable, append-only destination for output fragments."""

    def write(self, fragment: str) -> None: ...


class MemoryOutputSink:
    """Keeps fragments in order. Useful for tests and in-process callers."""

    def __init__(self) -> None:
        self.fragments: list[str] = []

    def write(self, fragment: str) -> None:
        self.fragments.append(fragment)


class FileOutputSink:
    """
    Writes fragments to a UTF-8 text file, one blank line after each.

    - Opening replaces any previous artifact at the same path
    - Every write is fsync'd before returning
    - The file is always a valid prefix of the final artifact: a write that
      fails is cut back off the file and the sink stops accepting writes
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file: BinaryIO | None = None
        self._size = 0
        self.fragments_written = 0

    def open(self) -> "FileOutputSink":
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Unbuffered, so nothing is left behind to flush after a failure
            self._file = open(self.path, "wb", buffering=0)
        except OSError as e:
            raise StorageError(f"Cannot create {self.path}: {e}") from e
        self._size = 0
        logger.info("Writing notes to %s", self.path)
        return self

    def write(self, fragment: str) -> None:
        if self._file is None:
            raise StorageError(f"{self.path} is not open for writing")
        data = (fragment + FRAGMENT_SEPARATOR).encode("utf-8")
        try:
            view = memoryview(data)
            while view:
                view = view[self._file.write(view) :]
            os.fsync(self._file.fileno())
        except OSError as e:
            self._abandon()
            raise StorageError(f"Cannot write to {self.path}: {e}") from e
        self._size += len(data)
        self.fragments_written += 1

    def close(self) -> None:
        if self._file is None:
            return
        file, self._file = self._file, None
        try:
            file.close()
        except OSError as e:
            raise StorageError(f"Cannot close {self.path}: {e}") from e
        logger.debug("Closed %s after %d fragments", self.path, self.fragments_written)

    def _abandon(self) -> None:
        # Cut the file back to the last complete fragment and stop writing.
        file, self._file = self._file, None
        try:
            file.truncate(self._size)
            os.fsync(file.fileno())
        except OSError:
            logger.error(
                "Cannot truncate %s back to %d bytes",
                self.path,
                self._size,
                exc_info=True,
            )
        try:
            file.close()
        except OSError:
            logger.error("Cannot close %s", self.path, exc_info=True)

    def __enter__(self) -> "FileOutputSink":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.close()
        except StorageError:
            if exc_type is None:
                raise
            # Keep the error that ended the run.
            logger.error(
                "Ignoring close failure while handling %s",
                exc_type.__name__,
                exc_info=True,
            )
