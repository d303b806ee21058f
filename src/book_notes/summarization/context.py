# src/book_notes/summarization/context.py

from collections import deque

SEPARATOR = "\n\n"

DEFAULT_CONTEXT_CHAR_BUDGET = 12_000


class RollingContext:
    """In-order summaries of earlier siblings, joined by a blank line.

    With a budget, the oldest summaries are dropped whole until the joined
    text fits. The most recent summary is always kept, even when it alone
    is over budget.
    """

    def __init__(self, max_chars: int | None = DEFAULT_CONTEXT_CHAR_BUDGET) -> None:
        if max_chars is not None and max_chars <= 0:
            raise ValueError("max_chars must be > 0")
        self._max_chars = max_chars
        self._summaries: deque[str] = deque()
        self._length = 0
        self.dropped = 0

    def append(self, summary: str) -> None:
        if self._summaries:
            self._length += len(SEPARATOR)
        self._summaries.append(summary)
        self._length += len(summary)

        if self._max_chars is None:
            return
        while len(self._summaries) > 1 and self._length > self._max_chars:
            oldest = self._summaries.popleft()
            self._length -= len(oldest) + len(SEPARATOR)
            self.dropped += 1

    @property
    def text(self) -> str:
        return SEPARATOR.join(self._summaries)

    def __len__(self) -> int:
        return len(self._summaries)
