import pytest

from book_notes.summarization.context import RollingContext


class TestRollingContext:
    def test_empty_context_is_empty_string(self) -> None:
        assert RollingContext().text == ""

    def test_summaries_joined_by_blank_line_in_order(self) -> None:
        context = RollingContext()
        for summary in ["one", "two", "three"]:
            context.append(summary)

        assert context.text == "one\n\ntwo\n\nthree"
        assert len(context) == 3

    def test_oldest_summaries_dropped_when_over_budget(self) -> None:
        context = RollingContext(max_chars=12)
        for summary in ["aaaa", "bbbb", "cccc"]:
            context.append(summary)

        # "aaaa\n\nbbbb\n\ncccc" is 16 chars; dropping "aaaa" leaves 10
        assert context.text == "bbbb\n\ncccc"
        assert context.dropped == 1

    def test_budget_counts_separators(self) -> None:
        context = RollingContext(max_chars=10)
        context.append("aaaa")
        context.append("bbbb")

        assert context.text == "aaaa\n\nbbbb"
        assert context.dropped == 0

    def test_latest_summary_kept_even_if_over_budget(self) -> None:
        context = RollingContext(max_chars=5)
        context.append("short")
        context.append("much longer than five")

        assert context.text == "much longer than five"

    def test_unbounded(self) -> None:
        context = RollingContext(max_chars=None)
        for i in range(1000):
            context.append("x" * 100)

        assert len(context) == 1000
        assert context.dropped == 0

    def test_invalid_budget(self) -> None:
        with pytest.raises(ValueError, match="max_chars must be > 0"):
            RollingContext(max_chars=0)
