# src/book_notes/observability/names.py

"""Standard metric names for book-notes observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
"""

# ============================================================================
# LLM Metrics
# ============================================================================

# Duration
LLM_COMPLETION_DURATION = "llm_completion_duration"

# Counters
LLM_REQUESTS_TOTAL = "llm_requests_total"
LLM_ERRORS_TOTAL = "llm_errors_total"

# Counters (token usage - monotonic over time for cost/rate tracking)
LLM_TOKENS_PROMPT = "llm_tokens_prompt"
LLM_TOKENS_COMPLETION = "llm_tokens_completion"
LLM_TOKENS_TOTAL = "llm_tokens_total"


# ============================================================================
# Retry Metrics
# ============================================================================

# Counters
GENERATION_ATTEMPTS_TOTAL = "generation_attempts_total"
GENERATION_FAILURES_TOTAL = "generation_failures_total"
GENERATION_EXHAUSTED_TOTAL = "generation_exhausted_total"


# ============================================================================
# Parser Metrics
# ============================================================================

# Duration
PARSE_DURATION = "parse_duration"

# Gauges
PARSE_BOOKS = "parse_books"
PARSE_CHAPTERS = "parse_chapters"
PARSE_PARAGRAPHS = "parse_paragraphs"


# ============================================================================
# Summarization Metrics
# ============================================================================

# Duration (labelled with level=paragraph|chapter|book)
SUMMARY_DURATION = "summary_duration"

# Counters
SUMMARIES_TOTAL = "summaries_total"
FRAGMENTS_WRITTEN_TOTAL = "fragments_written_total"
