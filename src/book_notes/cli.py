# src/book_notes/cli.py

import argparse
import asyncio
import logging
import logging.config
from pathlib import Path

import yaml

from .config import RunConfig
from .errors import BookNotesError, ModelError
from .llms.config import DEFAULT_MODELS, LLMConfig
from .observability import names
from .observability.base import CountingMetricsHook
from .pipeline import summarize_file
from .retry import RetryConfig
from .summarization.config import SummarizationConfig
from .summarization.context import DEFAULT_CONTEXT_CHAR_BUDGET

logger = logging.getLogger("book_notes")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="book-notes",
        description="Summarize a BOOK/CHAPTER structured text into layered notes.",
    )
    parser.add_argument("input", type=Path, help="Plain-text document to summarize")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("-o", "--output", type=Path, help="Output file path")
    output.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for <input stem>.notes.txt (default: next to the input)",
    )

    llm = parser.add_argument_group("model")
    llm.add_argument(
        "--provider",
        choices=sorted(DEFAULT_MODELS),
        default="ollama",
        help="Text-generation backend (default: ollama)",
    )
    llm.add_argument("--model", help="Model identifier (default depends on provider)")
    llm.add_argument("--base-url", help="Override the provider endpoint")
    llm.add_argument("--api-key", help="API key (default: provider's env var)")
    llm.add_argument(
        "--timeout", type=float, default=120.0, help="Per-call timeout in seconds"
    )
    llm.add_argument(
        "--max-attempts",
        type=int,
        default=RetryConfig.max_attempts,
        help="Attempts per generation call before giving up",
    )

    summary = parser.add_argument_group("summaries")
    summary.add_argument(
        "--pipeline",
        choices=["terse", "rich"],
        default="terse",
        help="rich adds a book-level synthesis (default: terse)",
    )
    summary.add_argument(
        "--chapter-words",
        type=int,
        help="Target chapter summary length in words (default: 300 terse, 1000 rich)",
    )
    summary.add_argument(
        "--context-chars",
        type=int,
        default=DEFAULT_CONTEXT_CHAR_BUDGET,
        help="Character budget for rolling sibling context, 0 for unbounded",
    )
    summary.add_argument(
        "--paragraph-notes",
        action="store_true",
        help="Also write each paragraph summary after its chapter summary",
    )

    logs = parser.add_argument_group("logging")
    logs.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    logs.add_argument(
        "--log-config",
        type=Path,
        help="YAML file for logging.config.dictConfig (overrides --log-level)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        input_path=args.input,
        output_path=args.output,
        output_dir=args.output_dir,
        llm=LLMConfig(
            provider=args.provider,
            model=args.model or DEFAULT_MODELS[args.provider],
            api_key=args.api_key,
            base_url=args.base_url,
            timeout=args.timeout,
        ),
        retry=RetryConfig(max_attempts=args.max_attempts),
        summarization=SummarizationConfig(
            pipeline=args.pipeline,
            chapter_word_target=args.chapter_words,
            context_char_budget=args.context_chars or None,
            include_paragraph_summaries=args.paragraph_notes,
        ),
    )


def configure_logging(level: str, config_file: Path | None = None) -> None:
    if config_file is None:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        return
    with open(config_file, encoding="utf-8") as f:
        logging.config.dictConfig(yaml.safe_load(f))


def main(argv: list[str] | None = None) -> int:
    """
    Command-line entry point.

    Returns:
        Exit code (0 for success, 1 for a book-notes error, 130 on interrupt)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_attempts < 1:
        parser.error("--max-attempts must be >= 1")
    if args.context_chars < 0:
        parser.error("--context-chars must be >= 0")

    try:
        configure_logging(args.log_level, args.log_config)
    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        parser.error(f"cannot load --log-config {args.log_config}: {e}")
    config = config_from_args(args)
    metrics = CountingMetricsHook()

    try:
        asyncio.run(summarize_file(config, metrics_hook=metrics))
    except ModelError as e:
        logger.error("ModelError after %d attempts: %s", e.attempts, e)
        return 1
    except BookNotesError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except KeyboardInterrupt:
        logger.warning(
            "Interrupted; %s holds the notes written so far",
            config.resolve_output_path(),
        )
        return 130
    finally:
        _report(metrics)

    return 0


def _report(metrics: CountingMetricsHook) -> None:
    logger.info(
        "Run totals: summaries=%d, generation attempts=%d, failed attempts=%d",
        metrics.counters[names.SUMMARIES_TOTAL],
        metrics.counters[names.GENERATION_ATTEMPTS_TOTAL],
        metrics.counters[names.GENERATION_FAILURES_TOTAL],
    )
