# src/book_notes/llms/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai", "anthropic", "ollama"]

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "ollama": "llama3:latest",
}

OLLAMA_BASE_URL = "http://localhost:11434/v1"


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for LLM clients.

    Immutable. Explicit. No magic defaults from environment.
    """

    provider: Provider
    model: str
    api_key: str | None = None  # Falls back to provider's env var
    base_url: str | None = None
    timeout: float = 120.0
    temperature: float = 0.0
    max_tokens: int | None = None
