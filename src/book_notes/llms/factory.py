# src/book_notes/llms/factory.py

from book_notes.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient
from .config import OLLAMA_BASE_URL, LLMConfig


def create_llm_client(
    config: LLMConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> LLMClient:
    """Create an LLM client from config.

    Args:
        config: LLM configuration specifying provider, model, etc.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        Configured LLMClient implementation.

    Raises:
        ValueError: If provider is unknown.

    Example:
        >>> config = LLMConfig(provider="ollama", model="llama3:latest")
        >>> client = create_llm_client(config)
        >>> response = await client.complete(messages=[...])
    """
    if config.provider == "openai":
        from .openai import OpenAILLMClient

        return OpenAILLMClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            metrics_hook=metrics_hook,
        )

    if config.provider == "ollama":
        from .openai import OpenAILLMClient

        # Ollama ignores the key but the SDK insists on one
        return OpenAILLMClient(
            api_key=config.api_key or "ollama",
            model=config.model,
            base_url=config.base_url or OLLAMA_BASE_URL,
            timeout=config.timeout,
            provider="ollama",
            metrics_hook=metrics_hook,
        )

    if config.provider == "anthropic":
        from .anthropic import AnthropicLLMClient

        return AnthropicLLMClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            metrics_hook=metrics_hook,
        )

    raise ValueError(f"Unknown LLM provider: {config.provider}")
