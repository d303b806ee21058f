# src/book_notes/llms/openai.py

import logging
from time import monotonic
from typing import Any, Literal

from openai import NOT_GIVEN, AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from book_notes.errors import TransportError
from book_notes.observability import names
from book_notes.observability.base import MetricsHook, NoOpMetricsHook

from ._response_schema import schema_to_openai_response_format
from .base import LLMClient, LLMResponse, Message, Usage

logger = logging.getLogger(__name__)


class OpenAILLMClient(LLMClient):
    """OpenAI LLM client.

    Also serves any OpenAI-compatible endpoint (Ollama) through base_url.
    Stateless. One call, one attempt. No behavior.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        base_url: str | None = None,
        timeout: float = 120.0,
        provider: str = "openai",
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        # SDK retries are off: attempts are counted by the RetryPolicy.
        self._client = AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
        )
        self._model = model
        self._provider = provider
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized OpenAILLMClient with provider=%s, model=%s, timeout=%s",
            provider,
            model,
            timeout,
        )

    async def complete(
        self,
        *,
        messages: list[Message],
        response_schema: type[BaseModel] | None = None,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        start = monotonic()

        # Convert to provider format (internal only - never leaks)
        openai_messages = self._convert_messages(messages)
        response_format = (
            schema_to_openai_response_format(response_schema)
            if response_schema
            else None
        )

        logger.debug(
            "Calling %s: model=%s, messages=%d, schema=%s",
            self._provider,
            self._model,
            len(messages),
            response_schema.__name__ if response_schema else None,
        )

        labels = {"provider": self._provider, "model": self._model}
        try:
            raw = await self._client.chat.completions.create(
                model=self._model,
                messages=openai_messages,  # type: ignore[arg-type]
                temperature=temperature,
                response_format=response_format or NOT_GIVEN,  # type: ignore[arg-type]
                max_tokens=max_tokens if max_tokens else NOT_GIVEN,  # type: ignore[arg-type]
            )
        except OpenAIError as e:
            self.metrics_hook.increment(names.LLM_ERRORS_TOTAL, labels=labels)
            raise TransportError(f"{self._provider} request failed: {e}") from e

        elapsed_ms = 1000 * (monotonic() - start)

        # Normalize immediately - provider objects never escape
        response = self._normalize_response(raw, elapsed_ms)

        # Metrics
        self.metrics_hook.record_latency(names.LLM_COMPLETION_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.LLM_REQUESTS_TOTAL, labels=labels)
        self.metrics_hook.increment(
            names.LLM_TOKENS_PROMPT, response.usage.prompt_tokens
        )
        self.metrics_hook.increment(
            names.LLM_TOKENS_COMPLETION, response.usage.completion_tokens
        )
        self.metrics_hook.increment(names.LLM_TOKENS_TOTAL, response.usage.total_tokens)

        logger.info(
            "%s completion: finish=%s, tokens=%d, latency=%.0fms",
            self._provider,
            response.finish_reason,
            response.usage.total_tokens,
            elapsed_ms,
        )

        return response

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to OpenAI format.

        Internal only. Provider format never leaks outside.
        """
        return [{"role": m.role.value, "content": m.content} for m in messages]

    def _normalize_response(self, raw: Any, latency_ms: float) -> LLMResponse:
        """Normalize OpenAI response to LLMResponse.

        This is the boundary. Raw provider objects stop here.
        """
        choice = raw.choices[0]

        # Map finish reason
        finish_reason: Literal["stop", "length", "error"]
        if choice.finish_reason == "stop":
            finish_reason = "stop"
        elif choice.finish_reason == "length":
            finish_reason = "length"
        else:
            finish_reason = "error"

        # Some compatible servers omit usage
        if raw.usage is None:
            usage = Usage(prompt_tokens=0, completion_tokens=0, total_tokens=0)
        else:
            usage = Usage(
                prompt_tokens=raw.usage.prompt_tokens,
                completion_tokens=raw.usage.completion_tokens,
                total_tokens=raw.usage.total_tokens,
            )

        return LLMResponse(
            content=choice.message.content,
            finish_reason=finish_reason,
            usage=usage,
            latency_ms=latency_ms,
        )
