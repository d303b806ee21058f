# src/book_notes/llms/anthropic.py

import json
import logging
from time import monotonic
from typing import Any, Literal

from anthropic import NOT_GIVEN, AnthropicError, AsyncAnthropic
from pydantic import BaseModel

from book_notes.errors import TransportError
from book_notes.observability import names
from book_notes.observability.base import MetricsHook, NoOpMetricsHook

from ._response_schema import schema_to_anthropic_tool
from .base import LLMClient, LLMResponse, Message, Role, Usage

logger = logging.getLogger(__name__)


class AnthropicLLMClient(LLMClient):
    """Anthropic LLM client.

    Stateless. One call, one attempt. No behavior.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        timeout: float = 120.0,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        # SDK retries are off: attempts are counted by the RetryPolicy.
        self._client = AsyncAnthropic(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
        )
        self._model = model
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized AnthropicLLMClient with model=%s, timeout=%s",
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

        # Extract system message (Anthropic handles it separately)
        system_content, non_system_messages = self._extract_system(messages)

        # Convert to provider format (internal only - never leaks)
        anthropic_messages = self._convert_messages(non_system_messages)
        tool = schema_to_anthropic_tool(response_schema) if response_schema else None

        logger.debug(
            "Calling Anthropic: model=%s, messages=%d, schema=%s",
            self._model,
            len(messages),
            response_schema.__name__ if response_schema else None,
        )

        labels = {"provider": "anthropic", "model": self._model}
        try:
            raw = await self._client.messages.create(
                model=self._model,
                messages=anthropic_messages,  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens or 4096,  # Anthropic requires max_tokens
                system=system_content if system_content else NOT_GIVEN,
                tools=[tool] if tool else NOT_GIVEN,  # type: ignore[list-item]
                tool_choice=(
                    {"type": "tool", "name": tool["name"]} if tool else NOT_GIVEN
                ),
            )
        except AnthropicError as e:
            self.metrics_hook.increment(names.LLM_ERRORS_TOTAL, labels=labels)
            raise TransportError(f"anthropic request failed: {e}") from e

        elapsed_ms = 1000 * (monotonic() - start)

        # Normalize immediately - provider objects never escape
        response = self._normalize_response(raw, elapsed_ms)

        # Metrics
        self.metrics_hook.record_latency(names.LLM_COMPLETION_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.LLM_REQUESTS_TOTAL, labels=labels)
        self.metrics_hook.increment(names.LLM_TOKENS_TOTAL, response.usage.total_tokens)

        logger.info(
            "Anthropic completion: finish=%s, tokens=%d, latency=%.0fms",
            response.finish_reason,
            response.usage.total_tokens,
            elapsed_ms,
        )

        return response

    def _extract_system(
        self, messages: list[Message]
    ) -> tuple[str | None, list[Message]]:
        """Extract system message from message list.

        Anthropic requires system message as a separate parameter.
        """
        system_content = None
        non_system = []

        for m in messages:
            if m.role == Role.SYSTEM:
                system_content = m.content
            else:
                non_system.append(m)

        return system_content, non_system

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to Anthropic format.

        Internal only. Provider format never leaks outside.
        """
        return [{"role": m.role.value, "content": m.content} for m in messages]

    def _normalize_response(self, raw: Any, latency_ms: float) -> LLMResponse:
        """Normalize Anthropic response to LLMResponse.

        This is the boundary. Raw provider objects stop here.
        A forced tool call is flattened back into its JSON payload.
        """
        text_content: str | None = None
        tool_payload: str | None = None

        for block in raw.content:
            if block.type == "text":
                text_content = block.text
            elif block.type == "tool_use":
                tool_payload = json.dumps(block.input)

        # Map finish reason
        finish_reason: Literal["stop", "length", "error"]
        if raw.stop_reason in ("end_turn", "tool_use"):
            finish_reason = "stop"
        elif raw.stop_reason == "max_tokens":
            finish_reason = "length"
        else:
            finish_reason = "error"

        return LLMResponse(
            content=tool_payload if tool_payload is not None else text_content,
            finish_reason=finish_reason,
            usage=Usage(
                prompt_tokens=raw.usage.input_tokens,
                completion_tokens=raw.usage.output_tokens,
                total_tokens=raw.usage.input_tokens + raw.usage.output_tokens,
            ),
            latency_ms=latency_ms,
        )
