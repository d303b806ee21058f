# tests/unit/llms/test_structured.py

from unittest.mock import AsyncMock

import pytest

from book_notes.errors import ResponseFormatError, TransportError
from book_notes.llms.base import LLMResponse, Message, Role, Usage
from book_notes.llms.structured import LLMStructuredGenerator
from book_notes.summarization.models import Notes


def _response(content: str | None, finish_reason: str = "stop") -> LLMResponse:
    return LLMResponse(
        content=content,
        finish_reason=finish_reason,  # type: ignore[arg-type]
        usage=Usage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
        latency_ms=1.0,
    )


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


class TestLLMStructuredGenerator:
    @pytest.mark.asyncio
    async def test_returns_validated_record(self, client: AsyncMock) -> None:
        client.complete.return_value = _response('{"summary": "S"}')
        generator = LLMStructuredGenerator(client)

        notes = await generator.generate("Summarize this.", Notes)

        assert notes == Notes(summary="S")
        kwargs = client.complete.call_args.kwargs
        assert kwargs["messages"] == [Message(role=Role.USER, content="Summarize this.")]
        assert kwargs["response_schema"] is Notes
        assert kwargs["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_system_prompt_goes_first(self, client: AsyncMock) -> None:
        client.complete.return_value = _response('{"summary": "S"}')
        generator = LLMStructuredGenerator(client, system_prompt="Be brief.")

        await generator.generate("Summarize this.", Notes)

        messages = client.complete.call_args.kwargs["messages"]
        assert messages[0] == Message(role=Role.SYSTEM, content="Be brief.")

    @pytest.mark.asyncio
    async def test_invalid_json_is_format_error(self, client: AsyncMock) -> None:
        client.complete.return_value = _response("Here is your summary: S")
        generator = LLMStructuredGenerator(client)

        with pytest.raises(ResponseFormatError, match="does not match Notes"):
            await generator.generate("p", Notes)

    @pytest.mark.asyncio
    async def test_extra_field_is_format_error(self, client: AsyncMock) -> None:
        client.complete.return_value = _response('{"summary": "S", "title": "T"}')
        generator = LLMStructuredGenerator(client)

        with pytest.raises(ResponseFormatError):
            await generator.generate("p", Notes)

    @pytest.mark.asyncio
    async def test_missing_field_is_format_error(self, client: AsyncMock) -> None:
        client.complete.return_value = _response('{"notes": "S"}')
        generator = LLMStructuredGenerator(client)

        with pytest.raises(ResponseFormatError):
            await generator.generate("p", Notes)

    @pytest.mark.asyncio
    async def test_empty_content_is_format_error(self, client: AsyncMock) -> None:
        client.complete.return_value = _response(None, finish_reason="length")
        generator = LLMStructuredGenerator(client)

        with pytest.raises(ResponseFormatError, match="finish=length"):
            await generator.generate("p", Notes)

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, client: AsyncMock) -> None:
        client.complete.side_effect = TransportError("down")
        generator = LLMStructuredGenerator(client)

        with pytest.raises(TransportError):
            await generator.generate("p", Notes)
