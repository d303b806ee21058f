# src/book_notes/llms/structured.py

"""Structured generation: prompt in, validated pydantic record out."""

import logging
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from book_notes.errors import ResponseFormatError

from .base import LLMClient, Message, Role

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class StructuredGenerator(Protocol):
    """Anything that turns a prompt into a record of the given schema.

    One call is one attempt. Failures raise GenerationError subclasses:
    TransportError when the backend is unreachable, ResponseFormatError
    when the answer does not parse into the schema.
    """

    async def generate(self, prompt: str, schema: type[T]) -> T: ...


class LLMStructuredGenerator:
    """StructuredGenerator backed by an LLMClient."""

    def __init__(
        self,
        client: LLMClient,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self._system_prompt = system_prompt
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(self, prompt: str, schema: type[T]) -> T:
        messages = [Message(role=Role.USER, content=prompt)]
        if self._system_prompt:
            messages.insert(0, Message(role=Role.SYSTEM, content=self._system_prompt))

        response = await self._client.complete(
            messages=messages,
            response_schema=schema,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

        if not response.content:
            raise ResponseFormatError(
                f"Empty response (finish={response.finish_reason}) "
                f"where {schema.__name__} was expected"
            )

        try:
            return schema.model_validate_json(response.content)
        except ValidationError as e:
            logger.debug("Rejected payload: %s", response.content)
            raise ResponseFormatError(
                f"Response does not match {schema.__name__}: "
                f"{e.error_count()} validation error(s)"
            ) from e
