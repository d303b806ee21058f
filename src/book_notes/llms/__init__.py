# src/book_notes/llms/__init__.py

"""LLM client layer for book-notes.

Provides a thin, stateless abstraction over LLM providers and a
structured generator on top of it.

Design principles:
- Stateless: Every call receives full message list
- One call, one attempt: retries belong to the RetryPolicy
- No leakage: Provider objects and errors never escape the adapter

Example:
    >>> from book_notes.llms import LLMConfig, LLMStructuredGenerator, create_llm_client
    >>> from book_notes.summarization import Notes
    >>>
    >>> config = LLMConfig(provider="ollama", model="llama3:latest")
    >>> generator = LLMStructuredGenerator(create_llm_client(config))
    >>>
    >>> notes = await generator.generate("Summarize: ...", Notes)
    >>> print(notes.summary)
"""

from .base import LLMClient, LLMResponse, Message, Role, Usage
from .config import LLMConfig
from .factory import create_llm_client
from .structured import LLMStructuredGenerator, StructuredGenerator

__all__ = [
    # Factory
    "create_llm_client",
    # Protocols
    "LLMClient",
    "StructuredGenerator",
    # Implementations
    "LLMStructuredGenerator",
    # Config
    "LLMConfig",
    # Types
    "Message",
    "Role",
    "LLMResponse",
    "Usage",
]
