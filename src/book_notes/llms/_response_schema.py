# src/book_notes/llms/_response_schema.py

"""Internal module for converting response schemas to provider-specific formats.

This is infrastructure, not behavior. Pure data transformation.
"""

from pydantic import BaseModel


def schema_name(schema: type[BaseModel]) -> str:
    return schema.__name__.lower()


def schema_to_openai_response_format(schema: type[BaseModel]) -> dict:
    """Convert a pydantic model to OpenAI's structured output format.

    Ollama's OpenAI-compatible endpoint accepts the same shape.

    Args:
        schema: Pydantic model describing the expected record.

    Returns:
        Dict suitable for the ``response_format`` parameter.
    """
    return {
        "type": "json_schema",
        "json_schema": {
            "name": schema_name(schema),
            "schema": schema.model_json_schema(),
            "strict": True,
        },
    }


def schema_to_anthropic_tool(schema: type[BaseModel]) -> dict:
    """Convert a pydantic model to an Anthropic tool whose input is the record.

    Anthropic has no response_format; forcing a single tool call is how the
    output is constrained.

    Args:
        schema: Pydantic model describing the expected record.

    Returns:
        Dict in Anthropic's tool format.
    """
    return {
        "name": schema_name(schema),
        "description": f"Record the {schema_name(schema)} for this request.",
        "input_schema": schema.model_json_schema(),
    }
