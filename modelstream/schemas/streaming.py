"""Streaming schemas for classified model output.

Defines the chunk kinds a provider yields to its consumer. Providers only
classify output; interpreting chunk content is the consumer's job.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TextChunk(BaseModel):
    """Literal passthrough content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str = Field(description="Content exactly as the backend produced it")


class ReasoningChunk(BaseModel):
    """Content the backend marked as internal deliberation."""

    model_config = ConfigDict(frozen=True)

    type: Literal["reasoning"] = "reasoning"
    text: str = Field(description="Inner content of the reasoning block, trimmed")


StreamChunk = Annotated[TextChunk | ReasoningChunk, Field(discriminator="type")]

_CHUNK_ADAPTER: TypeAdapter[TextChunk | ReasoningChunk] = TypeAdapter(StreamChunk)


def parse_chunk(data: dict) -> TextChunk | ReasoningChunk:
    """Validate a chunk dict (e.g. from a relay or log) into its model."""
    return _CHUNK_ADAPTER.validate_python(data)
