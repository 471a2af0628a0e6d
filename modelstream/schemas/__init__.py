"""Pydantic schemas shared by providers and their consumers."""

from modelstream.schemas.messages import (
    ContentPart,
    ConversationMessage,
    ImagePart,
    Role,
    TextPart,
    ToolResultPart,
    ToolUsePart,
)
from modelstream.schemas.models import ModelDescriptor, ModelInfo
from modelstream.schemas.streaming import (
    ReasoningChunk,
    StreamChunk,
    TextChunk,
    parse_chunk,
)

__all__ = [
    "ContentPart",
    "ConversationMessage",
    "ImagePart",
    "ModelDescriptor",
    "ModelInfo",
    "ReasoningChunk",
    "Role",
    "StreamChunk",
    "TextChunk",
    "TextPart",
    "ToolResultPart",
    "ToolUsePart",
    "parse_chunk",
]
