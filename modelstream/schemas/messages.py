"""Conversation schemas passed into a provider.

A conversation is an ordered list of ConversationMessage values. Content is
either a plain string or a list of typed content parts; only text parts
carry meaning for backends that accept raw text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Role(StrEnum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class TextPart(BaseModel):
    """Plain text content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    """Image content (base64 or URL source)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    source: dict[str, Any] = Field(default_factory=dict)


class ToolUsePart(BaseModel):
    """A tool invocation previously emitted by the assistant."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ToolResultPart(BaseModel):
    """The result of a tool invocation, sent back inside a user turn."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str | list[dict[str, Any]] = ""


ContentPart = Annotated[
    TextPart | ImagePart | ToolUsePart | ToolResultPart,
    Field(discriminator="type"),
]


class ConversationMessage(BaseModel):
    """One turn of a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Who produced this turn")
    content: str | list[ContentPart] = Field(
        description="Plain string or ordered list of content parts"
    )

    def text_content(self) -> str:
        """Return the turn's text.

        String content is returned verbatim. For part lists, text parts are
        joined with newlines and every other part contributes an empty string.
        """
        if isinstance(self.content, str):
            return self.content
        return "\n".join(
            part.text if isinstance(part, TextPart) else ""
            for part in self.content
        )
