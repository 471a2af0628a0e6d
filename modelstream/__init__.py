"""modelstream — streaming provider abstraction for hosted language models."""

__version__ = "0.1.0"

from modelstream.errors import (
    BackendError,
    ConfigurationError,
    ModelStreamError,
    NetworkError,
)
from modelstream.parsing import OutputTokenizer, parse_output
from modelstream.providers import ClarifaiProvider, ModelProvider, create_provider
from modelstream.schemas import (
    ConversationMessage,
    ModelDescriptor,
    ReasoningChunk,
    StreamChunk,
    TextChunk,
)
from modelstream.settings import ClarifaiSettings

__all__ = [
    "BackendError",
    "ClarifaiProvider",
    "ClarifaiSettings",
    "ConfigurationError",
    "ConversationMessage",
    "ModelDescriptor",
    "ModelProvider",
    "ModelStreamError",
    "NetworkError",
    "OutputTokenizer",
    "ReasoningChunk",
    "StreamChunk",
    "TextChunk",
    "create_provider",
    "parse_output",
]
