"""Abstract base class for all model providers.

Defines the ModelProvider interface that every backend adapter must
implement. Consumers hold a ModelProvider and never depend on a concrete
backend class.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from modelstream.parsing import OutputTokenizer
from modelstream.schemas.messages import ConversationMessage
from modelstream.schemas.models import ModelDescriptor
from modelstream.schemas.streaming import ReasoningChunk, TextChunk


@dataclass
class StreamSession:
    """Per-call state for a single stream() invocation.

    Created at call start and discarded once the chunk sequence is drained
    or the call is cancelled or fails. Nothing here is shared across calls.
    """

    model: ModelDescriptor
    payload: dict[str, Any]
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    tokenizer: OutputTokenizer | None = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def last_index(self) -> int:
        """Scan cursor into the raw response (0 before tokenization starts)."""
        return self.tokenizer.last_index if self.tokenizer is not None else 0


class ModelProvider(ABC):
    """Abstract interface for any remotely hosted LLM backend.

    Exposes model resolution, request construction, and a single streaming
    method. Only stream() performs I/O.
    """

    # ── Identity ──────────────────────────────────────────────

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Backend identifier (e.g. 'clarifai')."""

    # ── Core interface ────────────────────────────────────────

    @abstractmethod
    def resolve_model(self) -> ModelDescriptor:
        """Resolve the configured model id and its capability metadata.

        Deterministic and side-effect free.

        Raises:
            ConfigurationError: If no model id is configured and no default
                is permitted.
        """

    @abstractmethod
    def build_request(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
    ) -> dict[str, Any]:
        """Convert a system prompt and conversation into the backend payload.

        Pure: performs no validation of credentials and no I/O.
        """

    @abstractmethod
    def stream(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[TextChunk | ReasoningChunk]:
        """Send the conversation and yield classified chunks.

        Setting ``cancel_event`` before or during the network wait ends the
        stream with no chunks and no exception. Once chunks are flowing the
        event is checked between chunks.

        Raises:
            ConfigurationError: Missing or malformed configuration.
            BackendError: The backend rejected the request.
            NetworkError: The request failed at the transport level.
        """

    # ── Conveniences ──────────────────────────────────────────

    def create_message(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
    ) -> AsyncIterator[TextChunk | ReasoningChunk]:
        """Stream without external cancellation (a fresh, never-set event)."""
        return self.stream(system_prompt, history, asyncio.Event())

    async def collect(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
        cancel_event: asyncio.Event | None = None,
    ) -> list[TextChunk | ReasoningChunk]:
        """Drain stream() into a list."""
        return [
            chunk
            async for chunk in self.stream(system_prompt, history, cancel_event)
        ]

    async def test_connection(self) -> bool:
        """Check that the backend is reachable with the current credentials.

        Default implementation assumes reachability. Backends with a cheap
        probe endpoint should override this.
        """
        return True
