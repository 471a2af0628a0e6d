"""Clarifai adapter implementing the ModelProvider interface.

Clarifai's model outputs endpoint accepts a single raw text input, so the
whole conversation is flattened into one labelled transcript. The response
text is then classified into chunks by the output tokenizer.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from modelstream.errors import BackendError, ConfigurationError, NetworkError
from modelstream.parsing import OutputTokenizer
from modelstream.providers.base import ModelProvider, StreamSession
from modelstream.providers.registry import DEFAULT_MODEL_ID, get_model_info
from modelstream.schemas.messages import ConversationMessage, Role
from modelstream.schemas.models import ModelDescriptor
from modelstream.schemas.streaming import ReasoningChunk, TextChunk
from modelstream.settings import ClarifaiSettings

logger = logging.getLogger(__name__)

_ROLE_LABELS = {
    Role.USER: "User",
    Role.ASSISTANT: "Assistant",
}


@dataclass(frozen=True)
class ModelPath:
    """The four segments of a Clarifai model id, user/app/models/name."""

    user_id: str
    app_id: str
    model_name: str

    def outputs_url(self, base_url: str) -> str:
        return (
            f"{base_url.rstrip('/')}/v2/users/{self.user_id}"
            f"/apps/{self.app_id}/models/{self.model_name}/outputs"
        )


def parse_model_path(model_id: str) -> ModelPath:
    """Split a model id into its path segments.

    Raises:
        ConfigurationError: Unless the id has exactly four segments with
            ``models`` as the third.
    """
    parts = model_id.split("/")
    if len(parts) != 4 or parts[2] != "models":
        raise ConfigurationError(
            f"Invalid Clarifai Model ID format: {model_id}. "
            "Expected format: user_id/app_id/models/model_name."
        )
    return ModelPath(user_id=parts[0], app_id=parts[1], model_name=parts[3])


def flatten_conversation(
    system_prompt: str, history: Sequence[ConversationMessage]
) -> str:
    """Render a conversation as one labelled transcript.

    Tool results have no role of their own: they arrive as parts of a user
    turn and are flattened with the rest of that turn's content.
    """
    text = ""
    if system_prompt:
        text += f"System: {system_prompt}\n\n"

    for message in history:
        label = _ROLE_LABELS.get(message.role)
        if label is None:
            continue
        text += f"{label}: {message.text_content()}\n\n"

    return text


def _output_raw(output: Any) -> str:
    """Return outputs[i].data.text.raw, or "" when any level is missing."""
    node = output
    for key in ("data", "text", "raw"):
        if not isinstance(node, dict):
            return ""
        node = node.get(key)
    return node if isinstance(node, str) else ""


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class ClarifaiProvider(ModelProvider):
    """Raw-text chat against a Clarifai-hosted model.

    One POST per stream() call; no retries. Pass ``transport`` to route the
    HTTP traffic elsewhere (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        settings: ClarifaiSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def provider_id(self) -> str:
        return "clarifai"

    @property
    def settings(self) -> ClarifaiSettings:
        return self._settings

    def resolve_model(self) -> ModelDescriptor:
        model_id = self._settings.model_id
        if not model_id:
            if not self._settings.allow_default_model:
                raise ConfigurationError("Clarifai Model ID is not configured.")
            model_id = DEFAULT_MODEL_ID
        return ModelDescriptor(id=model_id, info=get_model_info(model_id))

    def build_request(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
    ) -> dict[str, Any]:
        raw = flatten_conversation(system_prompt, history)
        return {"inputs": [{"data": {"text": {"raw": raw}}}]}

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Key {self._settings.pat}",
            "Content-Type": "application/json",
        }

    def _outputs_url(self) -> str:
        """Validate credentials and model id, then build the endpoint URL.

        Raises:
            ConfigurationError: Missing PAT, missing model id, or malformed id.
        """
        if not self._settings.pat:
            raise ConfigurationError(
                "Clarifai Personal Access Token (PAT) is not configured."
            )
        if not self._settings.model_id:
            raise ConfigurationError("Clarifai Model ID is not configured.")
        path = parse_model_path(self._settings.model_id)
        return path.outputs_url(self._settings.base_url)

    async def stream(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[TextChunk | ReasoningChunk]:
        url = self._outputs_url()
        session = StreamSession(
            model=self.resolve_model(),
            payload=self.build_request(system_prompt, history),
            cancel_event=cancel_event if cancel_event is not None else asyncio.Event(),
        )
        logger.info("Clarifai stream called for model: %s", session.model.id)

        if session.cancelled:
            logger.info("Clarifai request cancelled before sending.")
            return

        logger.debug("Clarifai request URL: %s", url)
        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._settings.timeout
        ) as client:
            response = await self._post(client, url, session)

        if response is None:
            logger.info("Clarifai request cancelled.")
            return

        output_text = self._extract_output_text(response)
        if not output_text:
            return

        session.tokenizer = OutputTokenizer(output_text)
        for chunk in session.tokenizer:
            if session.cancelled:
                logger.info(
                    "Clarifai stream cancelled at offset %d of %d.",
                    session.last_index, len(output_text),
                )
                return
            yield chunk

    async def _post(
        self, client: httpx.AsyncClient, url: str, session: StreamSession
    ) -> httpx.Response | None:
        """POST the payload, racing it against the cancel event.

        Returns None when the event fires first (or together with the
        response).

        Raises:
            NetworkError: On transport or response-decoding failures that are
                not cancellations.
        """
        request = asyncio.ensure_future(
            client.post(url, json=session.payload, headers=self._headers())
        )
        waiter = asyncio.ensure_future(session.cancel_event.wait())
        try:
            await asyncio.wait(
                {request, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            waiter.cancel()

        if session.cancelled:
            request.cancel()
            # Drain the aborted request so its outcome is never left unretrieved
            with contextlib.suppress(asyncio.CancelledError, httpx.HTTPError):
                await request
            return None

        try:
            response = request.result()
        except httpx.RequestError as e:
            message = str(e) or type(e).__name__
            logger.error("Clarifai API request failed: %s", message)
            raise NetworkError(f"Clarifai request failed: {message}") from e

        logger.debug("Clarifai response status: %d", response.status_code)
        return response

    def _extract_output_text(self, response: httpx.Response) -> str:
        """Concatenate every output's raw text, one trailing newline each.

        Raises:
            BackendError: Non-200 status, or a 200 without any outputs.
        """
        data = _json_or_empty(response)
        outputs = data.get("outputs")

        if response.status_code == 200 and isinstance(outputs, list) and outputs:
            output_text = "".join(
                raw + "\n" for raw in map(_output_raw, outputs) if raw
            )
            if not output_text:
                logger.warning(
                    "Clarifai response was successful but contained no text output."
                )
            return output_text

        status = data.get("status")
        if not isinstance(status, dict):
            status = {}
        code = status.get("code") or response.status_code
        description = status.get("description") or (
            "Unknown error"
            if response.status_code == 200
            else response.reason_phrase or "Unknown error"
        )
        logger.error("Clarifai API error: %s - %s", code, description)
        raise BackendError(code, description)

    async def test_connection(self) -> bool:
        """Probe ``GET /v2/models`` with the configured PAT."""
        if not self._settings.pat:
            return False

        url = f"{self._settings.base_url.rstrip('/')}/v2/models"
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._settings.timeout
            ) as client:
                response = await client.get(
                    url, headers={"Authorization": f"Key {self._settings.pat}"}
                )
        except httpx.HTTPError as e:
            logger.warning("Clarifai connection test failed: %s", e)
            return False
        return response.is_success
