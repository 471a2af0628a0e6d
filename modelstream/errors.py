"""Exception hierarchy for the provider layer.

Cancellation is deliberately absent: a cancelled stream ends quietly with
no chunks instead of raising.
"""

from __future__ import annotations


class ModelStreamError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(ModelStreamError):
    """Raised before any network call when the provider is misconfigured."""


class BackendError(ModelStreamError):
    """Raised when the backend is reachable but rejects the request."""

    def __init__(self, code: int | str, description: str) -> None:
        self.code = code
        self.description = description
        super().__init__(f"Clarifai API error ({code}): {description}")


class NetworkError(ModelStreamError):
    """Raised on transport-level failures (DNS, timeout, connection reset)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
