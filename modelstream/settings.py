"""Backend connection settings.

Settings are plain pydantic models so they can be built from the
environment, from a test, or by a host application's own config layer.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from modelstream.keys import API_BASE_ENV, MODEL_ID_ENV, PAT_ENV

DEFAULT_BASE_URL = "https://api.clarifai.com"


class ClarifaiSettings(BaseModel):
    """Connection settings for the Clarifai backend.

    Presence of ``pat`` and ``model_id`` is checked by the provider at call
    time, not here, so a partially configured instance can still list
    models or resolve the default model.
    """

    model_config = ConfigDict(protected_namespaces=())

    pat: str = Field(default="", description="Personal Access Token")
    model_id: str = Field(default="", description="Model path: user/app/models/name")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    allow_default_model: bool = Field(
        default=True,
        description="Resolve to the default model when no model id is configured",
    )
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")

    @classmethod
    def from_env(cls, **overrides: str | None) -> ClarifaiSettings:
        """Build settings from CLARIFAI_* environment variables."""
        values = {
            "pat": os.environ.get(PAT_ENV, ""),
            "model_id": os.environ.get(MODEL_ID_ENV, ""),
            "base_url": os.environ.get(API_BASE_ENV, "") or DEFAULT_BASE_URL,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
