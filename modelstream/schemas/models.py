"""Model catalog schemas.

ModelInfo entries are loaded from config/models.toml; a ModelDescriptor is
resolved once per stream call and never mutated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelInfo(BaseModel):
    """Capability metadata for a single hosted model."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(default="", description="Human-friendly model name for CLI output")
    context_window: int = Field(gt=0, description="Maximum context window size in tokens")
    max_tokens: int = Field(default=4096, gt=0, description="Maximum output tokens")
    supports_prompt_cache: bool = Field(
        default=False, description="Whether the backend caches prompt prefixes"
    )
    description: str = Field(default="", description="Short catalog description")


class ModelDescriptor(BaseModel):
    """A resolved model id paired with its capability metadata."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Model path in user/app/models/name form")
    info: ModelInfo

    @property
    def context_window(self) -> int:
        return self.info.context_window

    @property
    def supports_prompt_cache(self) -> bool:
        return self.info.supports_prompt_cache
