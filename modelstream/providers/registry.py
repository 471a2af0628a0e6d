"""Model catalog loader and backend registry.

Loads known model metadata from config/models.toml and maps backend names
to their ModelProvider implementations.
"""

from __future__ import annotations

import functools
import tomllib
from pathlib import Path

from modelstream.errors import ConfigurationError
from modelstream.providers.base import ModelProvider
from modelstream.schemas.models import ModelInfo
from modelstream.settings import ClarifaiSettings

# Default config directory relative to the modelstream package
_CONFIG_DIR = Path(__file__).parent.parent / "config"

DEFAULT_MODEL_ID = "qwen/qwenCoder/models/Qwen2_5-Coder-32B-Instruct"


def load_models(config_path: Path | None = None) -> dict[str, ModelInfo]:
    """Load the model catalog from a TOML file.

    Args:
        config_path: Path to models.toml. Defaults to modelstream/config/models.toml.

    Returns:
        Dictionary mapping model ids to ModelInfo instances.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the TOML structure is invalid.
    """
    path = config_path or _CONFIG_DIR / "models.toml"
    if not path.exists():
        raise FileNotFoundError(f"Model catalog not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    models_section = raw.get("models")
    if not models_section or not isinstance(models_section, dict):
        raise ValueError(f"No [models] section found in {path}")

    return {
        model_id: ModelInfo(**entry)
        for model_id, entry in models_section.items()
        if isinstance(entry, dict)
    }


@functools.cache
def _default_catalog() -> dict[str, ModelInfo]:
    return load_models()


def get_model_info(model_id: str) -> ModelInfo:
    """Look up catalog metadata, falling back to the default model's info."""
    catalog = _default_catalog()
    return catalog.get(model_id) or catalog[DEFAULT_MODEL_ID]


def _build_clarifai(settings: ClarifaiSettings | None) -> ModelProvider:
    from modelstream.providers.clarifai import ClarifaiProvider

    return ClarifaiProvider(settings or ClarifaiSettings.from_env())


_PROVIDERS = {
    "clarifai": _build_clarifai,
}


def available_providers() -> list[str]:
    """Names accepted by create_provider()."""
    return sorted(_PROVIDERS)


def create_provider(
    name: str = "clarifai", settings: ClarifaiSettings | None = None
) -> ModelProvider:
    """Build the provider for a backend name.

    Raises:
        ConfigurationError: If no backend is registered under ``name``.
    """
    factory = _PROVIDERS.get(name.lower())
    if factory is None:
        raise ConfigurationError(
            f"Unknown provider '{name}'. Available: {', '.join(available_providers())}"
        )
    return factory(settings)
