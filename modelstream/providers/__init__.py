"""modelstream provider layer.

Every backend is reached through the ModelProvider interface; consumers
never construct request payloads or parse responses themselves.
"""

from modelstream.providers.base import ModelProvider, StreamSession
from modelstream.providers.clarifai import (
    ClarifaiProvider,
    ModelPath,
    flatten_conversation,
    parse_model_path,
)
from modelstream.providers.registry import (
    DEFAULT_MODEL_ID,
    available_providers,
    create_provider,
    get_model_info,
    load_models,
)

__all__ = [
    "DEFAULT_MODEL_ID",
    "ClarifaiProvider",
    "ModelPath",
    "ModelProvider",
    "StreamSession",
    "available_providers",
    "create_provider",
    "flatten_conversation",
    "get_model_info",
    "load_models",
    "parse_model_path",
]
