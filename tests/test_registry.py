"""Tests for modelstream.providers.registry — catalog loading and backend lookup."""

from pathlib import Path

import pytest

from modelstream.errors import ConfigurationError
from modelstream.providers.clarifai import ClarifaiProvider, parse_model_path
from modelstream.providers.registry import (
    DEFAULT_MODEL_ID,
    available_providers,
    create_provider,
    get_model_info,
    load_models,
)
from modelstream.schemas.models import ModelInfo
from modelstream.settings import ClarifaiSettings

# Path to the real catalog shipped with the package
_CONFIG_DIR = Path(__file__).parent.parent / "modelstream" / "config"


class TestLoadModels:
    def test_loads_real_catalog(self):
        catalog = load_models(_CONFIG_DIR / "models.toml")
        assert len(catalog) > 0

    def test_default_model_present(self):
        assert DEFAULT_MODEL_ID in load_models()

    def test_entries_are_model_info(self):
        for model_id, info in load_models().items():
            assert isinstance(info, ModelInfo), f"{model_id} is not ModelInfo"
            assert info.context_window > 0
            assert info.display_name != ""

    def test_catalog_ids_are_valid_paths(self):
        for model_id in load_models():
            parse_model_path(model_id)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_models(tmp_path / "nope.toml")

    def test_missing_models_section(self, tmp_path):
        path = tmp_path / "models.toml"
        path.write_text('title = "empty"\n', encoding="utf-8")
        with pytest.raises(ValueError, match="No \\[models\\] section"):
            load_models(path)

    def test_custom_catalog(self, tmp_path):
        path = tmp_path / "models.toml"
        path.write_text(
            '[models."u/a/models/m"]\n'
            'display_name = "M"\n'
            "context_window = 1000\n"
            "supports_prompt_cache = true\n",
            encoding="utf-8",
        )
        catalog = load_models(path)
        assert catalog["u/a/models/m"].supports_prompt_cache is True
        assert catalog["u/a/models/m"].max_tokens == 4096


class TestGetModelInfo:
    def test_known_model(self):
        assert get_model_info(DEFAULT_MODEL_ID) == load_models()[DEFAULT_MODEL_ID]

    def test_unknown_model_falls_back_to_default(self):
        assert get_model_info("x/y/models/z") == load_models()[DEFAULT_MODEL_ID]


class TestCreateProvider:
    def test_clarifai(self):
        settings = ClarifaiSettings(pat="p", model_id="u/a/models/m")
        provider = create_provider("clarifai", settings)
        assert isinstance(provider, ClarifaiProvider)
        assert provider.provider_id == "clarifai"
        assert provider.settings is settings

    def test_name_is_case_insensitive(self):
        assert isinstance(create_provider("Clarifai", ClarifaiSettings()), ClarifaiProvider)

    def test_from_env_when_no_settings(self, monkeypatch):
        monkeypatch.setenv("CLARIFAI_PAT", "envpat")
        monkeypatch.setenv("CLARIFAI_MODEL_ID", "u/a/models/m")
        provider = create_provider()
        assert provider.settings.pat == "envpat"
        assert provider.settings.model_id == "u/a/models/m"

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError, match="Unknown provider"):
            create_provider("nonexistent")

    def test_available_providers(self):
        assert "clarifai" in available_providers()
