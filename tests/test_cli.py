"""Tests for the modelstream CLI via CliRunner."""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from modelstream import __version__, keys
from modelstream.cli import app
from modelstream.errors import BackendError
from modelstream.providers.base import ModelProvider
from modelstream.providers.registry import DEFAULT_MODEL_ID
from modelstream.schemas.models import ModelDescriptor, ModelInfo
from modelstream.schemas.streaming import ReasoningChunk, TextChunk

# NO_COLOR=1 keeps Rich markup out of the captured output.
# COLUMNS=200 prevents table wrapping that could split model ids.
runner = CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})


class ScriptedProvider(ModelProvider):
    """Provider that replays fixed chunks, or raises, without any I/O."""

    def __init__(self, chunks=(), error=None, reachable=True):
        self.chunks = list(chunks)
        self.error = error
        self.reachable = reachable
        self.calls = []

    @property
    def provider_id(self) -> str:
        return "scripted"

    def resolve_model(self):
        return ModelDescriptor(id=DEFAULT_MODEL_ID, info=ModelInfo(context_window=1))

    def build_request(self, system_prompt, history):
        return {}

    async def stream(self, system_prompt, history, cancel_event=None):
        self.calls.append((system_prompt, history))
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def test_connection(self):
        return self.reachable


class TestGeneral:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"modelstream {__version__}" in result.output

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("setup", "chat", "test", "models"):
            assert command in result.output


class TestModelsCommands:
    def test_list(self):
        result = runner.invoke(app, ["models", "list"])
        assert result.exit_code == 0
        assert DEFAULT_MODEL_ID in result.output
        assert "(default)" in result.output

    def test_show(self):
        result = runner.invoke(app, ["models", "show", DEFAULT_MODEL_ID])
        assert result.exit_code == 0
        assert "Context Window" in result.output

    def test_show_unknown(self):
        result = runner.invoke(app, ["models", "show", "no/such/models/thing"])
        assert result.exit_code == 1
        assert "Model not found" in result.output


class TestChat:
    def test_streams_chunks(self):
        provider = ScriptedProvider(
            [TextChunk(text="Hello "), ReasoningChunk(text="ponder"), TextChunk(text="world")]
        )
        with patch("modelstream.cli.create_provider", return_value=provider):
            result = runner.invoke(app, ["chat", "hi", "--system", "be brief"])

        assert result.exit_code == 0
        assert "Hello" in result.output
        assert "ponder" in result.output
        assert "world" in result.output
        system, history = provider.calls[0]
        assert system == "be brief"
        assert history[0].content == "hi"

    def test_hide_reasoning(self):
        provider = ScriptedProvider([ReasoningChunk(text="secret"), TextChunk(text="shown")])
        with patch("modelstream.cli.create_provider", return_value=provider):
            result = runner.invoke(app, ["chat", "hi", "--hide-reasoning"])

        assert result.exit_code == 0
        assert "secret" not in result.output
        assert "shown" in result.output

    def test_no_output(self):
        with patch("modelstream.cli.create_provider", return_value=ScriptedProvider()):
            result = runner.invoke(app, ["chat", "hi"])
        assert result.exit_code == 0
        assert "No output returned" in result.output

    def test_backend_error_exits_1(self):
        provider = ScriptedProvider(
            [TextChunk(text="partial")], error=BackendError(9, "bad")
        )
        with patch("modelstream.cli.create_provider", return_value=provider):
            result = runner.invoke(app, ["chat", "hi"])
        assert result.exit_code == 1
        assert "partial" in result.output
        assert "Clarifai API error (9): bad" in result.output

    def test_model_override_reaches_settings(self):
        with patch(
            "modelstream.cli.create_provider", return_value=ScriptedProvider()
        ) as factory:
            runner.invoke(app, ["chat", "hi", "--model", "u/a/models/m"])
        settings = factory.call_args.args[1]
        assert settings.model_id == "u/a/models/m"


class TestConnectionCommand:
    def test_without_pat(self, monkeypatch):
        monkeypatch.delenv("CLARIFAI_PAT", raising=False)
        result = runner.invoke(app, ["test"])
        assert result.exit_code == 1
        assert "PAT not set" in result.output

    def test_connected(self, monkeypatch):
        monkeypatch.setenv("CLARIFAI_PAT", "x" * 32)
        with patch("modelstream.cli.create_provider", return_value=ScriptedProvider()):
            result = runner.invoke(app, ["test"])
        assert result.exit_code == 0
        assert "Connected" in result.output

    def test_unreachable(self, monkeypatch):
        monkeypatch.setenv("CLARIFAI_PAT", "x" * 32)
        with patch(
            "modelstream.cli.create_provider",
            return_value=ScriptedProvider(reachable=False),
        ):
            result = runner.invoke(app, ["test"])
        assert result.exit_code == 1
        assert "Connection failed" in result.output


class TestSetup:
    def test_saves_keys(self, tmp_path, monkeypatch):
        keys_file = tmp_path / "keys.env"
        monkeypatch.setattr(keys, "KEYS_FILE", keys_file)
        result = runner.invoke(
            app, ["setup", "--pat", "A" * 32, "--model-id", "u/a/models/m"]
        )
        assert result.exit_code == 0
        content = keys_file.read_text(encoding="utf-8")
        assert f"CLARIFAI_PAT={'A' * 32}" in content
        assert "CLARIFAI_MODEL_ID=u/a/models/m" in content
        assert "Warning" not in result.output

    def test_warns_on_odd_pat(self, tmp_path, monkeypatch):
        monkeypatch.setattr(keys, "KEYS_FILE", tmp_path / "keys.env")
        result = runner.invoke(app, ["setup", "--pat", "short"])
        assert result.exit_code == 0
        assert "Warning" in result.output
