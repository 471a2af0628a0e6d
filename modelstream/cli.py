"""modelstream CLI — Typer + Rich terminal interface.

Commands: setup, chat, test, models.
"""

from __future__ import annotations

import asyncio
import os

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from modelstream import __version__
from modelstream.errors import ModelStreamError
from modelstream.keys import (
    API_BASE_ENV,
    KNOWN_KEYS,
    MODEL_ID_ENV,
    PAT_ENV,
    load_keys_env,
    save_keys,
    validate_pat,
)
from modelstream.providers.registry import (
    DEFAULT_MODEL_ID,
    create_provider,
    load_models,
)
from modelstream.schemas.messages import ConversationMessage, Role
from modelstream.schemas.streaming import ReasoningChunk
from modelstream.settings import ClarifaiSettings

# Load keys from ~/.modelstream/keys.env and .env on startup
load_keys_env()

console = Console()

# ── App and sub-apps ─────────────────────────────────────────────

app = typer.Typer(
    name="modelstream",
    help="Stream classified output from hosted language models.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

models_app = typer.Typer(
    name="models",
    help="Browse the model catalog.",
    no_args_is_help=True,
)
app.add_typer(models_app, name="models")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"modelstream {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """modelstream — stream classified output from hosted language models."""


# ── Helpers ──────────────────────────────────────────────────────

def _load_catalog():
    """Load the model catalog, exit on error."""
    try:
        return load_models()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading models:[/red] {e}")
        raise typer.Exit(1) from None


# ── modelstream setup ────────────────────────────────────────────

@app.command()
def setup(
    pat: str = typer.Option(..., "--pat", help="Clarifai Personal Access Token"),
    model_id: str = typer.Option(
        DEFAULT_MODEL_ID, "--model-id", help="Model path: user/app/models/name"
    ),
    base_url: str = typer.Option("", "--base-url", help="API base URL override"),
) -> None:
    """Save Clarifai credentials to ~/.modelstream/keys.env."""
    if not validate_pat(pat):
        console.print(
            "[yellow]Warning:[/yellow] PAT does not look like a Clarifai token "
            "(expected 32+ letters and digits). Saving anyway."
        )

    path = save_keys({PAT_ENV: pat, MODEL_ID_ENV: model_id, API_BASE_ENV: base_url})
    console.print(f"[green]Saved[/green] credentials to {path}")


# ── modelstream chat ─────────────────────────────────────────────

@app.command()
def chat(
    prompt: str = typer.Argument(..., help="User message to send"),
    system: str = typer.Option("", "--system", "-s", help="System prompt"),
    model: str = typer.Option(None, "--model", "-m", help="Model path override"),
    hide_reasoning: bool = typer.Option(
        False, "--hide-reasoning", help="Do not print reasoning chunks"
    ),
) -> None:
    """Send one message and stream the classified reply."""
    settings = ClarifaiSettings.from_env(model_id=model)
    provider = create_provider("clarifai", settings)
    history = [ConversationMessage(role=Role.USER, content=prompt)]

    async def _run() -> int:
        count = 0
        async for chunk in provider.stream(system, history):
            count += 1
            if isinstance(chunk, ReasoningChunk):
                if not hide_reasoning:
                    console.print(Text(chunk.text, style="dim italic"))
            else:
                console.print(Text(chunk.text), end="")
        return count

    try:
        count = asyncio.run(_run())
    except ModelStreamError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        raise typer.Exit(130) from None

    console.print()
    if count == 0:
        console.print("[dim]No output returned.[/dim]")


# ── modelstream test ─────────────────────────────────────────────

@app.command("test")
def connection_check() -> None:
    """Check that the configured credentials reach the backend."""
    settings = ClarifaiSettings.from_env()
    if not settings.pat:
        console.print(
            f"[red]PAT not set:[/red] {PAT_ENV}\n"
            "Run: modelstream setup --pat <token>"
        )
        raise typer.Exit(1)

    provider = create_provider("clarifai", settings)
    with console.status("[bold blue]Contacting Clarifai...", spinner="dots"):
        ok = asyncio.run(provider.test_connection())

    if ok:
        console.print(f"[green]Connected[/green] to {settings.base_url}")
    else:
        console.print(f"[red]Connection failed[/red] ({settings.base_url})")
        raise typer.Exit(1)


# ── modelstream models ───────────────────────────────────────────

@models_app.command("list")
def models_list() -> None:
    """Show all catalogued models as a table."""
    catalog = _load_catalog()

    table = Table(title="Catalogued Models", show_lines=True)
    table.add_column("Model ID", style="bold cyan")
    table.add_column("Display Name")
    table.add_column("Context", justify="right")
    table.add_column("Max Output", justify="right")

    for model_id, info in sorted(catalog.items()):
        name = info.display_name
        if model_id == DEFAULT_MODEL_ID:
            name += " [dim](default)[/dim]"
        table.add_row(
            model_id,
            name,
            f"{info.context_window:,}",
            f"{info.max_tokens:,}",
        )

    console.print(table)
    console.print(f"\n[dim]{len(catalog)} models catalogued[/dim]")


@models_app.command("show")
def models_show(
    model_id: str = typer.Argument(..., help="Model path from the catalog"),
) -> None:
    """Show full details for one model."""
    catalog = _load_catalog()

    if model_id not in catalog:
        console.print(f"[red]Model not found:[/red] '{model_id}'")
        console.print(f"[dim]Available: {', '.join(sorted(catalog))}[/dim]")
        raise typer.Exit(1)

    info = catalog[model_id]
    table = Table(title=f"Model: {model_id}", show_header=False, show_lines=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Display Name", info.display_name)
    table.add_row("Context Window", f"{info.context_window:,}")
    table.add_row("Max Output Tokens", f"{info.max_tokens:,}")
    table.add_row("Prompt Cache", "yes" if info.supports_prompt_cache else "no")
    if info.description:
        table.add_row("Description", info.description)

    for env_var, label, _ in KNOWN_KEYS:
        status = "[green]set[/green]" if os.environ.get(env_var) else "[red]not set[/red]"
        table.add_row(label, status)

    console.print(table)
