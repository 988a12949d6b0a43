"""
voicenote.cli - Typer CLI entry point.

Runs the pipeline against a vault directory and reports the outcome.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from voicenote import __version__
from voicenote.config import (
    CONFIG_FILENAME,
    create_default_config,
    find_config_dir,
    load_config,
    write_config,
)
from voicenote.exceptions import ConfigurationError, RoutingError, TranscriptionError
from voicenote.host import FileEditingContext, FileEditor, LocalVault
from voicenote.logging import configure_logging
from voicenote.models import AudioPayload, CursorPosition
from voicenote.pipeline import NotePipeline
from voicenote.utils import format_size, mask_secret

app = typer.Typer(
    name="voicenote",
    help="Turn recordings into Markdown notes.\n\n"
    "Transcribes audio through a Whisper-compatible API, optionally rewrites "
    "the text with an LLM, and files it as a new note or at a cursor.",
    add_completion=False,
)
console = Console()

SECRET_KEYS = {"api_key", "post_processing_api_key"}


def build_pipeline(vault: LocalVault) -> NotePipeline:
    return NotePipeline(storage=vault, workspace=vault)


def resolve_vault(vault: str | None) -> Path:
    if vault:
        return Path(vault)
    found = find_config_dir()
    if found is None:
        console.print(
            f"[red]Error: No {CONFIG_FILENAME} found. Run 'voicenote init' or pass --vault.[/red]"
        )
        raise typer.Exit(1)
    return found


def version_callback(value: bool) -> None:
    if value:
        console.print(f"voicenote {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Voicenote - recorded audio to Markdown notes."""
    pass


@app.command("init")
def init_vault(
    path: str = typer.Option(".", "--path", "-d", help="Vault directory"),
    api_key: str = typer.Option("", "--api-key", help="Transcription API key"),
) -> None:
    """Write a default voicenote.yaml into a vault directory."""
    vault_path = Path(path)
    config_path = vault_path / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[red]Error: '{config_path}' already exists[/red]")
        raise typer.Exit(1)

    config = create_default_config()
    if api_key:
        config["api_key"] = api_key
    write_config(config, config_path)

    console.print(f"[green]✓[/green] Created {config_path}")
    if not api_key:
        console.print("\nNext steps:")
        console.print(f"  Set api_key in {config_path}")
        console.print("  voicenote transcribe <audio_file>")


@app.command("config")
def show_config(
    vault: str | None = typer.Option(None, "--vault", help="Vault directory"),
) -> None:
    """Show resolved settings, with API keys masked."""
    vault_path = resolve_vault(vault)
    try:
        config = load_config(vault_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Settings ({vault_path / CONFIG_FILENAME})")
    table.add_column("Option", style="cyan")
    table.add_column("Value", style="green")
    for key, value in config.model_dump().items():
        shown = mask_secret(value) if key in SECRET_KEYS else str(value)
        table.add_row(key, shown)
    console.print(table)


@app.command("transcribe")
def transcribe(
    audio_file: str = typer.Argument(..., help="Recorded audio file"),
    vault: str | None = typer.Option(None, "--vault", help="Vault directory"),
    into: str | None = typer.Option(
        None, "--into", help="Existing note (vault-relative) to insert into at the cursor"
    ),
    line: int = typer.Option(0, "--line", min=0, help="Cursor line for --into"),
    ch: int = typer.Option(0, "--ch", min=0, help="Cursor column for --into"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Transcribe a recording and file it in the vault."""
    vault_path = resolve_vault(vault)
    try:
        config = load_config(vault_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)

    configure_logging(verbose or config.debug_mode)

    audio_path = Path(audio_file)
    if not audio_path.is_file():
        console.print(f"[red]Error: Audio file not found: {audio_path}[/red]")
        raise typer.Exit(1)
    audio = AudioPayload.from_path(audio_path)

    local_vault = LocalVault(vault_path)
    context = None
    editor = None
    if into:
        try:
            editor = FileEditor(local_vault.resolve(into), CursorPosition(line=line, ch=ch))
        except (OSError, ValueError, RoutingError) as e:
            console.print(f"[yellow]Cannot edit {into}: {e}[/yellow]")
        context = FileEditingContext(editor)

    console.print(f"[cyan]Transcribing {audio.name} ({format_size(audio.size)})...[/cyan]")
    pipeline = build_pipeline(local_vault)
    try:
        result = asyncio.run(pipeline.run(audio, config, context))
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except TranscriptionError as e:
        console.print(f"[red]Error parsing audio: {e}[/red]")
        raise typer.Exit(1)

    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    outcome = result.outcome
    if outcome.created:
        console.print(f"[green]✓[/green] Created note {outcome.decision.note_path}")
    elif outcome.inserted:
        editor.save()
        console.print(
            f"[green]✓[/green] Inserted into {into} "
            f"(cursor now at {outcome.cursor.line}:{outcome.cursor.ch})"
        )
    else:
        console.print("[yellow]Text was not placed in a note:[/yellow]")
        console.print(result.text, markup=False)

    if result.post_processed:
        console.print("[dim]  Post-processed[/dim]")
