"""Tutor Center CLI: Typer + Rich terminal interface.

Commands: ask, books, visual, grammar, translate, config, setup, logout.
Streamed answers are re-rendered as Markdown after every fragment.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from tutorcenter import __version__
from tutorcenter.errors import TutorError
from tutorcenter.keys import DEFAULT_KEY_ENV, SIGNUP_URL, clear_keys, load_keys_env, save_keys
from tutorcenter.providers.litellm_provider import build_provider
from tutorcenter.schemas.streaming import AccumulatedResult, ResultState
from tutorcenter.schemas.translation import TranslationResult
from tutorcenter.settings import load_provider_settings, load_tutor_settings
from tutorcenter.tutor import Tutor

# Load API keys from ~/.tutorcenter/keys.env and .env on startup
load_keys_env()

console = Console()

app = typer.Typer(
    name="tutorcenter",
    help="AI tutor for Class 10 students: Q&A, textbooks, grammar, translation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_SUBJECT_OPTION = typer.Option("", "--subject", "-s", help="Subject (default from config).")
_LANGUAGE_OPTION = typer.Option("", "--language", "-l", help="Response language.")


# ── Version callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"tutorcenter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Tutor Center: streaming AI tutor in your terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# ── Helpers ──────────────────────────────────────────────────────


def _build_tutor() -> Tutor:
    """Build the provider handle and tutor facade, exit on config errors."""
    try:
        provider_settings = load_provider_settings()
        tutor_settings = load_tutor_settings()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(1) from None
    return Tutor(build_provider(provider_settings), tutor_settings)


def _sources_table(result: AccumulatedResult) -> Table:
    table = Table(title="Sources", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title")
    table.add_column("Link", style="blue")
    for idx, citation in enumerate(result.citations, 1):
        table.add_row(str(idx), citation.title, f"[link={citation.uri}]{citation.uri}[/link]")
    return table


async def _render_stream(snapshots: AsyncIterator[AccumulatedResult]) -> AccumulatedResult:
    result = AccumulatedResult()
    with Live(console=console, refresh_per_second=12, vertical_overflow="visible") as live:
        async for result in snapshots:
            if result.state is not ResultState.FAILED:
                live.update(Markdown(result.text))
    return result


def _run_stream(snapshots: AsyncIterator[AccumulatedResult]) -> None:
    try:
        result = asyncio.run(_render_stream(snapshots))
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from None

    if result.state is ResultState.FAILED:
        console.print(Panel(result.error or "Request failed", title="Error", border_style="red"))
        raise typer.Exit(1)
    if result.citations:
        console.print(_sources_table(result))
    if result.has_error_fragment:
        raise typer.Exit(1)


# ── Chat commands ────────────────────────────────────────────────


@app.command()
def ask(
    question: str = typer.Argument(..., help="Your question."),
    subject: str = _SUBJECT_OPTION,
    language: str = _LANGUAGE_OPTION,
) -> None:
    """Ask the Q&A tutor (answers are grounded with web search)."""
    _run_stream(_build_tutor().ask(question, subject=subject or None, language=language or None))


@app.command()
def books(
    query: str = typer.Argument(..., help="Chapter, topic, or exercise to look up."),
    subject: str = _SUBJECT_OPTION,
    language: str = _LANGUAGE_OPTION,
) -> None:
    """Look up textbook summaries and solved exercises."""
    _run_stream(_build_tutor().lookup_book(query, subject=subject or None, language=language or None))


@app.command()
def visual(
    question: str = typer.Argument(..., help="Concept to explain."),
    subject: str = _SUBJECT_OPTION,
    language: str = _LANGUAGE_OPTION,
) -> None:
    """Explain a concept step by step with diagrams and experiments."""
    _run_stream(_build_tutor().explain_visually(question, subject=subject or None, language=language or None))


@app.command()
def grammar(
    question: str = typer.Argument(..., help="Grammar rule or tense to explain."),
    language: str = _LANGUAGE_OPTION,
) -> None:
    """Explain grammar rules with tables and examples (no web search)."""
    _run_stream(_build_tutor().explain_grammar(question, language=language or None))


# ── Translator ───────────────────────────────────────────────────


def _render_translation(result: TranslationResult, target: str) -> None:
    console.print(Panel(result.main_translation, title=f"Translation ({target})", border_style="green"))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Original Word")
    table.add_column("Translation")
    for pair in result.word_by_word:
        table.add_row(pair.original, pair.translation)
    console.print(table)

    if result.explanation:
        console.print(f"[dim]{result.explanation}[/dim]")


@app.command()
def translate(
    text: str = typer.Argument(..., help="Text to translate."),
    to: str = typer.Option("", "--to", "-t", help="Target language."),
) -> None:
    """Translate text with a word-by-word breakdown."""
    tutor = _build_tutor()
    target = to or (tutor.settings.translation_targets or ["Urdu"])[0]
    try:
        result = asyncio.run(tutor.translate(text, target))
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from None
    except TutorError as e:
        console.print(Panel(f"Translation failed: {e}", title="Error", border_style="red"))
        raise typer.Exit(1) from None
    _render_translation(result, target)


# ── Config and keys ──────────────────────────────────────────────


@app.command("config")
def show_config() -> None:
    """Show the active model and curriculum settings."""
    tutor = _build_tutor()
    provider = tutor.provider.settings
    settings = tutor.settings

    table = Table(title="Tutor Center Configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Model", f"{provider.display_name} ({provider.model})")
    table.add_row("API key env", provider.api_key_env)
    table.add_row("Timeout", f"{provider.timeout}s")
    table.add_row("Max retries", str(provider.max_retries))
    table.add_row("Class level", settings.class_level)
    table.add_row("Board", settings.board)
    table.add_row("Subjects", ", ".join(settings.subjects))
    table.add_row("Languages", ", ".join(settings.languages))
    table.add_row("Translation targets", ", ".join(settings.translation_targets))
    console.print(table)


@app.command()
def setup(
    key: str = typer.Option(
        ..., prompt=f"{DEFAULT_KEY_ENV} (from {SIGNUP_URL})", hide_input=True,
        help="Provider API key to save.",
    ),
) -> None:
    """Save the provider API key to ~/.tutorcenter/keys.env."""
    path = save_keys({DEFAULT_KEY_ENV: key.strip()})
    console.print(f"[green]Saved key to {path}[/green]")


@app.command()
def logout() -> None:
    """Remove the saved API key file."""
    if clear_keys():
        console.print("[green]Removed saved keys.[/green]")
    else:
        console.print("[dim]No saved keys found.[/dim]")
