"""Command-line interface for Pommai.

Provides ``pommai resolve``, ``triggers``, ``listen``, ``serve`` and
``status``.  The entry point is registered in ``pyproject.toml`` as
``pommai = "pommai.cli:cli"``.
"""

import asyncio
import logging
from pathlib import Path

import click
import httpx

from pommai.config import VOCAB_PATH, get_port
from pommai.resolver.matcher import TriggerMatcher
from pommai.resolver.registry import TriggerRegistry
from pommai.resolver.types import LetterInfo, MatchResult, TriggerCategory, WordInfo
from pommai.vocab.loader import load_registry

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_MIN_PORT = 1024
_MAX_PORT = 65535

_vocab_option = click.option(
    "--vocab",
    "vocab_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Vocabulary JSON file (default: POMMAI_VOCAB_PATH or built-in tables)",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_registry(vocab_path: Path | None) -> TriggerRegistry:
    """Load the registry, turning unreadable files into a CLI error."""
    try:
        return load_registry(vocab_path or VOCAB_PATH)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Could not load vocabulary: {exc}") from exc


def _resolve_port(port: int | None) -> int:
    port = port if port is not None else get_port()
    if not (_MIN_PORT <= port <= _MAX_PORT):
        raise click.BadParameter(
            f"Port must be between {_MIN_PORT} and {_MAX_PORT}, got {port}."
        )
    return port


def _describe_payload(payload) -> str:
    if isinstance(payload, LetterInfo):
        return f"{payload.display_form} ({payload.name or payload.letter})"
    if isinstance(payload, WordInfo):
        gloss = f" - {payload.gloss_english}" if payload.gloss_english else ""
        return f"{payload.surface_form}{gloss}"
    return str(payload)


def _format_result(result: MatchResult) -> str:
    if not result.found:
        return click.style("No match", fg="yellow")
    return (
        click.style(f"{result.category.value}: {_describe_payload(result.payload)}", fg="green")
        + f"  [tier={result.tier.value}, trigger={result.matched_trigger}]"
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Pommai -- Tamil voice commands for an animated character."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT
    )


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("text")
@_vocab_option
def resolve(text: str, vocab_path: Path | None) -> None:
    """Resolve TEXT as if it had been spoken."""
    matcher = TriggerMatcher(_load_registry(vocab_path))
    click.echo(_format_result(matcher.resolve_text(text)))


# ---------------------------------------------------------------------------
# triggers
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--category",
    type=click.Choice([c.value for c in TriggerCategory]),
    default=None,
    help="Only list one category",
)
@_vocab_option
def triggers(category: str | None, vocab_path: Path | None) -> None:
    """List the trigger phrases the resolver knows."""
    registry = _load_registry(vocab_path)
    entries = (
        registry.by_category(TriggerCategory(category)) if category else list(registry)
    )
    for entry in entries:
        click.echo(
            f"{entry.category.value:<8} {entry.normalized_text:<20} "
            f"{_describe_payload(entry.payload)}"
        )
    click.echo(f"{len(entries)} triggers")


# ---------------------------------------------------------------------------
# listen
# ---------------------------------------------------------------------------


async def _listen_forever(registry: TriggerRegistry) -> None:
    from pommai.engine import CommandEngine
    from pommai.stt.whisper_recognizer import WhisperRecognizer

    engine = CommandEngine(WhisperRecognizer(), registry)
    engine.on_transcript(
        lambda text, is_final: click.echo(f"{'>' if is_final else '~'} {text}")
    )
    engine.on_resolved(lambda result: click.echo(_format_result(result)))
    engine.on_session_error(
        lambda error: click.echo(click.style(f"Recognizer error: {error.kind}", fg="red"))
    )

    await engine.start()
    try:
        await asyncio.Event().wait()
    finally:
        await engine.close()


@cli.command()
@_vocab_option
def listen(vocab_path: Path | None) -> None:
    """Listen continuously and print what is recognized (Ctrl-C to quit)."""
    from pommai.session.errors import InitializationError

    registry = _load_registry(vocab_path)
    click.echo("Listening... say a command, a letter or a word.")
    try:
        asyncio.run(_listen_forever(registry))
    except InitializationError as exc:
        click.echo(click.style(f"Speech recognition unavailable: {exc}", fg="red"))
        raise SystemExit(1)
    except KeyboardInterrupt:
        click.echo("Stopped.")


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--port", default=None, type=int, help="Server port (default: 7866)")
@_vocab_option
@click.option("--no-listen", is_flag=True, help="Don't start listening on startup")
def serve(port: int | None, vocab_path: Path | None, no_listen: bool) -> None:
    """Run the HTTP API in the foreground."""
    import uvicorn

    from pommai.server.app import create_app

    port = _resolve_port(port)
    logging.getLogger().setLevel(logging.INFO)
    app = create_app(vocab_path=vocab_path or VOCAB_PATH, auto_listen=not no_listen)
    click.echo(f"Starting Pommai on port {port}...")
    uvicorn.run(app, host="127.0.0.1", port=port, log_level="info")


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--port", default=None, type=int, help="Server port to check")
def status(port: int | None) -> None:
    """Show the state of a running Pommai server."""
    port = _resolve_port(port)
    try:
        resp = httpx.get(f"http://127.0.0.1:{port}/health", timeout=2.0)
        data = resp.json()
    except (httpx.ConnectError, httpx.TimeoutException, OSError):
        click.echo(click.style(f"No Pommai server responding on port {port}.", fg="yellow"))
        raise SystemExit(1)
    except ValueError:
        click.echo(click.style("Server returned an invalid health response.", fg="red"))
        raise SystemExit(1)

    click.echo(click.style("Server is healthy.", fg="green"))
    click.echo(f"  Version:   {data.get('version', '?')}")
    click.echo(f"  Session:   {data.get('session_status', '?')}")
    click.echo(f"  Listening: {data.get('desired_listening', '?')}")
    if data.get("init_error"):
        click.echo(click.style(f"  Recognizer: {data['init_error']}", fg="red"))
