"""Read command: open text in the full-screen speed reader."""

import sys
from pathlib import Path

import typer

from speedread_cli.models.focus.pomodoro import parse_positive_minutes
from speedread_cli.models.reader.engine import ReaderEngine
from speedread_cli.models.reader.history import HistoryLogger
from speedread_cli.models.reader.keyboard import create_keyboard
from speedread_cli.models.reader.settings import READING_MODES
from speedread_cli.services.config_service import get_config_service
from speedread_cli.ui.reader_view import ReaderDisplay
from speedread_cli.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
)
from speedread_cli.utils.logger import get_logger
from speedread_cli.utils.ui.console import get_console

from .decorators import AppError, command_wrapper


def load_text(file: Path | None, text: str | None) -> str:
    """Text from --text, a file, or piped stdin, in that order."""
    if text is not None:
        return text
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise AppError(f"File not found: {file}", ERROR_NOT_FOUND) from e
        except (OSError, UnicodeDecodeError) as e:
            raise AppError(f"Cannot read {file}: {e}", ERROR_NOT_FOUND) from e
    if not sys.stdin.isatty():
        return sys.stdin.read()
    raise AppError("No text given. Pass a FILE, --text or pipe text in.", ERROR_INVALID_ARGS)


def build_engine(wpm: int | None = None, mode: str | None = None) -> ReaderEngine:
    """Engine wired to the stored configuration and reading history."""
    config_svc = get_config_service()
    engine = ReaderEngine(
        config=config_svc.config,
        history=HistoryLogger(config_svc.history_path),
        on_bindings_changed=config_svc.save_key_bindings,
    )
    if wpm is not None:
        engine.set_rate(wpm)
    if mode is not None:
        engine.settings.reading_mode = mode
    return engine


@command_wrapper
def read(
    file: Path | None = typer.Argument(None, help="Text file to read"),
    text: str | None = typer.Option(None, "--text", "-t", help="Text to read"),
    wpm: int | None = typer.Option(
        None, "--wpm", "-w", help="Words per minute (clamped to 60-1000)"
    ),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Reading mode"),
    sleep: int | None = typer.Option(
        None, "--sleep", help="Stop reading after this many minutes"
    ),
    autoplay: bool = typer.Option(
        False, "--play", help="Start reading immediately"
    ),
) -> None:
    """Open text in the full-screen speed reader."""
    if mode is not None and mode not in READING_MODES:
        raise AppError(
            f"Unknown reading mode '{mode}'. Choose from: {', '.join(READING_MODES)}",
            ERROR_INVALID_ARGS,
        )
    if sleep is not None and parse_positive_minutes(sleep) is None:
        raise AppError("--sleep must be a positive number of minutes", ERROR_INVALID_ARGS)

    content = load_text(file, text)
    engine = build_engine(wpm=wpm, mode=mode)
    engine.set_text(content)
    if not engine.playback.words:
        raise AppError("The text contains no words", ERROR_INVALID_ARGS)

    if sleep is not None:
        engine.set_sleep_timer(sleep)
    if autoplay:
        engine.request_playback(True)

    get_logger().info("reading %d words at %d wpm", len(engine.playback.words), engine.playback.wpm)
    try:
        keyboard = create_keyboard()
    except OSError as e:
        raise AppError(f"No terminal available for key input: {e}", ERROR_GENERAL) from e
    ReaderDisplay(engine, console=get_console()).run(keyboard)
    get_config_service().save_config()

    summary = engine.summary()
    get_console().print(
        f"[green]✓[/green] {summary.total_words} words read over "
        f"{summary.total_sessions} sessions (level {summary.level})"
    )
