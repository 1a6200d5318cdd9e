"""Reader engine wiring playback, timers, sessions and key dispatch together.

The engine is the only object the terminal view talks to. Playback state
belongs to the PlaybackClock; the focus and sleep timers reach it only by
posting intents, which are drained after the current callback or input
event has finished.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from speedread_cli.models.config_models import AppConfig
from speedread_cli.models.focus.pomodoro import (
    FocusPhase,
    FocusTimer,
    FocusTimerState,
)
from speedread_cli.models.focus.sleep import PRESETS, SleepTimer

from .dispatcher import Action, CommandDispatcher, is_reserved, key_label
from .history import HistoryLogger
from .playback import PlaybackClock
from .scheduler import RunLoop
from .sessions import SessionLog, SessionRecorder, SessionSummary
from .settings import RATE_STEP, ReaderSettings, SettingsController
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

ViewMode = Literal["read", "edit"]

EXTERNAL_LINKS: tuple[tuple[str, str], ...] = (
    ("Turath library", "https://app.turath.io/"),
    ("Quran and tafsir", "https://tafsir.app/1/1"),
    ("Dorar", "https://dorar.net/"),
)

# Keys handled by the focus panel while it is open, before normal dispatch.
FOCUS_PANEL_KEYS: dict[str, FocusPhase] = {
    "1": "focus",
    "2": "short_break",
    "3": "long_break",
    "4": "custom",
}


@dataclass(frozen=True)
class ReaderSnapshot:
    """Read-only view of the engine for renderers and tests."""

    words: tuple[str, ...]
    cursor: int
    advancing: bool
    wpm: int
    progress_percent: int
    remaining_words: int
    seconds_remaining: int
    view_mode: ViewMode
    settings: ReaderSettings
    focus: FocusTimerState
    sleep_remaining: int | None
    language: str
    fullscreen: bool
    focus_panel_open: bool
    external_menu_open: bool
    bindings_editor_open: bool
    stats_open: bool
    feedback: str | None


def settles(method: Callable) -> Callable:
    """Drain queued intents after an external input has been handled."""

    @functools.wraps(method)
    def wrapper(self: "ReaderEngine", *args, **kwargs):
        result = method(self, *args, **kwargs)
        self.loop.intents.drain()
        return result

    return wrapper


class ReaderEngine:
    """Coordinates the reader's state machines behind one interface."""

    def __init__(
        self,
        config: AppConfig | None = None,
        loop: RunLoop | None = None,
        history: HistoryLogger | None = None,
        now: Callable[[], float] = time.time,
        on_bindings_changed: Callable[[dict[str, str]], None] | None = None,
    ):
        self.config = config or AppConfig()
        self.settings = self.config.reader
        self.loop = loop or RunLoop()
        self.history = history
        self.on_bindings_changed = on_bindings_changed

        self.text = ""
        self.view_mode: ViewMode = "read"
        self.language = self.config.ui.language
        self.fullscreen = False
        self.focus_panel_open = False
        self.external_menu_open = False
        self.bindings_editor_open = False
        self.stats_open = False
        self.text_input_focused = False
        self.binding_selection = 0
        self._feedback: str | None = None
        self._feedback_at = 0.0

        self.playback = PlaybackClock(self.loop, wpm=self.settings.wpm)
        self.log = history.load_log() if history else SessionLog()
        self.recorder = SessionRecorder(
            self.playback,
            self.log,
            now=now,
            on_record=history.log_session if history else None,
        )
        self.focus = FocusTimer(
            self.loop,
            request_playback=self._post_playback,
            is_playing=lambda: self.playback.advancing,
            config=self.config.focus.to_pomodoro(),
            on_phase_change=self._on_phase_change,
        )
        self.sleep = SleepTimer(self.loop, force_stop=lambda: self._post_playback(False))
        self.playback.add_listener(self._on_playback_flag)

        self.controls = SettingsController(self.settings)
        self.dispatcher = CommandDispatcher(
            self.config.key_bindings,
            is_suppressed=self._dispatch_suppressed,
            on_rebind=self._on_rebind,
        )
        self._register_handlers()

    # -- wiring ------------------------------------------------------------

    def _post_playback(self, play: bool) -> None:
        self.loop.intents.post(lambda: self.request_playback(play))

    def _on_playback_flag(self, advancing: bool) -> None:
        if advancing:
            self.loop.intents.post(self.focus.on_playback_started)
        else:
            self.loop.intents.post(self.focus.on_playback_stopped)

    def _on_phase_change(self, phase: FocusPhase) -> None:
        self.show_feedback(phase.replace("_", " ").title())

    def _on_rebind(self, action: Action, key: str) -> None:
        self.config.key_bindings = self.dispatcher.to_config()
        if self.on_bindings_changed:
            self.on_bindings_changed(self.config.key_bindings)

    def _dispatch_suppressed(self) -> bool:
        return self.bindings_editor_open or self.text_input_focused

    def _register_handlers(self) -> None:
        table: dict[Action, Callable[[], None]] = {
            Action.TOGGLE_PLAYBACK: self.toggle_playback,
            Action.RESET: self.playback.reset,
            Action.SEEK_PREVIOUS: lambda: self.playback.step(-1),
            Action.SEEK_NEXT: lambda: self.playback.step(1),
            Action.INCREASE_FONT_SIZE: lambda: self.show_feedback(
                self.controls.adjust_font_size(1)
            ),
            Action.DECREASE_FONT_SIZE: lambda: self.show_feedback(
                self.controls.adjust_font_size(-1)
            ),
            Action.INCREASE_RATE: lambda: self._adjust_rate(RATE_STEP),
            Action.DECREASE_RATE: lambda: self._adjust_rate(-RATE_STEP),
            Action.TOGGLE_FULLSCREEN: self._toggle_fullscreen,
            Action.INCREASE_BRIGHTNESS: lambda: self.show_feedback(
                self.controls.adjust_brightness(1)
            ),
            Action.DECREASE_BRIGHTNESS: lambda: self.show_feedback(
                self.controls.adjust_brightness(-1)
            ),
            Action.CYCLE_FONT: lambda: self.show_feedback(self.controls.cycle_font()),
            Action.CYCLE_COLOR: lambda: self.show_feedback(self.controls.cycle_color()),
            Action.INCREASE_GLOW: lambda: self.show_feedback(
                self.controls.adjust_glow(1)
            ),
            Action.DECREASE_GLOW: lambda: self.show_feedback(
                self.controls.adjust_glow(-1)
            ),
            Action.TOGGLE_BOLD: lambda: self.show_feedback(self.controls.toggle_bold()),
            Action.TOGGLE_LANGUAGE: self._toggle_language,
            Action.CYCLE_MODE: lambda: self.show_feedback(self.controls.cycle_mode()),
            Action.TOGGLE_EDIT_MODE: self.toggle_edit_mode,
            Action.CLEAR_TEXT: self._clear_text,
            Action.TOGGLE_FOCUS_PANEL: self._toggle_focus_panel,
            Action.TOGGLE_EXTERNAL_MENU: self._toggle_external_menu,
            Action.TOGGLE_BINDINGS_EDITOR: self.toggle_bindings_editor,
            Action.TOGGLE_STATS: self._toggle_stats,
        }
        for action, handler in table.items():
            self.dispatcher.register(action, handler)

    # -- feedback ----------------------------------------------------------

    def show_feedback(self, message: str) -> None:
        self._feedback = message
        self._feedback_at = self.loop.now()

    def current_feedback(self) -> str | None:
        """Feedback message if it is still fresh."""
        if self._feedback is None:
            return None
        if self.loop.now() - self._feedback_at > self.config.ui.feedback_seconds:
            self._feedback = None
        return self._feedback

    # -- playback ----------------------------------------------------------

    @settles
    def set_text(self, text: str) -> None:
        """Replace the reading text. Playback rewinds to the start."""
        self.text = text
        self.playback.set_words(tokenize(text))
        self.playback.reset()
        logger.debug("text set: %d words", len(self.playback.words))

    @settles
    def request_playback(self, play: bool) -> None:
        """
        Start or stop reading.

        Starting from edit mode switches to read mode and rewinds first.
        Both directions are no-ops when already in the requested state.
        """
        if not play:
            self.playback.stop()
            return

        if self.view_mode == "edit":
            self.view_mode = "read"
            self.text_input_focused = False
            self.playback.reset()
        self.playback.start()

    @settles
    def toggle_playback(self) -> None:
        self.request_playback(not self.playback.advancing)

    @settles
    def reset(self) -> None:
        self.playback.reset()

    @settles
    def seek(self, index: int) -> None:
        self.playback.seek(index)

    @settles
    def set_rate(self, wpm: int) -> int:
        """Set words per minute, clamped to the supported range."""
        applied = self.playback.set_wpm(wpm)
        self.settings.wpm = applied
        return applied

    def _adjust_rate(self, delta: int) -> None:
        self.show_feedback(f"{self.set_rate(self.settings.wpm + delta)}")

    # -- focus and sleep timers -------------------------------------------

    @settles
    def select_focus_phase(self, phase: FocusPhase) -> None:
        self.focus.select_phase(phase)

    @settles
    def toggle_focus_timer(self) -> None:
        self.focus.toggle()

    @settles
    def reset_focus_timer(self) -> None:
        self.focus.reset()

    @settles
    def skip_break(self) -> None:
        self.focus.skip_break()

    @settles
    def set_custom_focus(self, minutes: object) -> bool:
        """Set the custom phase length and switch to it."""
        if not self.focus.set_custom_minutes(minutes):
            return False
        self.focus.select_phase("custom")
        return True

    @settles
    def set_sleep_timer(self, minutes: object | None) -> bool:
        return self.sleep.set(minutes)

    @settles
    def cycle_sleep_timer(self) -> None:
        """Step through the sleep presets, then off."""
        current = self.sleep.remaining_seconds
        if current is None:
            self.sleep.set(PRESETS[0])
        else:
            # Next preset above what is left; off after the longest one.
            upcoming = [m for m in PRESETS if m * 60 > current]
            self.sleep.set(upcoming[0] if upcoming else None)
        self.show_feedback(f"Sleep {self.sleep.format_remaining()}")

    # -- panels and modes --------------------------------------------------

    def _toggle_fullscreen(self) -> None:
        self.fullscreen = not self.fullscreen

    def _toggle_language(self) -> None:
        self.language = "en" if self.language == "ar" else "ar"
        self.show_feedback("English" if self.language == "en" else "عربي")

    def _toggle_focus_panel(self) -> None:
        self.focus_panel_open = not self.focus_panel_open

    def _toggle_external_menu(self) -> None:
        self.external_menu_open = not self.external_menu_open

    def _toggle_stats(self) -> None:
        self.stats_open = not self.stats_open

    @settles
    def toggle_edit_mode(self) -> None:
        """Switch between reading and editing. Editing pauses playback."""
        if self.view_mode == "read":
            self.playback.stop()
            self.view_mode = "edit"
        else:
            self.view_mode = "read"
            self.text_input_focused = False

    def _clear_text(self) -> None:
        if self.view_mode != "edit":
            return
        self.set_text("")
        self.show_feedback("Text Cleared")

    @settles
    def toggle_bindings_editor(self) -> None:
        self.bindings_editor_open = not self.bindings_editor_open
        if not self.bindings_editor_open:
            self.dispatcher.cancel_capture()

    # -- key input ---------------------------------------------------------

    def _handle_editor_key(self, key: str) -> bool:
        actions = list(Action)
        if key == "Escape":
            self.toggle_bindings_editor()
        elif key == "ArrowUp":
            self.binding_selection = (self.binding_selection - 1) % len(actions)
        elif key == "ArrowDown":
            self.binding_selection = (self.binding_selection + 1) % len(actions)
        elif key == "Enter":
            self.dispatcher.begin_capture(actions[self.binding_selection])
        else:
            return False
        return True

    def _handle_focus_panel_key(self, key: str) -> bool:
        if key in FOCUS_PANEL_KEYS:
            self.focus.select_phase(FOCUS_PANEL_KEYS[key])
        elif key == "t":
            self.focus.toggle()
        elif key == "0":
            self.focus.reset()
        elif key == "z":
            self.cycle_sleep_timer()
        else:
            return False
        return True

    @settles
    def handle_key(self, key: str) -> Action | None:
        """
        Route one key press.

        Capture mode takes the key first; then the bindings editor and the
        focus panel get their own navigation keys; everything else goes
        through the dispatcher.

        Returns:
            The dispatched action, if any
        """
        if self.dispatcher.capturing is not None:
            if is_reserved(key):
                self.show_feedback(f"'{key_label(key)}' is reserved for quitting")
            return self.dispatcher.dispatch(key)

        if self.bindings_editor_open and self._handle_editor_key(key):
            return None

        if self.focus.on_break and key == "Enter":
            self.focus.skip_break()
            return None

        if self.focus_panel_open and self._handle_focus_panel_key(key):
            return None

        return self.dispatcher.dispatch(key)

    # -- reporting ---------------------------------------------------------

    def summary(self) -> SessionSummary:
        return self.log.summary()

    def snapshot(self) -> ReaderSnapshot:
        return ReaderSnapshot(
            words=self.playback.words,
            cursor=self.playback.cursor,
            advancing=self.playback.advancing,
            wpm=self.playback.wpm,
            progress_percent=self.playback.progress_percent,
            remaining_words=self.playback.remaining_words,
            seconds_remaining=self.playback.seconds_remaining,
            view_mode=self.view_mode,
            settings=self.settings.model_copy(),
            focus=self.focus.state,
            sleep_remaining=self.sleep.remaining_seconds,
            language=self.language,
            fullscreen=self.fullscreen,
            focus_panel_open=self.focus_panel_open,
            external_menu_open=self.external_menu_open,
            bindings_editor_open=self.bindings_editor_open,
            stats_open=self.stats_open,
            feedback=self.current_feedback(),
        )


__all__ = ["EXTERNAL_LINKS", "ReaderEngine", "ReaderSnapshot"]
