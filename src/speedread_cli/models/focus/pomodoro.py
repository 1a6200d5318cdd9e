"""Focus/break (Pomodoro) timer coordinated with reading playback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Literal

from speedread_cli.models.reader.scheduler import RunLoop, TimerHandle

logger = logging.getLogger(__name__)

FocusPhase = Literal["focus", "short_break", "long_break", "custom"]

PHASES: tuple[FocusPhase, ...] = ("focus", "short_break", "long_break", "custom")
BREAK_PHASES: tuple[FocusPhase, ...] = ("short_break", "long_break")
READING_PHASES: tuple[FocusPhase, ...] = ("focus", "custom")

TICK_SECONDS = 1.0


@dataclass
class PomodoroConfig:
    """Nominal phase durations in minutes."""

    focus_duration: int = 25
    short_break: int = 5
    long_break: int = 15
    custom_duration: int = 30

    def seconds_for(self, phase: FocusPhase) -> int:
        """Duration of a phase in seconds."""
        minutes = {
            "focus": self.focus_duration,
            "short_break": self.short_break,
            "long_break": self.long_break,
            "custom": self.custom_duration,
        }[phase]
        return minutes * 60


@dataclass
class FocusTimerState:
    """Snapshot of the focus timer."""

    phase: FocusPhase = "focus"
    remaining_seconds: int = 25 * 60
    running: bool = False


def parse_positive_minutes(value: object) -> int | None:
    """Return value as a positive whole number of minutes, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, str) and value.strip().isdecimal():
        minutes = int(value.strip())
    else:
        return None
    return minutes if minutes > 0 else None


def format_clock(seconds: int) -> str:
    """Format seconds as ``M:SS``."""
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins}:{secs:02d}"


class FocusTimer:
    """
    Four-phase countdown that hands off to and from the playback clock.

    The timer never touches playback state directly. It asks for playback
    to start or stop through ``request_playback`` and learns about playback
    transitions through ``on_playback_started``/``on_playback_stopped``.
    Every command is a no-op when already in its target state, so the two
    machines settle on the same result whatever order the signals arrive in.
    """

    def __init__(
        self,
        loop: RunLoop,
        request_playback: Callable[[bool], None],
        is_playing: Callable[[], bool],
        config: PomodoroConfig | None = None,
        on_phase_change: Callable[[FocusPhase], None] | None = None,
    ):
        self.loop = loop
        self.request_playback = request_playback
        self.is_playing = is_playing
        self.on_phase_change = on_phase_change

        config = config or PomodoroConfig()
        self._durations: dict[FocusPhase, int] = {
            phase: config.seconds_for(phase) for phase in PHASES
        }
        self._state = FocusTimerState(
            phase="focus", remaining_seconds=self._durations["focus"], running=False
        )
        self._handle: TimerHandle | None = None

    # -- state -------------------------------------------------------------

    @property
    def state(self) -> FocusTimerState:
        return replace(self._state)

    @property
    def phase(self) -> FocusPhase:
        return self._state.phase

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def on_break(self) -> bool:
        return self._state.phase in BREAK_PHASES

    def duration_for(self, phase: FocusPhase) -> int:
        """Nominal duration of a phase in seconds."""
        return self._durations[phase]

    def format_remaining(self) -> str:
        return format_clock(self._state.remaining_seconds)

    # -- internal ----------------------------------------------------------

    def _set_running(self, running: bool) -> None:
        if running == self._state.running:
            return

        self._state.running = running
        if running:
            self._handle = self.loop.call_every(TICK_SECONDS, self._tick, name="focus")
        elif self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        if not self._state.running:
            return

        self._state.remaining_seconds = max(0, self._state.remaining_seconds - 1)
        if self._state.remaining_seconds == 0:
            self._complete()

    def _complete(self) -> None:
        finished = self._state.phase
        logger.info("%s phase complete", finished)

        if finished in READING_PHASES:
            self.request_playback(False)
            self.switch_phase("short_break")
            self._set_running(True)
        else:
            self.switch_phase("focus")
            self.request_playback(True)

    # -- commands ----------------------------------------------------------

    def switch_phase(self, phase: FocusPhase) -> bool:
        """
        Enter a phase with a fresh countdown, paused.

        Returns:
            False if the timer was already in that phase
        """
        if phase not in PHASES:
            raise ValueError(f"Unknown focus phase: {phase}")
        if phase == self._state.phase:
            return False

        self._set_running(False)
        self._state.phase = phase
        self._state.remaining_seconds = self._durations[phase]
        logger.info("focus timer switched to %s (%ds)", phase, self._durations[phase])

        if self.on_phase_change:
            self.on_phase_change(phase)
        return True

    def select_phase(self, phase: FocusPhase) -> None:
        """Manual phase choice: stop reading first, then switch."""
        if self.is_playing():
            self.request_playback(False)
        self.switch_phase(phase)

    def skip_break(self) -> None:
        """Abandon the current break and return to focus."""
        if self.on_break:
            self.switch_phase("focus")

    def on_playback_started(self) -> None:
        """Reading started: breaks are abandoned, reading phases count down."""
        if self.on_break:
            self.switch_phase("focus")
        if self.is_playing():
            self._set_running(True)

    def on_playback_stopped(self) -> None:
        """Reading stopped: reading phases pause, breaks keep counting."""
        if self._state.phase in READING_PHASES and not self.is_playing():
            self._set_running(False)

    def toggle(self) -> None:
        """Start/pause button. Reading phases drive playback instead."""
        reading_phase = self._state.phase in READING_PHASES
        if self._state.running:
            if reading_phase:
                self.request_playback(False)
            else:
                self._set_running(False)
        else:
            if reading_phase:
                self.request_playback(True)
            else:
                self._set_running(True)

    def reset(self) -> None:
        """Pause and restore the full duration of the current phase."""
        if self._state.phase in READING_PHASES:
            self.request_playback(False)
        self._set_running(False)
        self._state.remaining_seconds = self._durations[self._state.phase]

    def set_custom_minutes(self, value: object) -> bool:
        """
        Set the custom phase duration.

        Only positive whole minutes are accepted; anything else is ignored
        and the previous duration stays. A countdown already in progress
        keeps its remaining time.

        Returns:
            True if the new duration was accepted
        """
        minutes = parse_positive_minutes(value)
        if minutes is None:
            logger.debug("rejected custom focus duration %r", value)
            return False

        self._durations["custom"] = minutes * 60
        logger.info("custom focus duration set to %d minutes", minutes)
        return True
