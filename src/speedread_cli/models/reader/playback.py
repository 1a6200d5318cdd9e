"""Playback clock advancing the reading cursor through a word sequence."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

from .scheduler import RunLoop, TimerHandle

logger = logging.getLogger(__name__)

MIN_WPM = 60
MAX_WPM = 1000
DEFAULT_WPM = 300

NOT_STARTED = -1

FlagListener = Callable[[bool], None]
CursorListener = Callable[[int], None]


def clamp_wpm(value: int) -> int:
    """Clamp a words-per-minute value into the supported range."""
    return max(MIN_WPM, min(MAX_WPM, int(value)))


class PlaybackClock:
    """
    Owns the play/pause flag and the cursor.

    Every other component changes playback through ``start``, ``stop``,
    ``seek`` and ``reset``; nothing else writes the cursor.
    """

    def __init__(
        self,
        loop: RunLoop,
        words: Sequence[str] = (),
        wpm: int = DEFAULT_WPM,
    ):
        self.loop = loop
        self._words: tuple[str, ...] = tuple(words)
        self._cursor = NOT_STARTED
        self._advancing = False
        self._wpm = clamp_wpm(wpm)
        self._handle: TimerHandle | None = None
        self._listeners: list[FlagListener] = []
        self._cursor_listeners: list[CursorListener] = []

    # -- observers ---------------------------------------------------------

    def add_listener(self, listener: FlagListener) -> None:
        """Subscribe to advancing/paused transitions."""
        self._listeners.append(listener)

    def add_cursor_listener(self, listener: CursorListener) -> None:
        """Subscribe to cursor changes."""
        self._cursor_listeners.append(listener)

    # -- read-only state ---------------------------------------------------

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def advancing(self) -> bool:
        return self._advancing

    @property
    def wpm(self) -> int:
        return self._wpm

    @property
    def period(self) -> float:
        """Seconds between ticks at the current rate."""
        return 60.0 / self._wpm

    @property
    def last_index(self) -> int:
        return len(self._words) - 1

    @property
    def current_word(self) -> str | None:
        if 0 <= self._cursor < len(self._words):
            return self._words[self._cursor]
        return None

    @property
    def progress_percent(self) -> int:
        """Share of words shown so far, 0-100."""
        if not self._words:
            return 0
        processed = max(0, self._cursor + 1)
        return round(processed / len(self._words) * 100)

    @property
    def remaining_words(self) -> int:
        return max(0, len(self._words) - max(0, self._cursor + 1))

    @property
    def seconds_remaining(self) -> int:
        """Estimated reading time left at the current rate."""
        return math.ceil(self.remaining_words / self._wpm * 60)

    # -- internal mutation -------------------------------------------------

    def _clamp_index(self, index: int) -> int:
        return max(NOT_STARTED, min(self.last_index, int(index)))

    def _set_cursor(self, index: int) -> None:
        index = self._clamp_index(index)
        if index == self._cursor:
            return
        self._cursor = index
        for listener in self._cursor_listeners:
            listener(index)

    def _set_advancing(self, advancing: bool) -> None:
        if advancing == self._advancing:
            return
        self._advancing = advancing
        logger.debug(
            "playback %s at cursor %d", "started" if advancing else "stopped", self._cursor
        )
        for listener in self._listeners:
            listener(advancing)

    def _schedule(self) -> None:
        self._cancel()
        self._handle = self.loop.call_every(self.period, self.tick, name="playback")

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    # -- commands ----------------------------------------------------------

    def start(self) -> None:
        """Begin advancing. No-op if already advancing or there is no text."""
        if self._advancing or not self._words:
            return

        if self._cursor >= self.last_index:
            self._set_cursor(NOT_STARTED)

        self._schedule()
        self._set_advancing(True)

    def stop(self) -> None:
        """Stop advancing. Idempotent."""
        self._cancel()
        self._set_advancing(False)

    def toggle(self) -> None:
        if self._advancing:
            self.stop()
        else:
            self.start()

    def seek(self, index: int) -> None:
        """Move the cursor; the advancing flag is left as it is."""
        self._set_cursor(index)

    def step(self, delta: int) -> None:
        """Move the cursor relative to its current position."""
        self._set_cursor(self._cursor + delta)

    def tick(self) -> None:
        """Advance one word, or stop when the last word is showing."""
        if not self._advancing:
            return

        if self._cursor < self.last_index:
            self._set_cursor(self._cursor + 1)
        else:
            self.stop()

    def reset(self) -> None:
        """Stop and rewind to the not-started position."""
        self.stop()
        self._set_cursor(NOT_STARTED)

    def set_wpm(self, value: int) -> int:
        """
        Change the rate, clamping silently.

        While advancing the tick is rescheduled at the new period; the
        cursor is not advanced by the change itself.

        Returns:
            The rate actually applied
        """
        wpm = clamp_wpm(value)
        if wpm == self._wpm:
            return wpm

        self._wpm = wpm
        logger.debug("rate set to %d wpm", wpm)
        if self._advancing:
            self._schedule()
        return wpm

    def set_words(self, words: Sequence[str]) -> None:
        """Replace the word sequence, dropping a cursor that no longer fits."""
        self._words = tuple(words)
        if self._advancing:
            self.reset()
        elif self._cursor > self.last_index:
            self._set_cursor(NOT_STARTED)
