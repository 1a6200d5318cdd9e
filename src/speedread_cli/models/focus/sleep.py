"""Sleep timer: stop reading after a number of minutes."""

from __future__ import annotations

import logging
from collections.abc import Callable

from speedread_cli.models.reader.scheduler import RunLoop, TimerHandle

from .pomodoro import format_clock, parse_positive_minutes

logger = logging.getLogger(__name__)

# Preset choices offered by the timer menu, in minutes.
PRESETS = (15, 30, 60)


class SleepTimer:
    """One-shot countdown that forces playback off when it reaches zero.

    The countdown runs whether or not text is advancing; pausing and
    resuming playback does not touch it.
    """

    def __init__(self, loop: RunLoop, force_stop: Callable[[], None]):
        self.loop = loop
        self.force_stop = force_stop
        self._remaining: int | None = None
        self._handle: TimerHandle | None = None

    @property
    def remaining_seconds(self) -> int | None:
        """Seconds left, or None when the timer is off."""
        return self._remaining

    @property
    def active(self) -> bool:
        return self._remaining is not None

    def format_remaining(self) -> str:
        if self._remaining is None:
            return "off"
        return format_clock(self._remaining)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def set(self, minutes: object | None) -> bool:
        """
        Start, replace or cancel the countdown.

        Args:
            minutes: Positive whole minutes, or None to turn the timer off

        Returns:
            False if minutes was invalid; the current countdown is then kept
        """
        if minutes is None:
            self._cancel()
            self._remaining = None
            logger.info("sleep timer off")
            return True

        parsed = parse_positive_minutes(minutes)
        if parsed is None:
            logger.debug("rejected sleep timer value %r", minutes)
            return False

        self._cancel()
        self._remaining = parsed * 60
        self._handle = self.loop.call_every(1.0, self._tick, name="sleep")
        logger.info("sleep timer set for %d minutes", parsed)
        return True

    def _tick(self) -> None:
        if self._remaining is None:
            return

        self._remaining -= 1
        if self._remaining > 0:
            return

        self._cancel()
        logger.info("sleep timer expired, stopping playback")
        self.force_stop()
        self._remaining = None
