"""Cooperative run loop driving the reader's repeating timers.

Every timer callback runs to completion before the next one starts, so state
mutations inside a callback never interleave. Commands that one component
issues to another while a callback is running are posted to the
``IntentQueue`` and drained once the callback returns.
"""

from __future__ import annotations

import itertools
import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Deadlines are computed from float periods (60 / wpm); allow rounding noise.
_EPSILON = 1e-9


class ManualClock:
    """Clock whose time only moves when told to. Used by tests and replays."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass(eq=False)
class TimerHandle:
    """A repeating timer registered on a RunLoop."""

    period: float
    callback: Callable[[], None]
    started_at: float
    name: str = ""
    seq: int = 0
    fired: int = 0
    cancelled: bool = field(default=False)

    @property
    def deadline(self) -> float:
        """Time of the next scheduled fire."""
        return self.started_at + (self.fired + 1) * self.period

    def cancel(self) -> None:
        """Cancel the timer. Takes effect immediately."""
        self.cancelled = True


class IntentQueue:
    """FIFO of deferred commands drained after each callback."""

    def __init__(self, limit: int = 100):
        self.limit = limit
        self._pending: deque[Callable[[], None]] = deque()
        self._draining = False

    def __len__(self) -> int:
        return len(self._pending)

    def post(self, intent: Callable[[], None]) -> None:
        """Queue a command to run after the current callback."""
        self._pending.append(intent)

    def drain(self) -> int:
        """
        Run queued commands until the queue is empty.

        Commands may post further commands; those run in the same drain.
        A drain started from inside another drain returns immediately and
        leaves the work to the outer one.

        Returns:
            Number of commands executed
        """
        if self._draining:
            return 0

        self._draining = True
        executed = 0
        try:
            while self._pending:
                if executed >= self.limit:
                    logger.error(
                        "intent queue exceeded %d commands, dropping %d",
                        self.limit,
                        len(self._pending),
                    )
                    self._pending.clear()
                    break
                intent = self._pending.popleft()
                intent()
                executed += 1
        finally:
            self._draining = False
        return executed


class RunLoop:
    """Single-threaded scheduler of fixed-period repeating timers."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        intents: IntentQueue | None = None,
    ):
        self.clock = clock
        self.intents = intents or IntentQueue()
        self._timers: list[TimerHandle] = []
        self._seq = itertools.count()

    def now(self) -> float:
        """Current loop time."""
        return self.clock()

    @property
    def timers(self) -> list[TimerHandle]:
        """Live (not cancelled) timers."""
        return [t for t in self._timers if not t.cancelled]

    def call_every(
        self, period: float, callback: Callable[[], None], name: str = ""
    ) -> TimerHandle:
        """
        Schedule a callback every ``period`` seconds.

        The first call happens one period from now.
        """
        if period <= 0:
            raise ValueError(f"Timer period must be positive, got {period}")

        handle = TimerHandle(
            period=period,
            callback=callback,
            started_at=self.now(),
            name=name,
            seq=next(self._seq),
        )
        self._timers.append(handle)
        logger.debug("scheduled timer %s every %.3fs", name or handle.seq, period)
        return handle

    def _next_due(self, until: float) -> TimerHandle | None:
        due = [
            t for t in self._timers if not t.cancelled and t.deadline <= until + _EPSILON
        ]
        if not due:
            return None
        return min(due, key=lambda t: (t.deadline, t.seq))

    def _fire(self, handle: TimerHandle) -> None:
        handle.fired += 1
        handle.callback()
        self.intents.drain()

    def _prune(self) -> None:
        self._timers = [t for t in self._timers if not t.cancelled]

    def run_due(self, now: float | None = None) -> int:
        """
        Fire every timer whose deadline has passed.

        A timer that fell behind fires once per missed period, oldest
        deadline first, so no tick is lost.

        Returns:
            Number of callbacks fired
        """
        if now is None:
            now = self.now()

        fired = 0
        while (handle := self._next_due(now)) is not None:
            self._fire(handle)
            fired += 1

        self._prune()
        return fired

    def advance(self, seconds: float) -> int:
        """
        Move a ManualClock forward, firing timers at their exact deadlines.

        Returns:
            Number of callbacks fired
        """
        if not isinstance(self.clock, ManualClock):
            raise TypeError("advance() requires a ManualClock")

        target = self.clock.now + seconds
        fired = 0
        while (handle := self._next_due(target)) is not None:
            self.clock.now = max(self.clock.now, handle.deadline)
            self._fire(handle)
            fired += 1

        self.clock.now = target
        self._prune()
        return fired
