"""Reading session recording and summary statistics."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import asdict, dataclass

from .playback import PlaybackClock

logger = logging.getLogger(__name__)

# Total words needed to pass each reader level.
LEVEL_THRESHOLDS = (2000, 10000, 20000, 50000)


@dataclass(frozen=True)
class ReadingSession:
    """One completed playback run."""

    id: str
    started_at: float  # epoch seconds
    duration_seconds: float
    words_read: int
    wpm: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ReadingSession":
        """Create from dictionary."""
        return cls(**data)


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate statistics over a session log."""

    total_sessions: int
    total_words: int
    total_seconds: float
    average_wpm: int
    level: int

    def to_dict(self) -> dict:
        return asdict(self)


def reader_level(total_words: int) -> int:
    """Reader level 1-5 from the total number of words read."""
    return 1 + sum(1 for threshold in LEVEL_THRESHOLDS if total_words > threshold)


def format_total_time(seconds: float) -> str:
    """Format seconds as ``Xh Ym`` or ``Ym``."""
    seconds = int(seconds)
    hours = seconds // 3600
    mins = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


class SessionLog:
    """Append-only, ordered list of reading sessions."""

    def __init__(self, sessions: Iterable[ReadingSession] = ()):
        self._sessions: list[ReadingSession] = list(sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[ReadingSession]:
        return iter(self._sessions)

    def append(self, session: ReadingSession) -> None:
        self._sessions.append(session)

    @property
    def sessions(self) -> tuple[ReadingSession, ...]:
        return tuple(self._sessions)

    def summary(self) -> SessionSummary:
        """Compute totals, the average rate and the reader level."""
        count = len(self._sessions)
        total_words = sum(s.words_read for s in self._sessions)
        total_seconds = sum(s.duration_seconds for s in self._sessions)
        average_wpm = round(sum(s.wpm for s in self._sessions) / count) if count else 0
        return SessionSummary(
            total_sessions=count,
            total_words=total_words,
            total_seconds=total_seconds,
            average_wpm=average_wpm,
            level=reader_level(total_words),
        )


class SessionRecorder:
    """Turns playback start/stop transitions into ReadingSession records."""

    def __init__(
        self,
        playback: PlaybackClock,
        log: SessionLog,
        now: Callable[[], float] = time.time,
        on_record: Callable[[ReadingSession], None] | None = None,
    ):
        self.playback = playback
        self.log = log
        self.now = now
        self.on_record = on_record
        self._started_at: float | None = None
        self._start_index = 0
        playback.add_listener(self._on_flag_change)

    @property
    def in_progress(self) -> bool:
        return self._started_at is not None

    def _on_flag_change(self, advancing: bool) -> None:
        if advancing:
            self._started_at = self.now()
            self._start_index = self.playback.cursor
            return

        if self._started_at is None:
            return

        started_at = self._started_at
        duration = self.now() - started_at
        words_read = max(0, self.playback.cursor - self._start_index)
        self._started_at = None

        if words_read <= 0:
            return

        session = ReadingSession(
            id=str(uuid.uuid4()),
            started_at=started_at,
            duration_seconds=duration,
            words_read=words_read,
            wpm=self.playback.wpm,
        )
        self.log.append(session)
        logger.info(
            "recorded session: %d words in %.1fs at %d wpm",
            words_read,
            duration,
            session.wpm,
        )
        if self.on_record:
            self.on_record(session)
