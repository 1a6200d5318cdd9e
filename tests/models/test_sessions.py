"""Unit tests for the session recorder, session log and history storage."""

from __future__ import annotations

import pytest

from speedread_cli.models.reader.history import HistoryLogger
from speedread_cli.models.reader.playback import PlaybackClock
from speedread_cli.models.reader.sessions import (
    ReadingSession,
    SessionLog,
    SessionRecorder,
    format_total_time,
    reader_level,
)
from speedread_cli.models.reader.tokenizer import tokenize


def _session(words: int, wpm: int, seconds: float = 60.0, started: float = 0.0):
    return ReadingSession(
        id=f"s-{words}-{wpm}-{started}",
        started_at=started,
        duration_seconds=seconds,
        words_read=words,
        wpm=wpm,
    )


@pytest.fixture()
def playback(loop) -> PlaybackClock:
    return PlaybackClock(loop, tokenize("one two three four five"), wpm=600)


# ---------------------------------------------------------------------------
# SessionRecorder
# ---------------------------------------------------------------------------


class TestSessionRecorder:
    """Tests for SessionRecorder."""

    def test_full_run_records_all_words(self, playback, loop, clock) -> None:
        log = SessionLog()
        SessionRecorder(playback, log, now=clock)

        playback.start()
        loop.advance(1.0)

        assert len(log) == 1
        session = log.sessions[0]
        assert session.words_read == 5
        assert session.wpm == 600
        assert session.started_at == 0.0
        assert session.duration_seconds == pytest.approx(0.6)

    def test_pause_without_progress_is_dropped(self, playback, clock) -> None:
        log = SessionLog()
        recorder = SessionRecorder(playback, log, now=clock)

        playback.start()
        assert recorder.in_progress
        playback.stop()

        assert len(log) == 0
        assert not recorder.in_progress

    def test_each_play_pause_segment_is_its_own_session(
        self, playback, loop, clock
    ) -> None:
        log = SessionLog()
        SessionRecorder(playback, log, now=clock)

        playback.start()
        loop.advance(0.2)
        playback.stop()
        playback.start()
        loop.advance(0.1)
        playback.stop()

        assert [s.words_read for s in log] == [2, 1]

    def test_seek_backwards_never_goes_negative(self, playback, loop, clock) -> None:
        log = SessionLog()
        SessionRecorder(playback, log, now=clock)

        playback.seek(3)
        playback.start()
        playback.seek(0)
        playback.stop()

        assert len(log) == 0

    def test_on_record_callback(self, playback, loop, clock, mocker) -> None:
        on_record = mocker.Mock()
        SessionRecorder(playback, SessionLog(), now=clock, on_record=on_record)

        playback.start()
        loop.advance(0.2)
        playback.stop()

        on_record.assert_called_once()
        assert on_record.call_args.args[0].words_read == 2


# ---------------------------------------------------------------------------
# SessionLog summary
# ---------------------------------------------------------------------------


class TestSessionSummary:
    """Tests for SessionLog.summary() and helpers."""

    def test_empty_log(self) -> None:
        summary = SessionLog().summary()
        assert summary.total_sessions == 0
        assert summary.total_words == 0
        assert summary.average_wpm == 0
        assert summary.level == 1

    def test_totals_and_rounded_average(self) -> None:
        log = SessionLog([_session(100, 300), _session(200, 302, seconds=30)])
        summary = log.summary()

        assert summary.total_sessions == 2
        assert summary.total_words == 300
        assert summary.total_seconds == pytest.approx(90.0)
        assert summary.average_wpm == 301

    @pytest.mark.parametrize(
        ("words", "level"),
        [(0, 1), (2000, 1), (2001, 2), (10001, 3), (20001, 4), (50001, 5)],
    )
    def test_reader_level(self, words, level) -> None:
        assert reader_level(words) == level

    def test_format_total_time(self) -> None:
        assert format_total_time(59) == "0m"
        assert format_total_time(125) == "2m"
        assert format_total_time(3725) == "1h 2m"

    def test_session_dict_round_trip(self) -> None:
        session = _session(10, 250)
        assert ReadingSession.from_dict(session.to_dict()) == session


# ---------------------------------------------------------------------------
# HistoryLogger
# ---------------------------------------------------------------------------


class TestHistoryLogger:
    """Tests for SQLite-backed reading history."""

    def test_creates_database(self, tmp_path) -> None:
        db = tmp_path / "nested" / "history.db"
        HistoryLogger(db)
        assert db.exists()

    def test_log_and_load(self, tmp_path) -> None:
        history = HistoryLogger(tmp_path / "history.db")
        history.log_session(_session(10, 200, started=1.0))
        history.log_session(_session(20, 400, started=2.0))

        loaded = history.load_sessions()
        assert [s.words_read for s in loaded] == [10, 20]
        assert history.load_log().summary().total_words == 30

    def test_recent_sessions_newest_first(self, tmp_path) -> None:
        history = HistoryLogger(tmp_path / "history.db")
        for i in range(5):
            history.log_session(_session(i + 1, 300, started=float(i)))

        recent = history.get_recent_sessions(limit=2)
        assert [r["words_read"] for r in recent] == [5, 4]

    def test_get_stats(self, tmp_path) -> None:
        history = HistoryLogger(tmp_path / "history.db")
        history.log_session(_session(2500, 300))

        stats = history.get_stats()
        assert stats["total_words"] == 2500
        assert stats["level"] == 2
        assert stats["average_wpm"] == 300
