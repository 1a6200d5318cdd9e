"""Unit tests for the focus/break timer."""

from __future__ import annotations

import pytest

from speedread_cli.models.focus.pomodoro import (
    FocusTimer,
    PomodoroConfig,
    format_clock,
    parse_positive_minutes,
)


class FakePlayback:
    """Records playback requests and applies them like the real engine."""

    def __init__(self):
        self.playing = False
        self.requests: list[bool] = []

    def request(self, play: bool) -> None:
        self.requests.append(play)
        self.playing = play


@pytest.fixture()
def playback() -> FakePlayback:
    return FakePlayback()


@pytest.fixture()
def timer(loop, playback) -> FocusTimer:
    return FocusTimer(
        loop,
        request_playback=playback.request,
        is_playing=lambda: playback.playing,
        config=PomodoroConfig(focus_duration=1, short_break=1),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    """Tests for parse_positive_minutes and format_clock."""

    @pytest.mark.parametrize("value", [0, -5, "-5", "0", "", "abc", "1.5", 2.5, None, True])
    def test_rejects_invalid_minutes(self, value) -> None:
        assert parse_positive_minutes(value) is None

    @pytest.mark.parametrize(("value", "expected"), [(1, 1), ("45", 45), (" 10 ", 10)])
    def test_accepts_positive_minutes(self, value, expected) -> None:
        assert parse_positive_minutes(value) == expected

    def test_format_clock(self) -> None:
        assert format_clock(1500) == "25:00"
        assert format_clock(61) == "1:01"
        assert format_clock(-3) == "0:00"

    def test_default_durations(self) -> None:
        config = PomodoroConfig()
        assert config.seconds_for("focus") == 1500
        assert config.seconds_for("short_break") == 300
        assert config.seconds_for("long_break") == 900
        assert config.seconds_for("custom") == 1800


# ---------------------------------------------------------------------------
# Phase completion
# ---------------------------------------------------------------------------


class TestCompletion:
    """Tests for automatic phase transitions."""

    def test_focus_completion_starts_break_and_stops_reading(
        self, timer, loop, playback
    ) -> None:
        playback.playing = True
        timer.on_playback_started()
        assert timer.running

        loop.advance(60)

        assert timer.phase == "short_break"
        assert timer.running
        assert timer.remaining_seconds == 60
        assert playback.requests == [False]

    def test_break_completion_returns_to_focus_and_resumes(
        self, timer, loop, playback
    ) -> None:
        timer.switch_phase("short_break")
        timer.toggle()
        assert timer.running

        loop.advance(60)

        assert timer.phase == "focus"
        assert playback.requests == [True]

    def test_focus_does_not_count_down_while_paused(self, timer, loop) -> None:
        loop.advance(30)
        assert timer.remaining_seconds == 60


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestCommands:
    """Tests for the timer's commands."""

    def test_switch_phase_is_idempotent(self, timer, mocker) -> None:
        on_change = mocker.Mock()
        timer.on_phase_change = on_change

        assert timer.switch_phase("long_break") is True
        assert timer.switch_phase("long_break") is False
        on_change.assert_called_once_with("long_break")

    def test_unknown_phase_raises(self, timer) -> None:
        with pytest.raises(ValueError):
            timer.switch_phase("nap")

    def test_select_phase_stops_reading_first(self, timer, playback) -> None:
        playback.playing = True
        timer.select_phase("long_break")
        assert playback.requests == [False]
        assert timer.phase == "long_break"
        assert not timer.running

    def test_playback_start_abandons_break(self, timer, playback) -> None:
        timer.switch_phase("short_break")
        playback.playing = True
        timer.on_playback_started()
        assert timer.phase == "focus"
        assert timer.running

    def test_playback_stop_pauses_reading_phase_only(self, timer, playback) -> None:
        playback.playing = True
        timer.on_playback_started()
        playback.playing = False
        timer.on_playback_stopped()
        assert not timer.running

        timer.switch_phase("short_break")
        timer.toggle()
        timer.on_playback_stopped()
        assert timer.running

    def test_toggle_in_reading_phase_drives_playback(self, timer, playback) -> None:
        timer.toggle()
        assert playback.requests == [True]

    def test_skip_break(self, timer) -> None:
        timer.skip_break()
        assert timer.phase == "focus"
        timer.switch_phase("long_break")
        timer.skip_break()
        assert timer.phase == "focus"

    def test_reset_restores_full_duration(self, timer, loop, playback) -> None:
        timer.switch_phase("short_break")
        timer.toggle()
        loop.advance(10)
        timer.reset()
        assert timer.remaining_seconds == 60
        assert not timer.running

    @pytest.mark.parametrize("value", [0, "-5"])
    def test_invalid_custom_duration_keeps_previous(self, loop, value) -> None:
        timer = FocusTimer(loop, request_playback=lambda play: None, is_playing=lambda: False)
        assert timer.set_custom_minutes(value) is False
        assert timer.duration_for("custom") == 1800

    def test_custom_duration_is_not_retroactive(self, timer, loop) -> None:
        timer.switch_phase("custom")
        timer._set_running(True)
        loop.advance(5)

        assert timer.set_custom_minutes(10) is True
        assert timer.remaining_seconds == 1795
        assert timer.duration_for("custom") == 600

    def test_state_is_a_copy(self, timer) -> None:
        state = timer.state
        state.phase = "long_break"
        assert timer.phase == "focus"
