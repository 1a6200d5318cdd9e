"""Unit tests for the cooperative run loop and intent queue."""

from __future__ import annotations

import pytest

from speedread_cli.models.reader.scheduler import IntentQueue, ManualClock, RunLoop


# ---------------------------------------------------------------------------
# IntentQueue
# ---------------------------------------------------------------------------


class TestIntentQueue:
    """Tests for IntentQueue."""

    def test_drain_runs_in_fifo_order(self) -> None:
        queue = IntentQueue()
        calls = []
        queue.post(lambda: calls.append(1))
        queue.post(lambda: calls.append(2))

        assert queue.drain() == 2
        assert calls == [1, 2]
        assert len(queue) == 0

    def test_intents_posted_during_drain_run_in_same_drain(self) -> None:
        queue = IntentQueue()
        calls = []

        def first():
            calls.append("first")
            queue.post(lambda: calls.append("second"))

        queue.post(first)
        assert queue.drain() == 2
        assert calls == ["first", "second"]

    def test_nested_drain_returns_zero(self) -> None:
        queue = IntentQueue()
        nested = []
        queue.post(lambda: nested.append(queue.drain()))

        queue.drain()
        assert nested == [0]

    def test_limit_drops_runaway_intents(self) -> None:
        queue = IntentQueue(limit=10)

        def ping():
            queue.post(ping)

        queue.post(ping)
        assert queue.drain() == 10
        assert len(queue) == 0


# ---------------------------------------------------------------------------
# RunLoop
# ---------------------------------------------------------------------------


class TestRunLoop:
    """Tests for RunLoop timers."""

    def test_rejects_non_positive_period(self, loop) -> None:
        with pytest.raises(ValueError):
            loop.call_every(0, lambda: None)

    def test_first_call_after_one_period(self, loop) -> None:
        calls = []
        loop.call_every(1.0, lambda: calls.append(loop.now()))

        assert loop.advance(0.5) == 0
        assert loop.advance(0.5) == 1
        assert calls == [1.0]

    def test_behind_timer_fires_once_per_missed_period(self, clock) -> None:
        loop = RunLoop(clock=clock)
        calls = []
        loop.call_every(0.1, lambda: calls.append(1))

        clock.advance(0.5)
        assert loop.run_due() == 5
        assert len(calls) == 5

    def test_timers_fire_in_deadline_order(self, loop) -> None:
        calls = []
        loop.call_every(0.5, lambda: calls.append("slow"))
        loop.call_every(0.25, lambda: calls.append("fast"))

        loop.advance(1.0)
        # Equal deadlines fire in scheduling order
        assert calls == ["fast", "slow", "fast", "fast", "slow", "fast"]

    def test_cancel_takes_effect_within_same_pass(self, clock) -> None:
        loop = RunLoop(clock=clock)
        calls = []
        victim = loop.call_every(1.0, lambda: calls.append("victim"))
        loop.call_every(0.5, victim.cancel)

        clock.advance(1.0)
        loop.run_due()
        assert calls == []
        assert victim not in loop.timers

    def test_intents_drained_after_each_callback(self, loop) -> None:
        order = []

        def callback():
            order.append("callback")
            loop.intents.post(lambda: order.append("intent"))

        loop.call_every(1.0, callback)
        loop.advance(2.0)
        assert order == ["callback", "intent", "callback", "intent"]

    def test_advance_requires_manual_clock(self) -> None:
        loop = RunLoop(clock=lambda: 0.0)
        with pytest.raises(TypeError):
            loop.advance(1.0)

    def test_manual_clock(self) -> None:
        clock = ManualClock(start=5.0)
        clock.advance(2.5)
        assert clock() == 7.5
