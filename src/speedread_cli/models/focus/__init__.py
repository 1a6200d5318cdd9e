"""Focus mode - Pomodoro and sleep timers for speedread-cli."""

from .pomodoro import FocusPhase, FocusTimer, FocusTimerState, PomodoroConfig
from .sleep import SleepTimer

__all__ = [
    "FocusPhase",
    "FocusTimer",
    "FocusTimerState",
    "PomodoroConfig",
    "SleepTimer",
]
