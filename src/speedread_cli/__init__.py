"""speedread-cli - a terminal speed reader with focus and sleep timers."""

__version__ = "0.1.0"
