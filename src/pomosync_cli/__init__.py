"""PomoSync CLI - Pomodoro timer with cross-device history sync."""

__version__ = "0.1.0"
