"""FocusFlow CLI - Pomodoro focus timer for the terminal."""

__version__ = "0.3.0"
