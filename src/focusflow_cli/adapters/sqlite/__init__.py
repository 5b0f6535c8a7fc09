"""SQLite adapter module - Local database storage implementation."""

from focusflow_cli.adapters.sqlite.timer_repository import SqliteTimerStore

__all__ = ["SqliteTimerStore"]
