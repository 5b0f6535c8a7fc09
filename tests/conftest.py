"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state.
"""

from __future__ import annotations

import logging
import logging.handlers
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from focusflow_cli.adapters.sqlite.timer_repository import SqliteTimerStore
from focusflow_cli.models.focus.cycling import PomodoroConfig
from focusflow_cli.models.focus.machine import FocusTimer
from focusflow_cli.models.focus.scheduler import TickScheduler
from focusflow_cli.models.focus.state import CompletedSession, TimerState
from focusflow_cli.repositories.repository import Notifier, TimerStateStore, sessions_in_range

# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 15, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeMonotonic:
    """Monotonic clock for TickScheduler tests."""

    def __init__(self):
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class InMemoryTimerStore(TimerStateStore):
    """Store double keeping everything in memory."""

    def __init__(self, state: TimerState | None = None):
        self.state = state
        self.saves: list[TimerState] = []
        self.sessions: list[CompletedSession] = []

    def load_state(self) -> TimerState:
        if self.state is None:
            return TimerState.idle(1500)
        return self.state.copy()

    def save_state(self, state: TimerState) -> None:
        self.state = state.copy()
        self.saves.append(state.copy())

    def append_completed_session(self, session: CompletedSession) -> None:
        self.sessions.append(session)

    def list_completed_sessions(self, start=None, end=None) -> list[CompletedSession]:
        return sessions_in_range(self.sessions, start, end)


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Keep the application log file inside tmp_path."""
    import focusflow_cli.utils.logger as logger_mod

    def _drop_app_handlers():
        from rich.logging import RichHandler

        app_logger = logging.getLogger("focusflow_cli")
        for handler in list(app_logger.handlers):
            if isinstance(handler, (logging.handlers.RotatingFileHandler, RichHandler)):
                app_logger.removeHandler(handler)
                handler.close()

    logger_mod._logger = None
    _drop_app_handlers()
    with patch("focusflow_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    logger_mod._logger = None
    _drop_app_handlers()


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from focusflow_cli.services.config_service import get_config_service

    get_config_service.cache_clear()
    with patch(
        "focusflow_cli.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ):
        with patch(
            "focusflow_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            yield get_config_service()
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Timer collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def monotonic():
    return FakeMonotonic()


@pytest.fixture()
def notifier():
    """A notifier double that records calls."""
    mock = MagicMock(spec=Notifier)
    mock.permission = "granted"
    return mock


@pytest.fixture()
def store():
    return InMemoryTimerStore()


@pytest.fixture()
def sqlite_store(tmp_path):
    return SqliteTimerStore(tmp_path / "focusflow.db")


@pytest.fixture()
def config():
    return PomodoroConfig()


@pytest.fixture()
def make_timer(store, notifier, config, clock, monotonic):
    """Factory for FocusTimer wired to test doubles."""

    def _make(**overrides) -> FocusTimer:
        kwargs = {
            "store": store,
            "notifier": notifier,
            "config": config,
            "scheduler": TickScheduler(clock=monotonic),
            "clock": clock,
        }
        kwargs.update(overrides)
        return FocusTimer(**kwargs)

    return _make
