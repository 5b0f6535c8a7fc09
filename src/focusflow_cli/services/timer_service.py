"""Timer service - wires the focus timer to its collaborators.

The service chooses the store for the configured backend, builds the
notifier, and computes history summaries for the presentation layer.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from rich.console import Console

from focusflow_cli.adapters.rest_api import RestApiTimerStore
from focusflow_cli.adapters.sqlite.timer_repository import SqliteTimerStore
from focusflow_cli.models.config_models import AppConfig
from focusflow_cli.models.focus.cycling import PomodoroConfig
from focusflow_cli.models.focus.machine import FocusTimer
from focusflow_cli.models.focus.state import CompletedSession
from focusflow_cli.repositories.repository import Notifier, TimerStateStore
from focusflow_cli.services.api.client import APIClient
from focusflow_cli.services.config_service import ConfigService, get_config_service
from focusflow_cli.services.notification_service import build_notifier


def _today() -> date:
    return datetime.now().astimezone().date()


def format_duration(total_minutes: int) -> str:
    """Format minutes as '1h 5m' or '45m'."""
    hours, minutes = divmod(int(total_minutes), 60)
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


class TimerService:
    """Facade over FocusTimer plus session-history queries."""

    def __init__(
        self,
        store: TimerStateStore,
        notifier: Notifier,
        config: PomodoroConfig | None = None,
        today: Callable[[], date] = _today,
    ):
        self.store = store
        self.notifier = notifier
        self.config = config or PomodoroConfig()
        self._today = today
        self._timer: FocusTimer | None = None

    @property
    def timer(self) -> FocusTimer:
        """The state machine, loaded from the store on first access."""
        if self._timer is None:
            self._timer = FocusTimer(self.store, self.notifier, self.config)
        return self._timer

    def status(self) -> dict[str, Any]:
        """Current state plus derived display values."""
        timer = self.timer
        state = timer.state
        return {
            "status": state.status,
            "time_remaining": state.time_remaining,
            "sessions_completed": state.sessions_completed,
            "active_since": state.active_since,
            "running": timer.is_running(),
            "progress_percent": round(timer.progress_percent(), 1),
            "session": f"{timer.current_session_ordinal()} of {self.config.sessions_before_long_break}",
        }

    def today_sessions(self) -> list[CompletedSession]:
        today = self._today()
        return self.store.list_completed_sessions(start=today, end=today)

    def history(self, limit: int = 20) -> list[CompletedSession]:
        """Most recent sessions first."""
        sessions = self.store.list_completed_sessions()
        return list(reversed(sessions))[:limit]

    def summary(self, days: int = 7) -> dict[str, Any]:
        """Focus statistics for the last N days, today included."""
        if days < 1:
            raise ValueError("days must be at least 1")

        end = self._today()
        start = end - timedelta(days=days - 1)
        sessions = self.store.list_completed_sessions(start=start, end=end)

        # Seconds are summed before converting so partial minutes add up
        daily_seconds: dict[str, list[int]] = {}
        for offset in range(days):
            day = (start + timedelta(days=offset)).isoformat()
            daily_seconds[day] = [0, 0]
        for session in sessions:
            day = session.started_datetime.astimezone().date().isoformat()
            bucket = daily_seconds.setdefault(day, [0, 0])
            bucket[0] += 1
            bucket[1] += session.duration
        daily = {
            day: {"sessions": count, "minutes": seconds // 60}
            for day, (count, seconds) in daily_seconds.items()
        }

        total_sessions = len(sessions)
        total_seconds = sum(s.duration for s in sessions)
        total_minutes = total_seconds // 60
        full_sessions = sum(1 for s in sessions if s.duration >= self.config.work_duration)

        return {
            "days": days,
            "total_sessions": total_sessions,
            "full_sessions": full_sessions,
            "skipped_sessions": total_sessions - full_sessions,
            "total_focus_minutes": total_minutes,
            "total_focus_time": format_duration(total_minutes),
            "avg_session_minutes": round(
                total_seconds / 60 / total_sessions if total_sessions > 0 else 0, 1
            ),
            "daily": daily,
        }


def build_store(config: AppConfig, config_service: ConfigService) -> TimerStateStore:
    """Create the store for the configured backend."""
    work_duration = config.timer.work_minutes * 60
    if config.storage.backend == "remote":
        credentials = config_service.load_credentials("remote") or {}
        client = APIClient(
            config.storage.endpoint,
            session_cookie=credentials.get("session_cookie"),
            timeout=config.storage.timeout,
            retry=config.storage.retry,
        )
        return RestApiTimerStore(
            client,
            state_path=config_service.remote_state_path(),
            work_duration=work_duration,
        )
    return SqliteTimerStore(config_service.local_db_path(), work_duration=work_duration)


def get_timer_service(console: Console | None = None) -> TimerService:
    """Build a TimerService from the active configuration."""
    config_service = get_config_service()
    config = config_service.config
    return TimerService(
        store=build_store(config, config_service),
        notifier=build_notifier(config.notifications, console=console),
        config=config.timer.to_pomodoro_config(),
    )
