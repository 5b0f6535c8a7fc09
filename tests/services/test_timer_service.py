"""Tests for TimerService summaries and wiring."""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

import pytest

from focusflow_cli.adapters.rest_api import RestApiTimerStore
from focusflow_cli.adapters.sqlite.timer_repository import SqliteTimerStore
from focusflow_cli.models.focus.state import CompletedSession
from focusflow_cli.services.timer_service import (
    TimerService,
    build_store,
    format_duration,
    get_timer_service,
)

TODAY = date(2024, 6, 15)


def _session(day: int, duration: int = 1500) -> CompletedSession:
    return CompletedSession(
        started_at=f"2024-06-{day:02d}T12:00:00+00:00",
        completed_at=f"2024-06-{day:02d}T12:25:00+00:00",
        duration=duration,
    )


@pytest.fixture
def service(store, notifier):
    return TimerService(store, notifier, today=lambda: TODAY)


@pytest.mark.parametrize(
    ("minutes", "expected"), [(0, "0m"), (45, "45m"), (60, "1h 0m"), (125, "2h 5m")]
)
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


class TestStatus:
    def test_idle_status(self, service) -> None:
        status = service.status()

        assert status["status"] == "idle"
        assert status["time_remaining"] == 1500
        assert status["running"] is False
        assert status["progress_percent"] == 0
        assert status["session"] == "1 of 4"

    def test_timer_is_built_once(self, service) -> None:
        assert service.timer is service.timer


class TestHistory:
    def test_history_newest_first(self, service, store) -> None:
        for day in (13, 14, 15):
            store.append_completed_session(_session(day))

        history = service.history(limit=2)

        assert [s.started_at[:10] for s in history] == ["2024-06-15", "2024-06-14"]

    def test_today_sessions(self, service, store) -> None:
        store.append_completed_session(_session(14))
        store.append_completed_session(_session(15, duration=600))

        today = service.today_sessions()

        assert len(today) == 1
        assert today[0].duration == 600


class TestSummary:
    def test_summary_counts(self, service, store) -> None:
        store.append_completed_session(_session(13))
        store.append_completed_session(_session(15))
        store.append_completed_session(_session(15, duration=600))
        # Outside the window
        store.append_completed_session(_session(1))

        stats = service.summary(days=7)

        assert stats["total_sessions"] == 3
        assert stats["full_sessions"] == 2
        assert stats["skipped_sessions"] == 1
        assert stats["total_focus_minutes"] == 60
        assert stats["total_focus_time"] == "1h 0m"
        assert stats["avg_session_minutes"] == 20.0
        assert len(stats["daily"]) == 7
        assert stats["daily"]["2024-06-15"] == {"sessions": 2, "minutes": 35}
        assert stats["daily"]["2024-06-09"] == {"sessions": 0, "minutes": 0}

    def test_partial_minutes_add_up(self, service, store) -> None:
        for _ in range(3):
            store.append_completed_session(_session(15, duration=100))

        stats = service.summary(days=1)

        assert stats["total_focus_minutes"] == 5
        assert stats["avg_session_minutes"] == 1.7
        assert stats["daily"]["2024-06-15"] == {"sessions": 3, "minutes": 5}

    def test_summary_empty(self, service) -> None:
        stats = service.summary(days=1)

        assert stats["total_sessions"] == 0
        assert stats["avg_session_minutes"] == 0
        assert list(stats["daily"]) == ["2024-06-15"]

    def test_summary_rejects_zero_days(self, service) -> None:
        with pytest.raises(ValueError):
            service.summary(days=0)


class TestWiring:
    def test_local_backend_uses_sqlite(self, tmp_config) -> None:
        store = build_store(tmp_config.config, tmp_config)

        assert isinstance(store, SqliteTimerStore)
        assert store.db_path == tmp_config.data_dir / "focusflow.db"

    def test_remote_backend_uses_rest_api(self, tmp_config) -> None:
        tmp_config.use_backend("remote")
        tmp_config.save_credentials("cookie-value")

        store = build_store(tmp_config.config, tmp_config)

        assert isinstance(store, RestApiTimerStore)
        assert store.client.session_cookie == "cookie-value"
        assert store.client.base_url == "http://localhost:5000/api"

    def test_work_minutes_flow_into_timer(self, tmp_config) -> None:
        tmp_config.set_value("timer.work_minutes", "50")

        with patch(
            "focusflow_cli.services.timer_service.get_config_service",
            return_value=tmp_config,
        ):
            service = get_timer_service()

        assert service.config.work_duration == 3000
        assert service.timer.state.time_remaining == 3000
