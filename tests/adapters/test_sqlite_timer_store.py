"""Tests for the SQLite timer store."""

from __future__ import annotations

import sqlite3
import stat
from datetime import date

import pytest

from focusflow_cli.adapters.sqlite.schema import SCHEMA_VERSION, get_schema_version
from focusflow_cli.adapters.sqlite.timer_repository import SqliteTimerStore
from focusflow_cli.models.focus.state import CompletedSession, TimerState
from focusflow_cli.repositories.repository import StoreError


def _session(started: str, completed: str, duration: int = 1500) -> CompletedSession:
    return CompletedSession(started_at=started, completed_at=completed, duration=duration)


class TestSchema:
    def test_schema_created(self, tmp_path) -> None:
        store = SqliteTimerStore(tmp_path / "db.sqlite")

        with sqlite3.connect(store.db_path) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
            version = get_schema_version(conn)

        assert {"timer_state", "pomodoro_sessions", "schema_version"} <= tables
        assert version == SCHEMA_VERSION

    def test_schema_is_idempotent(self, tmp_path) -> None:
        path = tmp_path / "db.sqlite"
        SqliteTimerStore(path).save_state(TimerState("work", 100, 1, None))

        store = SqliteTimerStore(path)

        assert store.load_state() == TimerState("work", 100, 1, None)

    def test_new_database_is_private(self, tmp_path) -> None:
        store = SqliteTimerStore(tmp_path / "db.sqlite")

        mode = stat.S_IMODE(store.db_path.stat().st_mode)
        assert mode == 0o600


class TestState:
    def test_missing_row_gives_idle(self, sqlite_store) -> None:
        assert sqlite_store.load_state() == TimerState.idle(1500)

    def test_idle_uses_configured_work_duration(self, tmp_path) -> None:
        store = SqliteTimerStore(tmp_path / "db.sqlite", work_duration=3000)
        assert store.load_state().time_remaining == 3000

    def test_save_then_load_round_trip(self, sqlite_store) -> None:
        state = TimerState("longBreak", 812, 4, "2024-06-15T09:00:00+00:00")

        sqlite_store.save_state(state)

        assert sqlite_store.load_state() == state

    def test_save_overwrites(self, sqlite_store) -> None:
        sqlite_store.save_state(TimerState("work", 100, 0, None))
        sqlite_store.save_state(TimerState("break", 300, 1, None))

        with sqlite3.connect(sqlite_store.db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM timer_state").fetchone()[0]

        assert count == 1
        assert sqlite_store.load_state().status == "break"

    def test_corrupt_row_gives_idle(self, sqlite_store) -> None:
        with sqlite3.connect(sqlite_store.db_path) as conn:
            conn.execute(
                "INSERT INTO timer_state VALUES (1, 'lunch', 10, 0, NULL, datetime('now'))"
            )

        assert sqlite_store.load_state() == TimerState.idle(1500)

    def test_unreadable_database_raises_store_error(self, sqlite_store) -> None:
        with sqlite3.connect(sqlite_store.db_path) as conn:
            conn.execute("DROP TABLE timer_state")

        with pytest.raises(StoreError):
            sqlite_store.load_state()


class TestSessions:
    def test_append_and_list(self, sqlite_store) -> None:
        session = _session("2024-06-15T09:00:00+00:00", "2024-06-15T09:25:00+00:00")

        sqlite_store.append_completed_session(session)

        assert sqlite_store.list_completed_sessions() == [session]

    def test_list_is_ordered_by_start(self, sqlite_store) -> None:
        later = _session("2024-06-15T11:00:00+00:00", "2024-06-15T11:25:00+00:00")
        earlier = _session("2024-06-15T09:00:00+00:00", "2024-06-15T09:25:00+00:00")
        sqlite_store.append_completed_session(later)
        sqlite_store.append_completed_session(earlier)

        sessions = sqlite_store.list_completed_sessions()

        assert [s.id for s in sessions] == [earlier.id, later.id]

    def test_list_filters_by_date_range(self, sqlite_store) -> None:
        # Noon UTC stays on the same calendar day in every local timezone
        # between UTC-11 and UTC+11
        for day in (10, 12, 14):
            sqlite_store.append_completed_session(
                _session(f"2024-06-{day}T12:00:00+00:00", f"2024-06-{day}T12:25:00+00:00")
            )

        sessions = sqlite_store.list_completed_sessions(
            start=date(2024, 6, 11), end=date(2024, 6, 14)
        )

        assert [s.started_at[:10] for s in sessions] == ["2024-06-12", "2024-06-14"]

    def test_duplicate_id_raises_store_error(self, sqlite_store) -> None:
        session = _session("2024-06-15T09:00:00+00:00", "2024-06-15T09:25:00+00:00")
        sqlite_store.append_completed_session(session)

        with pytest.raises(StoreError):
            sqlite_store.append_completed_session(session)
