"""SQLite implementation of the timer state store.

Keeps the current timer state in a single-row table and the completed
session history in an append-only table, both in one local database file.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path

from platformdirs import user_data_dir

from focusflow_cli.models.focus.state import CompletedSession, TimerState
from focusflow_cli.repositories.repository import (
    StoreError,
    TimerStateStore,
    sessions_in_range,
)

from .schema import create_schema

logger = logging.getLogger(__name__)

DEFAULT_WORK_DURATION = 25 * 60


def default_db_path() -> Path:
    return Path(user_data_dir("focusflow_cli")) / "focusflow.db"


class SqliteTimerStore(TimerStateStore):
    """Local timer store backed by SQLite."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        work_duration: int = DEFAULT_WORK_DURATION,
    ):
        self.db_path = Path(db_path) if db_path is not None else default_db_path()
        self.work_duration = work_duration
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not self.db_path.exists()

        with self._connect() as conn:
            create_schema(conn)

        if is_new_database:
            # Owner read/write only
            self.db_path.chmod(0o600)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    def load_state(self) -> TimerState:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    """
                    SELECT status, time_remaining, sessions_completed, active_since
                    FROM timer_state WHERE id = 1
                    """
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to load timer state: {e}") from e

        if row is None:
            return TimerState.idle(self.work_duration)

        try:
            return TimerState.from_dict(dict(row))
        except (TypeError, ValueError, KeyError) as e:
            logger.warning("discarding invalid timer state row: %s", e)
            return TimerState.idle(self.work_duration)

    def save_state(self, state: TimerState) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO timer_state (
                        id, status, time_remaining, sessions_completed,
                        active_since, updated_at
                    ) VALUES (1, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        status = excluded.status,
                        time_remaining = excluded.time_remaining,
                        sessions_completed = excluded.sessions_completed,
                        active_since = excluded.active_since,
                        updated_at = excluded.updated_at
                    """,
                    (
                        state.status,
                        state.time_remaining,
                        state.sessions_completed,
                        state.active_since,
                        datetime.now().astimezone().isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to save timer state: {e}") from e

    def append_completed_session(self, session: CompletedSession) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO pomodoro_sessions (
                        id, started_at, completed_at, type, duration, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        session.id,
                        session.started_at,
                        session.completed_at,
                        session.type,
                        session.duration,
                        datetime.now().astimezone().isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to record session: {e}") from e

    def list_completed_sessions(
        self, start: date | None = None, end: date | None = None
    ) -> list[CompletedSession]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT id, started_at, completed_at, type, duration
                    FROM pomodoro_sessions
                    ORDER BY started_at
                    """
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list sessions: {e}") from e

        sessions = [CompletedSession.from_dict(dict(row)) for row in rows]
        return sessions_in_range(sessions, start, end)
