"""REST API adapter - timer store synced with the FocusFlow server.

The server only keeps session history, so the current timer state stays in
a local JSON file while completed sessions are posted to the API.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import httpx
from platformdirs import user_data_dir

from focusflow_cli.models.focus.state import CompletedSession, TimerState
from focusflow_cli.repositories.repository import (
    StoreError,
    TimerStateStore,
    sessions_in_range,
)
from focusflow_cli.services.api.client import APIClient

logger = logging.getLogger(__name__)

SESSIONS_PATH = "/pomodoro/sessions"


def default_state_path() -> Path:
    return Path(user_data_dir("focusflow_cli")) / "state" / "timer_state.json"


class RestApiTimerStore(TimerStateStore):
    """Timer store that records sessions through the REST API."""

    def __init__(
        self,
        client: APIClient,
        state_path: Path | None = None,
        work_duration: int = 25 * 60,
    ):
        self.client = client
        self.state_path = state_path or default_state_path()
        self.work_duration = work_duration
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

    def load_state(self) -> TimerState:
        """Load state from file. Missing or invalid files give the idle default."""
        if not self.state_path.exists():
            return TimerState.idle(self.work_duration)

        try:
            with open(self.state_path, encoding="utf-8") as f:
                data = json.load(f)
            return TimerState.from_dict(data)
        except (json.JSONDecodeError, TypeError, KeyError, ValueError) as e:
            logger.warning("discarding invalid timer state file: %s", e)
            return TimerState.idle(self.work_duration)
        except OSError as e:
            raise StoreError(f"Failed to read timer state: {e}") from e

    def save_state(self, state: TimerState) -> None:
        try:
            with open(self.state_path, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f, indent=2)
            # Set secure permissions
            self.state_path.chmod(0o600)
        except OSError as e:
            raise StoreError(f"Failed to write timer state: {e}") from e

    def append_completed_session(self, session: CompletedSession) -> None:
        payload = session.to_dict()
        # The server assigns its own ids
        payload.pop("id", None)
        try:
            self.client.post(SESSIONS_PATH, json=payload)
        except (httpx.HTTPError, RuntimeError) as e:
            raise StoreError(f"Failed to upload session: {e}") from e

    def list_completed_sessions(
        self, start: date | None = None, end: date | None = None
    ) -> list[CompletedSession]:
        try:
            response = self.client.get(SESSIONS_PATH)
            data = response.json()
        except (httpx.HTTPError, RuntimeError, ValueError) as e:
            raise StoreError(f"Failed to fetch sessions: {e}") from e

        # Breaks are not logged as sessions by this client
        sessions = [
            CompletedSession.from_dict(item)
            for item in data
            if item.get("type", "work") == "work"
        ]
        return sessions_in_range(sessions, start, end)
