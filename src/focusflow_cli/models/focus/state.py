"""Timer state and completed-session records."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

TimerStatus = Literal["idle", "work", "break", "longBreak"]
SessionType = Literal["work"]

TIMER_STATUSES: tuple[str, ...] = ("idle", "work", "break", "longBreak")


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class TimerState:
    """Represents the Pomodoro timer state for one user."""

    status: TimerStatus
    time_remaining: int  # seconds
    sessions_completed: int = 0
    active_since: str | None = None  # ISO 8601, None while paused or idle

    @classmethod
    def idle(cls, work_duration: int) -> "TimerState":
        """Canonical idle form, as produced by a reset."""
        return cls(
            status="idle",
            time_remaining=work_duration,
            sessions_completed=0,
            active_since=None,
        )

    @property
    def active_since_datetime(self) -> datetime | None:
        """Parse the start marker as datetime."""
        if self.active_since:
            return _parse_iso(self.active_since)
        return None

    @property
    def is_running(self) -> bool:
        return self.active_since is not None

    def copy(self) -> "TimerState":
        return TimerState(
            status=self.status,
            time_remaining=self.time_remaining,
            sessions_completed=self.sessions_completed,
            active_since=self.active_since,
        )

    def to_dict(self) -> dict:
        """Convert to the persisted (camelCase) representation."""
        return {
            "status": self.status,
            "timeRemaining": self.time_remaining,
            "sessionsCompleted": self.sessions_completed,
            "currentSessionStart": self.active_since,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TimerState":
        """Create from dictionary.

        Accepts both the persisted camelCase keys and the dataclass field
        names. Raises ValueError for values outside the state domain.
        """
        status = data["status"]
        if status not in TIMER_STATUSES:
            raise ValueError(f"Unknown timer status: {status!r}")

        time_remaining = int(data.get("timeRemaining", data.get("time_remaining")))
        sessions_completed = int(
            data.get("sessionsCompleted", data.get("sessions_completed", 0))
        )
        if time_remaining < 0 or sessions_completed < 0:
            raise ValueError("Timer counters cannot be negative")

        if "currentSessionStart" in data:
            active_since = data["currentSessionStart"]
        else:
            active_since = data.get("active_since")

        return cls(
            status=status,
            time_remaining=time_remaining,
            sessions_completed=sessions_completed,
            active_since=active_since,
        )


@dataclass(frozen=True)
class CompletedSession:
    """A finished (or skipped) work interval. Immutable once created."""

    started_at: str  # ISO 8601
    completed_at: str  # ISO 8601
    duration: int  # seconds actually spent
    type: SessionType = "work"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def started_datetime(self) -> datetime:
        return _parse_iso(self.started_at)

    @property
    def completed_datetime(self) -> datetime:
        return _parse_iso(self.completed_at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "type": self.type,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedSession":
        started_at = data.get("startedAt", data.get("started_at"))
        kwargs = {
            "started_at": started_at,
            # The server schema allows a null completedAt
            "completed_at": data.get("completedAt", data.get("completed_at"))
            or started_at,
            "duration": int(data["duration"]),
            "type": data.get("type", "work"),
        }
        if data.get("id") is not None:
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)
