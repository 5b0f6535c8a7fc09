"""Collaborator interfaces for the focus timer.

This module defines the abstract base classes (ports) the timer state machine
depends on, following the hexagonal architecture (Ports & Adapters) pattern.
Concrete adapters (local SQLite, remote REST API, desktop notifications)
live outside the core and are injected at construction time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Literal

from focusflow_cli.models.focus.state import CompletedSession, TimerState

NotificationPermission = Literal["default", "granted", "denied"]


class StoreError(Exception):
    """Raised by a store adapter when persistence fails."""


class TimerStateStore(ABC):
    """Abstract base class for durable timer state.

    Implementations must return the canonical idle state when nothing has
    been persisted yet. Writes are best-effort from the caller's point of
    view: adapters raise ``StoreError`` and the state machine decides what to
    do with it.
    """

    @abstractmethod
    def load_state(self) -> TimerState:
        """Return the last persisted state, or the idle default.

        Raises:
            StoreError: If the backend cannot be read
        """
        raise NotImplementedError(
            "TimerStateStore.load_state() must be implemented by adapter"
        )

    @abstractmethod
    def save_state(self, state: TimerState) -> None:
        """Overwrite the persisted state.

        Raises:
            StoreError: If the backend cannot be written
        """
        raise NotImplementedError(
            "TimerStateStore.save_state() must be implemented by adapter"
        )

    @abstractmethod
    def append_completed_session(self, session: CompletedSession) -> None:
        """Append a record to the session history.

        Raises:
            StoreError: If the backend cannot be written
        """
        raise NotImplementedError(
            "TimerStateStore.append_completed_session() must be implemented by adapter"
        )

    @abstractmethod
    def list_completed_sessions(
        self, start: date | None = None, end: date | None = None
    ) -> list[CompletedSession]:
        """List recorded sessions, oldest first.

        Args:
            start: Only sessions started on or after this day
            end: Only sessions started on or before this day

        Raises:
            StoreError: If the backend cannot be read
        """
        raise NotImplementedError(
            "TimerStateStore.list_completed_sessions() must be implemented by adapter"
        )


class Notifier(ABC):
    """Best-effort delivery of human-readable alerts.

    ``permission`` is an explicit capability owned by the notifier instance:
    ``"default"`` until ``request_permission()`` decides, then ``"granted"``
    or ``"denied"``.
    """

    permission: NotificationPermission = "default"

    @abstractmethod
    def request_permission(self) -> None:
        """Ask for permission to show notifications. May be a no-op."""
        raise NotImplementedError(
            "Notifier.request_permission() must be implemented by adapter"
        )

    @abstractmethod
    def notify(self, title: str, body: str) -> None:
        """Show a notification. Ignored when permission is not granted."""
        raise NotImplementedError("Notifier.notify() must be implemented by adapter")


def sessions_in_range(
    sessions: list[CompletedSession], start: date | None, end: date | None
) -> list[CompletedSession]:
    """Filter sessions by the local calendar day they started on."""
    result = []
    for session in sessions:
        day = session.started_datetime.astimezone().date()
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        result.append(session)
    result.sort(key=lambda s: s.started_datetime)
    return result
