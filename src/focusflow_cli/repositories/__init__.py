"""Repository interfaces (ports) for FocusFlow CLI."""

from .repository import (
    NotificationPermission,
    Notifier,
    StoreError,
    TimerStateStore,
)

__all__ = [
    "TimerStateStore",
    "Notifier",
    "NotificationPermission",
    "StoreError",
]
