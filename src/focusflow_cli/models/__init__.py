"""Data models for FocusFlow CLI."""

from .config_models import AppConfig, NotificationConfig, OutputConfig, StorageConfig, TimerConfig

__all__ = [
    "AppConfig",
    "TimerConfig",
    "StorageConfig",
    "NotificationConfig",
    "OutputConfig",
]
