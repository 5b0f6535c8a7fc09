"""Configuration models for FocusFlow CLI.

Settings are persisted as JSON and validated with pydantic. The storage
section decides which timer store backs the current user session.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from focusflow_cli.models.focus.cycling import PomodoroConfig


class TimerConfig(BaseModel):
    """Pomodoro durations, in minutes."""

    work_minutes: int = Field(default=25, ge=1, le=240)
    short_break_minutes: int = Field(default=5, ge=1, le=120)
    long_break_minutes: int = Field(default=15, ge=1, le=240)
    sessions_before_long_break: int = Field(default=4, ge=1, le=12)

    def to_pomodoro_config(self) -> PomodoroConfig:
        return PomodoroConfig.from_minutes(
            work=self.work_minutes,
            short_break=self.short_break_minutes,
            long_break=self.long_break_minutes,
            sessions_before_long_break=self.sessions_before_long_break,
        )


class StorageConfig(BaseModel):
    """Where timer state and session history are kept."""

    backend: Literal["local", "remote"] = Field(default="local")
    db_path: str | None = Field(default=None, description="SQLite file (local)")
    endpoint: str = Field(default="http://localhost:5000/api")
    timeout: int = Field(default=10, ge=1)
    retry: int = Field(default=2, ge=0)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Basic validation - ensure it's an http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must start with http:// or https://")
        return v.rstrip("/")


class NotificationConfig(BaseModel):
    """Phase-change alerts."""

    enabled: bool = Field(default=True)
    desktop: bool = Field(default=True)
    sound: bool = Field(default=True)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="table")
    color: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main FocusFlow configuration"""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def set_value(self, key: str, value: str) -> AppConfig:
        """Return a copy with a dotted key (``timer.work_minutes``) updated.

        Raises:
            ValueError: If the key is unknown or the value fails validation
        """
        parts = key.split(".")
        if len(parts) != 2:
            raise ValueError(f"Invalid config key '{key}'. Use section.field")

        section, field = parts
        data = self.model_dump()
        if section not in data or not isinstance(data[section], dict):
            raise ValueError(f"Unknown config section '{section}'")
        if field not in data[section]:
            raise ValueError(f"Unknown config key '{key}'")

        data[section][field] = _coerce(value)
        return AppConfig.model_validate(data)


def _coerce(value: str):
    """Interpret CLI strings; pydantic handles the final type conversion."""
    lowered = value.strip().lower()
    if lowered in ("none", "null"):
        return None
    return value
