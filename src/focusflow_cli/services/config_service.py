"""Configuration service for FocusFlow CLI.

This module provides the ConfigService class, the single source of truth for
configuration management. It handles:

- Loading and saving config.json
- Config file initialization with sensible defaults
- Session cookie credentials for the remote backend
"""

from __future__ import annotations

import json
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir
from pydantic import ValidationError

from focusflow_cli.models.config_models import AppConfig


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("focusflow_cli"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.data_dir = Path(user_data_dir("focusflow_cli"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            # Set file permissions
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def set_value(self, key: str, value: str) -> AppConfig:
        """Update a dotted config key and persist it."""
        self._config = self.config.set_value(key, value)
        self.save_config()
        return self._config

    def use_backend(self, backend: str) -> AppConfig:
        """Switch the storage backend (local or remote)."""
        return self.set_value("storage.backend", backend)

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults. Credentials are kept."""
        self._config = AppConfig()
        self.save_config()
        return self._config

    def local_db_path(self) -> Path:
        """Resolve the SQLite path for the local backend."""
        if self.config.storage.db_path:
            return Path(self.config.storage.db_path).expanduser()
        return self.data_dir / "focusflow.db"

    def remote_state_path(self) -> Path:
        """Local file that mirrors timer state for the remote backend."""
        return self.data_dir / "state" / "timer_state.json"

    def load_credentials(self, backend: str = "remote") -> dict | None:
        """Load credentials for a backend.

        Returns:
            dict with 'session_cookie', or None if not found
        """
        cred_path = self.credentials_dir / f"{backend}.json"
        if not cred_path.exists():
            return None

        try:
            with open(cred_path, encoding="utf-8") as f:
                return json.load(f)
        except JSONDecodeError:
            return None

    def save_credentials(self, session_cookie: str, backend: str = "remote") -> None:
        """Save the session cookie used to authenticate against the API."""
        cred_path = self.credentials_dir / f"{backend}.json"
        cred_path.parent.mkdir(parents=True, exist_ok=True)

        with open(cred_path, "w", encoding="utf-8") as f:
            json.dump({"session_cookie": session_cookie}, f, indent=2)

        # Set secure file permissions
        cred_path.chmod(0o600)

    def clear_credentials(self, backend: str = "remote") -> None:
        cred_path = self.credentials_dir / f"{backend}.json"
        if cred_path.exists():
            cred_path.unlink()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
