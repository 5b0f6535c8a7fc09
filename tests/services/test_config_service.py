"""Tests for ConfigService and the configuration models."""

from __future__ import annotations

import json
import stat

import pytest

from focusflow_cli.models.config_models import AppConfig, StorageConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()

        assert config.timer.work_minutes == 25
        assert config.storage.backend == "local"
        assert config.notifications.enabled is True

    def test_set_value_returns_validated_copy(self) -> None:
        config = AppConfig()

        updated = config.set_value("timer.short_break_minutes", "10")

        assert updated.timer.short_break_minutes == 10
        assert config.timer.short_break_minutes == 5

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("timer", "5"),
            ("nope.field", "1"),
            ("timer.unknown", "1"),
            ("timer.work_minutes", "0"),
            ("timer.work_minutes", "abc"),
            ("storage.backend", "cloud"),
        ],
    )
    def test_set_value_rejects_bad_input(self, key, value) -> None:
        with pytest.raises(ValueError):
            AppConfig().set_value(key, value)

    def test_set_value_none(self) -> None:
        config = AppConfig().set_value("storage.db_path", "none")
        assert config.storage.db_path is None

    def test_endpoint_is_normalized(self) -> None:
        assert StorageConfig(endpoint="https://focus.example.com/api/").endpoint == (
            "https://focus.example.com/api"
        )

    def test_to_pomodoro_config(self) -> None:
        pomodoro = AppConfig().timer.to_pomodoro_config()

        assert pomodoro.work_duration == 1500
        assert pomodoro.long_break == 900


class TestConfigService:
    def test_first_load_writes_defaults(self, tmp_config) -> None:
        assert tmp_config.config_path.exists()
        data = json.loads(tmp_config.config_path.read_text(encoding="utf-8"))
        assert data["storage"]["backend"] == "local"
        assert stat.S_IMODE(tmp_config.config_path.stat().st_mode) == 0o600

    def test_set_value_persists(self, tmp_config) -> None:
        tmp_config.set_value("timer.work_minutes", "45")

        data = json.loads(tmp_config.config_path.read_text(encoding="utf-8"))
        assert data["timer"]["work_minutes"] == 45

    def test_use_backend(self, tmp_config) -> None:
        config = tmp_config.use_backend("remote")
        assert config.storage.backend == "remote"

    def test_reset_config(self, tmp_config) -> None:
        tmp_config.set_value("timer.work_minutes", "45")

        config = tmp_config.reset_config()

        assert config.timer.work_minutes == 25

    def test_corrupt_config_raises(self, tmp_config) -> None:
        tmp_config.config_path.write_text('{"timer": {"work_minutes": -3}}', encoding="utf-8")
        tmp_config._config = None

        with pytest.raises(RuntimeError, match="Failed to load config"):
            tmp_config.load_config()

    def test_local_db_path_override(self, tmp_config, tmp_path) -> None:
        assert tmp_config.local_db_path() == tmp_config.data_dir / "focusflow.db"

        tmp_config.set_value("storage.db_path", str(tmp_path / "custom.db"))

        assert tmp_config.local_db_path() == tmp_path / "custom.db"

    def test_credentials_round_trip(self, tmp_config) -> None:
        assert tmp_config.load_credentials() is None

        tmp_config.save_credentials("s%3Aabc")
        cred_path = tmp_config.credentials_dir / "remote.json"

        assert tmp_config.load_credentials() == {"session_cookie": "s%3Aabc"}
        assert stat.S_IMODE(cred_path.stat().st_mode) == 0o600

        tmp_config.clear_credentials()
        assert tmp_config.load_credentials() is None
