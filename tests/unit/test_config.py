"""Unit tests for configuration loading."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import yaml
from pydantic import ValidationError

from kanban_board.config import (
    CONFIG_ENV_VAR,
    Settings,
    get_config_path,
    get_settings,
    load_settings,
)

if TYPE_CHECKING:
    from pathlib import Path


def _valid_config() -> dict[str, Any]:
    return {
        "store": {
            "base_url": "http://localhost:8080",
            "collection": "tasks",
            "timeout_seconds": 10,
        },
        "logging": {"level": "INFO", "directory": None},
    }


def _write(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(data))
    return path


@pytest.mark.unit
class TestLoadSettings:
    def test_loads_valid_file(self, tmp_path: Path) -> None:
        settings = load_settings(_write(tmp_path, _valid_config()))
        assert isinstance(settings, Settings)
        assert settings.store.collection == "tasks"
        assert settings.store.timeout_seconds == 10
        assert settings.logging.directory is None

    def test_directory_is_optional(self, tmp_path: Path) -> None:
        data = _valid_config()
        del data["logging"]["directory"]
        assert load_settings(_write(tmp_path, data)).logging.directory is None

    def test_rejects_extra_fields(self, tmp_path: Path) -> None:
        data = _valid_config()
        data["store"]["retries"] = 3
        with pytest.raises(ValidationError):
            load_settings(_write(tmp_path, data))

    def test_rejects_missing_section(self, tmp_path: Path) -> None:
        data = _valid_config()
        del data["store"]
        with pytest.raises(ValidationError):
            load_settings(_write(tmp_path, data))

    def test_rejects_non_positive_timeout(self, tmp_path: Path) -> None:
        data = _valid_config()
        data["store"]["timeout_seconds"] = 0
        with pytest.raises(ValidationError):
            load_settings(_write(tmp_path, data))

    def test_rejects_non_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid config file"):
            load_settings(_write(tmp_path, ["not", "a", "mapping"]))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.yaml")


@pytest.mark.unit
class TestConfigPath:
    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write(tmp_path, _valid_config())
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_config_path() == path

    def test_default_is_project_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert get_config_path().name == "config.yaml"

    def test_get_settings_is_cached(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write(tmp_path, _valid_config())
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        first = get_settings()
        path.write_text(yaml.dump({"broken": True}))
        assert get_settings() is first
