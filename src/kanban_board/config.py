"""
Configuration management for the task board.

Loads configuration from YAML. Every required value must be explicitly
specified or loading fails.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

CONFIG_ENV_VAR = "KANBAN_CONFIG_PATH"
DEFAULT_CONFIG_FILENAME = "config.yaml"


class StoreConfig(BaseModel):
    """Remote task store connection configuration."""

    model_config = ConfigDict(extra="forbid")
    base_url: str
    collection: str = Field(min_length=1)
    timeout_seconds: float = Field(gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")
    level: str
    directory: str | None = None


class Settings(BaseModel):
    """
    Root configuration container.

    Missing sections or unknown keys fail validation.
    """

    model_config = ConfigDict(extra="forbid")
    store: StoreConfig
    logging: LoggingConfig


def get_config_path() -> Path:
    """
    Determine configuration file path.

    Uses KANBAN_CONFIG_PATH when set, otherwise config.yaml at the
    project root.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path(__file__).resolve().parents[2] / DEFAULT_CONFIG_FILENAME


def load_settings(config_path: Path | None = None) -> Settings:
    """
    Load and validate settings from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a YAML mapping.
        pydantic.ValidationError: If values are missing or malformed.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    raw = yaml.safe_load(config_path.read_text())
    if not isinstance(raw, dict):
        msg = f"Invalid config file: {config_path}"
        raise ValueError(msg)

    return Settings(**raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from the resolved config path."""
    return load_settings()


def clear_settings_cache() -> None:
    """Forget cached settings. Used in testing."""
    get_settings.cache_clear()
