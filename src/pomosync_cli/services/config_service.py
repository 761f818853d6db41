"""Configuration service for managing PomoSync CLI configuration.

This module provides the ConfigService class, the single source of truth
for configuration. It handles:

- Loading and saving config.json
- Dot-notation get/set with validation at write time
- Building the timer settings handed to the engine
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from pomosync_cli.models.config_models import AppConfig
from pomosync_cli.models.timer import TimerSettings


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir("pomosync_cli"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("pomosync_cli"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Configuration, loaded from disk on first access."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def history_path(self) -> Path:
        return self.data_dir / "history.json"

    def load_config(self) -> AppConfig:
        """Read config.json, writing defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Write the current configuration to config.json."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        return self._get_from(self.config, key)

    @staticmethod
    def _get_from(config: AppConfig, key: str) -> Any:
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                raise KeyError(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        The new value is validated before anything is changed; on failure the
        previous value stays in effect.

        Raises:
            KeyError: unknown key
            ValueError: value rejected by validation
        """
        current = self.get(key)
        if isinstance(current, BaseModel):
            raise KeyError(key)

        keys = key.split(".")
        config_dict = self.config.model_dump()
        node = config_dict
        for k in keys[:-1]:
            node = node[k]
        node[keys[-1]] = value

        try:
            updated = AppConfig.model_validate(config_dict)
        except ValidationError as e:
            message = e.errors()[0].get("msg", str(e))
            raise ValueError(f"Invalid value for {key}: {message}") from e

        self._config = updated
        self.save_config()

    def reset(self, key: str | None = None) -> None:
        """Reset configuration (or a single key) to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return
        self.set(key, self._get_from(AppConfig(), key))

    def timer_settings(self) -> TimerSettings:
        timer = self.config.timer
        return TimerSettings(
            focus_minutes=timer.focus_minutes,
            break_minutes=timer.break_minutes,
            tick_interval_seconds=timer.tick_interval_seconds,
        )


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get the global config service instance."""
    return ConfigService()
