"""Settings persistence.

Settings live in a YAML file, ``~/.config/envlens/settings.yaml`` by default.
The ``ENVLENS_CONFIG`` environment variable points at another file and
``ENVLENS_BASE_URL`` overrides the control-plane URL.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from envlens.constants.values import BASE_URL_ENV_VAR, CONFIG_ENV_VAR
from envlens.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads and saves ``AppSettings``."""

    DEFAULT_PATH = Path.home() / ".config" / "envlens" / "settings.yaml"

    @classmethod
    def config_path(cls, path: Path | str | None = None) -> Path:
        """Resolve the settings file location."""
        if path is not None:
            return Path(path).expanduser()
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return cls.DEFAULT_PATH

    @classmethod
    def load(cls, path: Path | str | None = None) -> AppSettings:
        """Load settings, falling back to defaults when no file exists.

        Raises:
            ConfigLoadError: The file exists but cannot be read or validated.
        """
        config_file = cls.config_path(path)
        data: dict = {}
        if config_file.is_file():
            try:
                raw = yaml.safe_load(config_file.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigLoadError(f"Cannot read {config_file}: {exc}") from exc
            if raw is not None and not isinstance(raw, dict):
                raise ConfigLoadError(f"{config_file} must contain a mapping")
            data = raw or {}
        else:
            logger.debug("No settings file at %s, using defaults", config_file)

        env_base_url = os.environ.get(BASE_URL_ENV_VAR)
        if env_base_url:
            data["base_url"] = env_base_url

        try:
            return AppSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {config_file}: {exc}") from exc

    @classmethod
    def save(cls, settings: AppSettings, path: Path | str | None = None) -> Path:
        """Persist settings as YAML.

        Raises:
            ConfigSaveError: The file cannot be written.
        """
        config_file = cls.config_path(path)
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            config_file.write_text(
                yaml.safe_dump(settings.model_dump(), sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigSaveError(f"Cannot write {config_file}: {exc}") from exc
        logger.info("Saved settings to %s", config_file)
        return config_file


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
