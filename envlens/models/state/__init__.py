"""Application and session state models."""

from envlens.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)
from envlens.models.state.config_manager import ConfigManager
from envlens.models.state.session_state import SessionState

__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
    "SessionState",
]
