"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field

from envlens.constants.defaults import (
    API_PREFIX_DEFAULT,
    BASE_URL_DEFAULT,
    LOG_LEVEL_DEFAULT,
    RELEASES_PAGE_SIZE_DEFAULT,
)
from envlens.constants.timeouts import HTTP_REQUEST_TIMEOUT, OVERVIEW_REFRESH_INTERVAL


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Control plane
    base_url: str = BASE_URL_DEFAULT
    api_prefix: str = API_PREFIX_DEFAULT
    request_timeout_seconds: float = Field(default=HTTP_REQUEST_TIMEOUT, gt=0)

    # Refresh
    refresh_interval_seconds: float = Field(default=OVERVIEW_REFRESH_INTERVAL, gt=0)

    # Lazy tabs
    releases_page_size: int = Field(default=RELEASES_PAGE_SIZE_DEFAULT, ge=1)

    # Logging
    log_level: str = LOG_LEVEL_DEFAULT
    log_file: str | None = None


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
