"""Main application class for EnvLens."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from textual.app import App
from textual.binding import Binding

from envlens.constants import APP_TITLE
from envlens.controllers import DataSourceGateway
from envlens.keyboard.app import APP_BINDINGS
from envlens.models.state.config_manager import (
    AppSettings,
    ConfigLoadError,
    ConfigManager,
)
from envlens.screens.environment import EnvironmentScreen, NavigateRequested

logger = logging.getLogger(__name__)


class EnvLensApp(App[None]):
    """Terminal dashboard for one environment of a deployment control plane."""

    TITLE = APP_TITLE
    BINDINGS: list[Binding] = APP_BINDINGS

    settings: AppSettings

    def __init__(
        self,
        *,
        attributes: Mapping[str, str | None] | None = None,
        location: str | None = None,
        settings: AppSettings | None = None,
        config_path: Path | None = None,
        gateway: DataSourceGateway | None = None,
    ) -> None:
        super().__init__()
        self.attributes = dict(attributes or {})
        self.location = location
        self.config_path = config_path
        self.navigation_history: list[str] = []

        if settings is None:
            settings = self._load_settings()
        self.settings = settings
        self.gateway = gateway or DataSourceGateway(
            self.settings.base_url,
            api_prefix=self.settings.api_prefix,
            timeout=self.settings.request_timeout_seconds,
        )

    def _load_settings(self) -> AppSettings:
        """Load application settings from persistent storage."""
        try:
            return ConfigManager.load(self.config_path)
        except ConfigLoadError as exc:
            # Use defaults if loading fails
            logger.warning("Using default settings: %s", exc)
            return AppSettings()

    def on_mount(self) -> None:
        self.push_screen(
            EnvironmentScreen(
                self.gateway,
                attributes=self.attributes,
                location=self.location,
                page_size=self.settings.releases_page_size,
                refresh_interval=self.settings.refresh_interval_seconds,
            )
        )

    def on_navigate_requested(self, event: NavigateRequested) -> None:
        """Navigation is owned by the hosting console; record and announce it."""
        self.navigation_history.append(event.route)
        logger.info("Navigation requested: %s", event.route)
        self.notify(event.route, title="Navigate", severity="information")

    def action_show_help(self) -> None:
        self.notify(
            "Environment Screen Help:\n\n"
            "  1-5 - Overview / Releases / Resources / Config / Schedule\n"
            "  r   - Reload everything\n"
            "  p   - Pick another environment\n"
            "  q   - Quit",
            severity="information",
            title="Help",
            timeout=20,
        )

    async def on_unmount(self) -> None:
        """Close the HTTP client when the app exits."""
        await self.gateway.aclose()


__all__ = [
    "EnvLensApp",
]
