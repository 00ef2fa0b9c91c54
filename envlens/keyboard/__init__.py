"""Keyboard bindings module.

Bindings are organized into two categories:

- app: App-level bindings (APP_BINDINGS)
- navigation: Screen-specific bindings (*_SCREEN_BINDINGS)
"""

from envlens.keyboard.app import APP_BINDINGS
from envlens.keyboard.navigation import ENVIRONMENT_SCREEN_BINDINGS

__all__ = [
    "APP_BINDINGS",
    "ENVIRONMENT_SCREEN_BINDINGS",
]
