"""Fetchers for the environment controller."""

from envlens.controllers.environment.fetchers.environment_fetcher import (
    EnvironmentFetcher,
)
from envlens.controllers.environment.fetchers.picker_fetcher import PickerFetcher
from envlens.controllers.environment.fetchers.tab_fetcher import TabFetcher

__all__ = [
    "EnvironmentFetcher",
    "PickerFetcher",
    "TabFetcher",
]
