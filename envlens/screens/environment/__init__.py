"""Environment screen module exports."""

from envlens.screens.environment.config import TAB_IDS, TAB_TITLES
from envlens.screens.environment.environment_screen import EnvironmentScreen, IntentButton
from envlens.screens.environment.intents import (
    IntentContext,
    IntentEmitter,
    NavigateRequested,
)
from envlens.screens.environment.presenter import (
    EnvironmentLoadFailed,
    EnvironmentPresenter,
    EnvironmentSessionUpdated,
    PickerEnvironmentsLoaded,
    PickerProjectsLoaded,
    PickerRequested,
)

__all__ = [
    "TAB_IDS",
    "TAB_TITLES",
    "EnvironmentLoadFailed",
    "EnvironmentPresenter",
    "EnvironmentScreen",
    "EnvironmentSessionUpdated",
    "IntentButton",
    "IntentContext",
    "IntentEmitter",
    "NavigateRequested",
    "PickerEnvironmentsLoaded",
    "PickerProjectsLoaded",
    "PickerRequested",
]
