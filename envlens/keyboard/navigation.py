"""Screen-specific keyboard bindings."""

from typing import Annotated

# ============================================================================
# Environment Screen Bindings
# ============================================================================

ENVIRONMENT_SCREEN_BINDINGS: list[
    Annotated[tuple[str, str, str], "key, action, description"]
] = [
    ("r", "refresh", "Reload"),
    ("1", "switch_tab_1", "Overview"),
    ("2", "switch_tab_2", "Releases"),
    ("3", "switch_tab_3", "Resources"),
    ("4", "switch_tab_4", "Config"),
    ("5", "switch_tab_5", "Schedule"),
    ("p", "open_picker", "Pick"),
]

__all__ = [
    "ENVIRONMENT_SCREEN_BINDINGS",
]
