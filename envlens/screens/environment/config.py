"""Environment screen configuration - tab IDs, titles, and widget ID constants."""

from __future__ import annotations

from envlens.constants.enums import TabId

# =============================================================================
# Tab IDs
# =============================================================================

TAB_OVERVIEW = "tab-overview"
TAB_RELEASES = "tab-releases"
TAB_RESOURCES = "tab-resources"
TAB_CONFIG = "tab-config"
TAB_SCHEDULE = "tab-schedule"
TAB_IDS: list[str] = [
    TAB_OVERVIEW,
    TAB_RELEASES,
    TAB_RESOURCES,
    TAB_CONFIG,
    TAB_SCHEDULE,
]

# Tab Titles
TAB_TITLES: dict[str, str] = {
    TAB_OVERVIEW: "Overview",
    TAB_RELEASES: "Releases",
    TAB_RESOURCES: "Resources",
    TAB_CONFIG: "Configuration",
    TAB_SCHEDULE: "Schedule",
}

# Pane id <-> tab identifier shared with the controller
PANE_TO_TAB: dict[str, TabId] = {
    TAB_OVERVIEW: TabId.OVERVIEW,
    TAB_RELEASES: TabId.RELEASES,
    TAB_RESOURCES: TabId.RESOURCES,
    TAB_CONFIG: TabId.CONFIG,
    TAB_SCHEDULE: TabId.SCHEDULE,
}
TAB_TO_PANE: dict[TabId, str] = {tab: pane for pane, tab in PANE_TO_TAB.items()}

# =============================================================================
# Widget IDs
# =============================================================================

HEADER_ID = "env-header"
HEADER_ACTIONS_ID = "env-header-actions"
BANNERS_ID = "env-banners"
CARDS_ID = "env-cards"
BOOT_ERROR_ID = "env-boot-error"
PICKER_ID = "env-picker"
PICKER_PROJECTS_ID = "env-picker-projects"
PICKER_ENVIRONMENTS_ID = "env-picker-environments"
TABBED_CONTENT_ID = "tabbed-content"

# Table Column Definitions: list[tuple[str, int]] = [(name, width), ...]

RELEASES_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Status", 20),
    ("Type", 16),
    ("Triggered By", 22),
    ("Started", 12),
    ("Duration", 10),
    ("Release", 18),
]

RESOURCES_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Type", 22),
    ("Name", 32),
    ("Enabled", 9),
    ("Override", 9),
]

INGRESS_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("URL", 48),
    ("Service", 24),
    ("Port", 8),
]

SCHEDULE_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Name", 22),
    ("Start", 18),
    ("Stop", 18),
    ("Timezone", 18),
    ("Enabled", 9),
]
