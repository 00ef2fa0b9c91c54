"""Tests for environment screen configuration constants."""

from __future__ import annotations

from envlens.constants.enums import TabId
from envlens.screens.environment.config import (
    PANE_TO_TAB,
    RELEASES_TABLE_COLUMNS,
    RESOURCES_TABLE_COLUMNS,
    SCHEDULE_TABLE_COLUMNS,
    TAB_IDS,
    TAB_TITLES,
    TAB_TO_PANE,
)


class TestEnvironmentConfig:
    """Tests for tab and table definitions."""

    def test_tab_ids_follow_number_keys(self) -> None:
        assert TAB_IDS == [
            "tab-overview",
            "tab-releases",
            "tab-resources",
            "tab-config",
            "tab-schedule",
        ]

    def test_every_tab_has_title(self) -> None:
        assert set(TAB_TITLES) == set(TAB_IDS)

    def test_pane_mapping_is_bijective(self) -> None:
        assert set(PANE_TO_TAB.values()) == set(TabId)
        assert all(PANE_TO_TAB[TAB_TO_PANE[tab]] is tab for tab in TabId)

    def test_table_columns_have_positive_widths(self) -> None:
        for columns in (RELEASES_TABLE_COLUMNS, RESOURCES_TABLE_COLUMNS, SCHEDULE_TABLE_COLUMNS):
            assert columns
            assert all(isinstance(name, str) and width > 0 for name, width in columns)
