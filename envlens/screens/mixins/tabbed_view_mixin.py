"""Tabbed view mixin for screens with TabbedContent."""

from __future__ import annotations

import logging

from textual.css.query import NoMatches, WrongType
from textual.widgets import TabbedContent

logger = logging.getLogger(__name__)


class TabbedViewMixin:
    """Mixin providing tab management patterns for screens.

    Subclasses set ``TAB_IDS`` to their pane ids, in the order the number
    keys select them, and compose a ``TabbedContent`` with id
    ``tabbed-content``.
    """

    TAB_IDS: list[str] = []

    _current_tab: str = ""

    def switch_tab(self, tab_id: str) -> None:
        """Switch to the specified tab.

        Args:
            tab_id: The ID of the tab pane to activate.
        """
        try:
            tabbed_content = self.query_one(  # type: ignore[attr-defined]
                "#tabbed-content", TabbedContent
            )
        except (NoMatches, WrongType):
            logger.debug("No tabbed content to switch to %s", tab_id)
            return
        tabbed_content.active = tab_id
        self._current_tab = tab_id

    def _switch_tab_number(self, number: int) -> None:
        if 1 <= number <= len(self.TAB_IDS):
            self.switch_tab(self.TAB_IDS[number - 1])

    def action_switch_tab_1(self) -> None:
        """Switch to tab 1."""
        self._switch_tab_number(1)

    def action_switch_tab_2(self) -> None:
        """Switch to tab 2."""
        self._switch_tab_number(2)

    def action_switch_tab_3(self) -> None:
        """Switch to tab 3."""
        self._switch_tab_number(3)

    def action_switch_tab_4(self) -> None:
        """Switch to tab 4."""
        self._switch_tab_number(4)

    def action_switch_tab_5(self) -> None:
        """Switch to tab 5."""
        self._switch_tab_number(5)


__all__ = ["TabbedViewMixin"]
