"""Smoke tests for app-level and environment screen keyboard bindings."""

from __future__ import annotations

from textual.binding import Binding

from envlens.keyboard import APP_BINDINGS, ENVIRONMENT_SCREEN_BINDINGS


class TestAppBindings:
    """Test APP_BINDINGS from keyboard/app.py."""

    def test_help_and_quit(self) -> None:
        keys = {binding.key: binding.action for binding in APP_BINDINGS}
        assert keys == {"?": "show_help", "q": "quit"}

    def test_quit_has_priority(self) -> None:
        quit_binding = next(b for b in APP_BINDINGS if b.action == "quit")
        assert isinstance(quit_binding, Binding)
        assert quit_binding.priority is True


class TestEnvironmentScreenBindings:
    """Test ENVIRONMENT_SCREEN_BINDINGS from keyboard/navigation.py."""

    def test_number_keys_switch_tabs(self) -> None:
        keys = {key: action for key, action, _ in ENVIRONMENT_SCREEN_BINDINGS}
        for number in range(1, 6):
            assert keys[str(number)] == f"switch_tab_{number}"

    def test_reload_and_picker(self) -> None:
        keys = {key: action for key, action, _ in ENVIRONMENT_SCREEN_BINDINGS}
        assert keys["r"] == "refresh"
        assert keys["p"] == "open_picker"
