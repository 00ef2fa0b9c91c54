"""Smoke tests for EnvironmentScreen - composition, bindings and a live session.

Note: Tests using app.run_test() are kept minimal due to Textual testing overhead.
"""

from __future__ import annotations

import pytest
from textual.widgets import DataTable, Static, TabbedContent

from envlens.app import EnvLensApp
from envlens.constants.enums import TabId
from envlens.keyboard import ENVIRONMENT_SCREEN_BINDINGS
from envlens.models.state import AppSettings
from envlens.screens.environment import TAB_IDS, EnvironmentScreen, IntentButton
from envlens.screens.environment.config import BOOT_ERROR_ID, PICKER_ID


class TestEnvironmentScreenComposition:
    """Test EnvironmentScreen class-level wiring."""

    def test_screen_has_bindings(self) -> None:
        assert EnvironmentScreen.BINDINGS is ENVIRONMENT_SCREEN_BINDINGS

    def test_screen_has_all_tabs(self) -> None:
        assert EnvironmentScreen.TAB_IDS == TAB_IDS
        assert len(TAB_IDS) == 5

    def test_screen_can_be_instantiated(self, make_gateway) -> None:
        screen = EnvironmentScreen(make_gateway(), attributes={"cluster-id": "c1"})
        assert screen.presenter is not None
        assert screen.presenter.state.active_tab is TabId.OVERVIEW

    def test_intent_button_keeps_action(self) -> None:
        button = IntentButton("Abort", "abort", deployment_id="d1", variant="error")
        assert button.intent_action == "abort"
        assert button.deployment_id == "d1"


def _app(gateway, **attributes: str) -> EnvLensApp:
    return EnvLensApp(
        attributes=attributes,
        settings=AppSettings(refresh_interval_seconds=60.0),
        gateway=gateway,
    )


async def _settle(app: EnvLensApp, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestEnvironmentScreenSession:
    """Run the screen against an in-memory gateway."""

    @pytest.mark.asyncio
    async def test_loads_environment(self, gateway) -> None:
        app = _app(gateway, **{"cluster-id": "c1"})
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            screen = app.screen
            assert isinstance(screen, EnvironmentScreen)
            assert screen.presenter.state.is_ready
            assert screen.presenter.get_title() == "shop / staging"
            assert screen.query_one("#env-body").display is True
            assert screen.query(IntentButton)

        assert gateway.closed is True

    @pytest.mark.asyncio
    async def test_tab_key_loads_tab_once(self, gateway) -> None:
        gateway.routes["clusters/c1/deployments"] = [{"id": "d1", "status": "SUCCEEDED"}]
        app = _app(gateway, **{"cluster-id": "c1"})
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            await pilot.press("2")
            await _settle(app, pilot)
            await pilot.press("1")
            await pilot.press("2")
            await _settle(app, pilot)

            assert app.screen.query_one(TabbedContent).active == "tab-releases"
            assert app.screen.query_one("#releases-table", DataTable).row_count == 1
            assert gateway.count("clusters/c1/deployments") == 1

    @pytest.mark.asyncio
    async def test_refresh_key_reloads(self, gateway) -> None:
        app = _app(gateway, **{"cluster-id": "c1"})
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            await pilot.press("r")
            await _settle(app, pilot)

            assert gateway.count("clusters/c1/deployments/overview") == 2

    @pytest.mark.asyncio
    async def test_failed_identity_shows_error(self, make_gateway) -> None:
        app = _app(make_gateway(), **{"stack-name": "shop", "cluster-name": "gone"})
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            error = app.screen.query_one(f"#{BOOT_ERROR_ID}", Static)
            assert error.display is True
            assert app.screen.query_one("#env-body").display is False
            assert isinstance(app.screen, EnvironmentScreen)
            assert app.screen.presenter.state.error == "Could not resolve cluster ID from name"

    @pytest.mark.asyncio
    async def test_no_context_shows_picker(self, make_gateway) -> None:
        gateway = make_gateway({"stacks/": [{"name": "shop"}]})
        app = _app(gateway)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            assert app.screen.query_one(f"#{PICKER_ID}").display is True
            assert "stacks/" in gateway.paths

    @pytest.mark.asyncio
    async def test_intent_reaches_app(self, gateway) -> None:
        app = _app(gateway, **{"cluster-id": "c1"})
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            screen = app.screen
            assert isinstance(screen, EnvironmentScreen)
            screen.presenter.emit("trigger-release")
            await pilot.pause()

            assert app.navigation_history == [
                "/projects/shop/environments/staging/releases/new"
            ]
