"""Tests for IntentEmitter route mapping."""

from __future__ import annotations

import pytest

from envlens.screens.environment.intents import (
    ROUTE_TEMPLATES,
    IntentContext,
    IntentEmitter,
    NavigateRequested,
)

BASE = "/projects/shop/environments/staging"


@pytest.fixture
def context() -> IntentContext:
    return IntentContext(stack_name="shop", environment_name="staging")


class TestRouteFor:
    """Tests for IntentEmitter.route_for."""

    @pytest.mark.parametrize(
        ("action", "route"),
        [
            ("launch", f"{BASE}/launch"),
            ("plan", f"{BASE}/releases/plan"),
            ("run-plan", f"{BASE}/releases/plan"),
            ("trigger-release", f"{BASE}/releases/new"),
            ("trigger-hotfix", f"{BASE}/releases/hotfix"),
            ("scale-up", f"{BASE}/scale-up"),
            ("scale-down", f"{BASE}/scale-down"),
            ("resume-releases", f"{BASE}/settings?action=resume-releases"),
            ("add-variable", f"{BASE}/settings?tab=variables"),
            ("add-schedule", f"{BASE}/settings?tab=schedule"),
            ("toggle-maintenance", f"{BASE}/settings?tab=maintenance"),
            ("manage-resources", f"{BASE}/resources"),
            ("open-cost", "/projects/shop/cost"),
            ("destroy", f"{BASE}/destroy"),
        ],
    )
    def test_static_routes(self, context: IntentContext, action: str, route: str) -> None:
        assert IntentEmitter.route_for(action, context) == route

    def test_every_template_is_covered(self) -> None:
        assert len(ROUTE_TEMPLATES) == 14

    @pytest.mark.parametrize("action", ["approve", "reject", "abort"])
    def test_deployment_actions(self, action: str) -> None:
        context = IntentContext("shop", "staging", deployment_id="d1")
        assert IntentEmitter.route_for(action, context) == f"{BASE}/releases/d1?action={action}"

    def test_deployment_action_needs_id(self, context: IntentContext) -> None:
        assert IntentEmitter.route_for("approve", context) is None

    def test_view_routes(self) -> None:
        context = IntentContext(
            "shop",
            "staging",
            deployment_id="d1",
            resource_type="postgres",
            resource_name="db",
            target_environment="production",
        )
        assert IntentEmitter.route_for("view-release", context) == f"{BASE}/releases/d1"
        assert IntentEmitter.route_for("view-resource", context) == f"{BASE}/resources/postgres/db"
        assert (
            IntentEmitter.route_for("view-environment", context)
            == "/projects/shop/environments/production"
        )

    def test_view_routes_need_targets(self, context: IntentContext) -> None:
        assert IntentEmitter.route_for("view-release", context) is None
        assert IntentEmitter.route_for("view-resource", context) is None
        assert IntentEmitter.route_for("view-environment", context) is None

    def test_unknown_action(self, context: IntentContext) -> None:
        assert IntentEmitter.route_for("self-destruct", context) is None


class TestEmit:
    """Tests for IntentEmitter.emit."""

    def test_emit_posts_single_message(self, context: IntentContext) -> None:
        posted: list[NavigateRequested] = []
        emitter = IntentEmitter(posted.append)

        route = emitter.emit("launch", context)

        assert route == f"{BASE}/launch"
        assert len(posted) == 1
        assert posted[0].route == route

    def test_unknown_action_posts_nothing(self, context: IntentContext) -> None:
        posted: list[NavigateRequested] = []
        assert IntentEmitter(posted.append).emit("nope", context) is None
        assert posted == []

    def test_emit_without_sink_returns_route(self, context: IntentContext) -> None:
        assert IntentEmitter().emit("destroy", context) == f"{BASE}/destroy"
