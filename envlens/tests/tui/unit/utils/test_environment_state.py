"""Unit tests for environment state derivation.

This module tests:
- Cluster state and release status classification
- Header actions per cluster state
- Kubernetes, polling and never-launched detection
- Launch readiness (legacy checklist and blueprint summary)
- Deploy health, release breakdown and status cards
- Banners, header tags and identity rows
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from envlens.constants.enums import ClusterState, Tone
from envlens.constants.values import NO_DATA_YET, NO_VALUE
from envlens.models.environment.payloads import (
    ClusterInfo,
    Deployment,
    DeploymentStats,
    Overview,
    ResourceItem,
    ResourceStats,
    StackInfo,
    VariableCounts,
)
from envlens.utils.environment_state import (
    UNKNOWN_STATE,
    BannerKind,
    BlueprintReadiness,
    LegacyReadiness,
    build_banners,
    build_readiness,
    build_status_cards,
    classify_cluster_state,
    classify_deployment_status,
    cluster_state_of,
    deploy_health_percentage,
    deploy_health_tone,
    governance_rows,
    group_resources_by_type,
    has_kubernetes,
    header_actions,
    header_tags,
    infrastructure_rows,
    is_legacy_environment,
    is_never_launched,
    is_polling_active,
    release_breakdown,
)

NOW = datetime(2025, 3, 4, 12, 0, 0, tzinfo=timezone.utc)


def _overview(state: str | None = "RUNNING", **kwargs) -> Overview:
    cluster = kwargs.pop("cluster", None) or ClusterInfo(cluster_state=state)
    return Overview(cluster=cluster, **kwargs)


# =============================================================================
# Classification
# =============================================================================


class TestClassification:
    """Tests for state and status descriptors."""

    def test_known_state(self) -> None:
        descriptor = classify_cluster_state("RUNNING")
        assert descriptor.label == "Running"
        assert descriptor.pulse is False

    @pytest.mark.parametrize("state", ["LAUNCHING", "SCALING_UP", "SCALING_DOWN", "DESTROYING"])
    def test_transitional_states_pulse(self, state: str) -> None:
        assert classify_cluster_state(state).pulse is True

    def test_failed_states_share_style(self) -> None:
        launch = classify_cluster_state("LAUNCH_FAILED")
        destroy = classify_cluster_state("DESTROY_FAILED")
        assert launch.background == destroy.background
        assert launch.label != destroy.label

    @pytest.mark.parametrize("state", [None, "", "EXPLODED", 42])
    def test_unknown_state(self, state) -> None:
        assert classify_cluster_state(state) is UNKNOWN_STATE

    def test_deployment_status(self) -> None:
        assert classify_deployment_status("SUCCEEDED").icon == "✓"
        assert classify_deployment_status("FAILED").icon == "✗"
        assert classify_deployment_status("WEIRD").icon == "?"
        assert classify_deployment_status(None).icon == "?"

    def test_cluster_state_of(self) -> None:
        assert cluster_state_of(None) == "UNKNOWN"
        assert cluster_state_of(Overview()) == "UNKNOWN"
        assert cluster_state_of(_overview(None)) == "UNKNOWN"
        assert cluster_state_of(_overview("STOPPED")) == "STOPPED"


class TestHeaderActions:
    """Tests for header_actions."""

    def test_running_actions(self) -> None:
        actions = header_actions("RUNNING")
        assert [a.action for a in actions] == [
            "trigger-release",
            "trigger-hotfix",
            "scale-down",
            "destroy",
        ]
        assert actions[0].primary
        assert actions[-1].danger

    @pytest.mark.parametrize("state", ["LAUNCHING", "DESTROYING", "SCALING_UP", "SCALING_DOWN"])
    def test_transitional_states_have_no_actions(self, state: str) -> None:
        assert header_actions(state) == ()

    def test_unlisted_states_fall_back_to_stopped(self) -> None:
        stopped = header_actions(ClusterState.STOPPED.value)
        assert header_actions("UNKNOWN") == stopped
        assert header_actions(None) == stopped
        assert [a.action for a in stopped] == ["launch", "plan"]

    def test_failed_states_offer_retry(self) -> None:
        assert header_actions("SCALE_UP_FAILED")[0].label == "Retry Scale Up"


# =============================================================================
# Detection
# =============================================================================


class TestDetection:
    """Tests for Kubernetes, polling and lifecycle predicates."""

    def test_kubernetes_by_cloud(self) -> None:
        assert has_kubernetes(ClusterInfo(cloud="KUBERNETES"))

    def test_kubernetes_by_credentials(self) -> None:
        assert has_kubernetes(ClusterInfo(cloud="AWS", has_k8s_credentials=True))

    @pytest.mark.parametrize("key", ["kubernetesVersion", "K8S_DASHBOARD"])
    def test_kubernetes_by_component(self, key: str) -> None:
        assert has_kubernetes(ClusterInfo(component_versions={key: "1"}))

    def test_not_kubernetes(self) -> None:
        assert not has_kubernetes(ClusterInfo(cloud="AWS", component_versions={"terraform": "1"}))
        assert not has_kubernetes(None)

    def test_polling_for_transitions(self) -> None:
        assert is_polling_active(_overview("LAUNCHING"))
        assert not is_polling_active(_overview("RUNNING"))
        assert not is_polling_active(None)

    def test_polling_for_in_progress_release(self) -> None:
        overview = _overview("RUNNING", in_progress_deployments=[Deployment(id="d1")])
        assert is_polling_active(overview)

    def test_legacy_environment(self) -> None:
        assert is_legacy_environment(None)
        assert is_legacy_environment(ClusterInfo(stack=StackInfo(name="shop")))
        assert not is_legacy_environment(
            ClusterInfo(stack=StackInfo(project_type_id="web-app"))
        )

    def test_never_launched(self) -> None:
        first = DeploymentStats(is_first_release=True)
        assert is_never_launched(_overview("STOPPED", deployments_stats=first))
        assert not is_never_launched(_overview("RUNNING", deployments_stats=first))
        assert not is_never_launched(_overview("STOPPED"))
        assert not is_never_launched(None)


# =============================================================================
# Readiness
# =============================================================================


class TestReadiness:
    """Tests for build_readiness."""

    def test_legacy_checks_without_kubernetes(self) -> None:
        readiness = build_readiness(
            ClusterInfo(configured=True, cloud="AWS"),
            VariableCounts(variable_count=0),
            None,
        )
        assert isinstance(readiness, LegacyReadiness)
        labels = [check.label for check in readiness.checks]
        assert "Kubernetes credentials" not in labels
        assert readiness.ready is False
        failing = [check for check in readiness.checks if not check.ok]
        assert [check.label for check in failing] == [
            "Cloud account linked",
            "Variables populated",
        ]
        assert failing[0].visible_hint == "Link a AWS account to this environment"
        assert readiness.checks[0].visible_hint is None

    def test_legacy_checks_with_kubernetes(self) -> None:
        readiness = build_readiness(
            ClusterInfo(
                configured=True,
                cloud="KUBERNETES",
                cloud_account_id="acct",
                has_k8s_credentials=True,
            ),
            VariableCounts(secret_count=1),
            None,
        )
        assert isinstance(readiness, LegacyReadiness)
        assert "Kubernetes credentials" in [check.label for check in readiness.checks]
        assert readiness.ready is True

    def test_blueprint_summary(self) -> None:
        readiness = build_readiness(
            ClusterInfo(
                stack_name="shop",
                stack=StackInfo(project_type_id="web-app", branch="develop"),
            ),
            VariableCounts(variable_count=6, secret_count=2),
            ResourceStats(total_count=9),
        )
        assert readiness == BlueprintReadiness(
            blueprint="shop",
            branch="develop",
            project_type="web-app",
            resources_defined=9,
            variables_set=6,
        )

    def test_blueprint_defaults(self) -> None:
        readiness = build_readiness(
            ClusterInfo(stack=StackInfo(project_type_id="web-app")), None, None
        )
        assert isinstance(readiness, BlueprintReadiness)
        assert readiness.blueprint == NO_VALUE
        assert readiness.branch == "main"
        assert readiness.resources_defined == 0


# =============================================================================
# Statistics and cards
# =============================================================================


class TestStatistics:
    """Tests for deploy health and release breakdown."""

    @pytest.mark.parametrize(
        ("success", "failed", "no_change", "expected"),
        [
            (1, 1, 0, 50),
            (1, 7, 0, 13),
            (5, 3, 0, 63),
            (0, 0, 0, None),
        ],
    )
    def test_deploy_health_percentage(
        self, success: int, failed: int, no_change: int, expected: int | None
    ) -> None:
        stats = DeploymentStats(
            success_releases=success, failed_releases=failed, no_change_releases=no_change
        )
        assert deploy_health_percentage(stats) == expected

    def test_halves_round_up(self) -> None:
        stats = DeploymentStats(success_releases=1, failed_releases=7)
        # 12.5% rounds up
        assert deploy_health_percentage(stats) == 13

    @pytest.mark.parametrize(
        ("percentage", "tone"),
        [(80, Tone.GOOD), (79, Tone.WARNING), (50, Tone.WARNING), (49, Tone.BAD), (None, None)],
    )
    def test_deploy_health_tone(self, percentage: int | None, tone: Tone | None) -> None:
        assert deploy_health_tone(percentage) is tone

    def test_release_breakdown(self) -> None:
        breakdown = release_breakdown(
            DeploymentStats(success_releases=6, failed_releases=1, no_change_releases=1)
        )
        assert breakdown.total == 8
        assert (breakdown.success_pct, breakdown.failed_pct, breakdown.no_change_pct) == (75, 13, 13)

    def test_release_breakdown_without_data(self) -> None:
        assert release_breakdown(None).total == 0
        assert release_breakdown(DeploymentStats()).success_pct == 0

    def test_group_resources_by_type(self) -> None:
        items = [
            ResourceItem(resource_type="service"),
            ResourceItem(resource_type="database"),
            ResourceItem(resource_type="service"),
        ]
        assert group_resources_by_type(items) == {"service": 2, "database": 1}
        assert group_resources_by_type(None) == {}


class TestStatusCards:
    """Tests for build_status_cards."""

    def test_all_cards_degrade_independently(self) -> None:
        cards = build_status_cards(None, None, None, now=NOW)
        assert [card.title for card in cards] == [
            "Resources",
            "Last Release",
            "Deploy Health",
            "Variables",
        ]
        assert all(card.detail == NO_DATA_YET for card in cards)

    def test_populated_cards(self) -> None:
        overview = _overview(
            latest_deployment=Deployment(
                status="SUCCEEDED", created_on=(NOW - timedelta(hours=2)).isoformat()
            ),
            deployments_stats=DeploymentStats(success_releases=9, failed_releases=1),
        )
        cards = build_status_cards(
            overview,
            ResourceStats(total_count=5, enabled_count=3),
            VariableCounts(variable_count=4, secret_count=2),
            now=NOW,
        )
        resources, last_release, health, variables = cards
        assert resources.value == "5"
        assert resources.detail == "3 enabled · 2 disabled"
        assert last_release.value == "✓ Succeeded"
        assert last_release.detail == "2h ago"
        assert health.value == "90%"
        assert health.tone is Tone.GOOD
        assert variables.value == "6"

    def test_only_missing_source_degrades(self) -> None:
        cards = build_status_cards(_overview(), ResourceStats(total_count=1), None, now=NOW)
        assert cards[0].value == "1"
        assert cards[3].detail == NO_DATA_YET


# =============================================================================
# Banners and rows
# =============================================================================


class TestBanners:
    """Tests for build_banners."""

    def test_no_banners(self) -> None:
        assert build_banners(None) == []
        assert build_banners(_overview()) == []

    def test_in_progress_banner(self) -> None:
        overview = _overview(
            in_progress_deployments=[
                Deployment(
                    id="d1",
                    release_type="RELEASE",
                    triggered_by="ana",
                    created_on=(NOW - timedelta(minutes=5, seconds=3)).isoformat(),
                )
            ]
        )
        (banner,) = build_banners(overview, now=NOW)
        assert banner.kind is BannerKind.IN_PROGRESS
        assert banner.message == "RELEASE in progress · started 5m 3s · by ana"
        assert [(a.action, a.deployment_id, a.danger) for a in banner.actions] == [
            ("view-release", "d1", False),
            ("abort", "d1", True),
        ]

    def test_pending_approval_banner(self) -> None:
        overview = _overview(
            latest_deployment=Deployment(id="d2", status="PENDING_APPROVAL", release_trace_id="r-7")
        )
        (banner,) = build_banners(overview, now=NOW)
        assert banner.kind is BannerKind.PENDING_APPROVAL
        assert "r-7" in banner.message
        assert [a.action for a in banner.actions] == ["approve", "reject"]

    def test_paused_banner(self) -> None:
        paused_cluster = _overview(cluster=ClusterInfo(pause_releases=True))
        paused_schedule = _overview(is_scheduled_releases_paused=True)
        for overview in (paused_cluster, paused_schedule):
            (banner,) = build_banners(overview)
            assert banner.kind is BannerKind.RELEASES_PAUSED
            assert banner.actions[0].action == "resume-releases"

    def test_queued_banner_pluralizes(self) -> None:
        assert build_banners(_overview(queued_releases=[{}]))[0].message == "1 release queued"
        assert build_banners(_overview(queued_releases=[{}, {}]))[0].message == "2 releases queued"

    def test_banner_order(self) -> None:
        overview = _overview(
            cluster=ClusterInfo(pause_releases=True),
            in_progress_deployments=[Deployment(id="d1")],
            latest_deployment=Deployment(id="d2", status="PENDING_APPROVAL"),
            queued_releases=[{}],
        )
        assert [b.kind for b in build_banners(overview, now=NOW)] == [
            BannerKind.IN_PROGRESS,
            BannerKind.PENDING_APPROVAL,
            BannerKind.RELEASES_PAUSED,
            BannerKind.QUEUED,
        ]


class TestRows:
    """Tests for header tags, infrastructure and governance rows."""

    def test_header_tags(self) -> None:
        cluster = ClusterInfo(
            is_ephemeral=True,
            base_cluster_id="b1",
            base_cluster_name="staging",
            require_sign_off=True,
            stack=StackInfo(project_type_id="web-app"),
        )
        assert header_tags(cluster) == [
            "Ephemeral",
            "Base: staging",
            "Approval Required",
            "Blueprint",
        ]
        assert header_tags(None) == []

    def test_infrastructure_rows_skip_no_cloud(self) -> None:
        rows = dict(infrastructure_rows(ClusterInfo(cloud="NO_CLOUD", namespace="ns")))
        assert "Cloud Provider" not in rows
        assert rows["Namespace"] == "ns"

    def test_infrastructure_rows_for_kubernetes(self) -> None:
        rows = dict(
            infrastructure_rows(
                ClusterInfo(
                    cloud="KUBERNETES",
                    component_versions={"kubernetesVersion": "1.29"},
                    k8s_requests_to_limits_ratio=0.5,
                )
            )
        )
        assert rows["Kubernetes Version"] == "1.29"
        assert rows["K8s Credentials"] == "✗ Not configured"
        assert rows["K8s Req/Limit Ratio"] == "0.5"

    def test_governance_rows(self) -> None:
        rows = dict(
            governance_rows(
                ClusterInfo(enable_auto_sign_off=True, auto_sign_off_schedule="0 9 * * 1")
            )
        )
        assert rows["Approval Required"] == "No"
        assert rows["Auto Sign-off"] == "Enabled (0 9 * * 1)"
        assert rows["Releases Paused"] == "Active"
        assert rows["Release Stream"] == NO_VALUE
