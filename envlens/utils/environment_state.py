"""Environment state derivation.

Pure functions that turn raw overview data into renderer-ready facts: state
and release status descriptors, header actions, banners, status cards, the
launch-readiness checklist and Kubernetes detection. Nothing here performs
I/O or raises for unexpected values; unknown inputs map to fallbacks.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from envlens.constants.enums import (
    TRANSITIONAL_CLUSTER_STATES,
    ClusterState,
    DeploymentStatus,
    Tone,
)
from envlens.constants.values import (
    KUBERNETES_CLOUD,
    KUBERNETES_COMPONENT_TOKENS,
    NO_CLOUD,
    NO_DATA_YET,
    NO_VALUE,
)
from envlens.models.environment.payloads import (
    ClusterInfo,
    DeploymentStats,
    Overview,
    ResourceItem,
    ResourceStats,
    VariableCounts,
)
from envlens.utils.time_format import (
    format_date,
    format_elapsed,
    format_relative,
    humanize,
)

# =============================================================================
# Status classification
# =============================================================================


@dataclass(frozen=True)
class StateDescriptor:
    """How one cluster state is displayed."""

    label: str
    background: str
    color: str
    border: str
    dot: str
    pulse: bool = False


_FAILED_STYLE = {"background": "#ffebee", "color": "#b71c1c", "border": "#ef9a9a", "dot": "#c62828"}
_SCALING_STYLE = {"background": "#e3f2fd", "color": "#0d47a1", "border": "#90caf9", "dot": "#1565c0"}

UNKNOWN_STATE = StateDescriptor("Unknown", "#f5f5f5", "#616161", "#e0e0e0", "#9e9e9e")

CLUSTER_STATE_DESCRIPTORS: dict[str, StateDescriptor] = {
    ClusterState.RUNNING.value: StateDescriptor("Running", "#e8f5e9", "#1b5e20", "#a5d6a7", "#2e7d32"),
    ClusterState.LAUNCHING.value: StateDescriptor(
        "Launching", "#fff8e1", "#e65100", "#ffe082", "#ff9800", pulse=True
    ),
    ClusterState.SCALING_UP.value: StateDescriptor("Scaling Up", **_SCALING_STYLE, pulse=True),
    ClusterState.SCALING_DOWN.value: StateDescriptor("Scaling Down", **_SCALING_STYLE, pulse=True),
    ClusterState.DESTROYING.value: StateDescriptor(
        "Destroying", "#fff3e0", "#bf360c", "#ffcc80", "#e64a19", pulse=True
    ),
    ClusterState.STOPPED.value: StateDescriptor("Stopped", "#f5f5f5", "#424242", "#e0e0e0", "#9e9e9e"),
    ClusterState.SCALE_DOWN.value: StateDescriptor(
        "Scaled Down", "#e8eaf6", "#283593", "#9fa8da", "#3f51b5"
    ),
    ClusterState.LAUNCH_FAILED.value: StateDescriptor("Launch Failed", **_FAILED_STYLE),
    ClusterState.DESTROY_FAILED.value: StateDescriptor("Destroy Failed", **_FAILED_STYLE),
    ClusterState.SCALE_DOWN_FAILED.value: StateDescriptor("Scale-Down Failed", **_FAILED_STYLE),
    ClusterState.SCALE_UP_FAILED.value: StateDescriptor("Scale-Up Failed", **_FAILED_STYLE),
    ClusterState.UNKNOWN.value: UNKNOWN_STATE,
}


def classify_cluster_state(state: str | None) -> StateDescriptor:
    """Map a cluster state to its descriptor; unrecognized values map to Unknown."""
    if not isinstance(state, str):
        return UNKNOWN_STATE
    return CLUSTER_STATE_DESCRIPTORS.get(state, UNKNOWN_STATE)


@dataclass(frozen=True)
class DeploymentStatusDescriptor:
    """How one release status is displayed."""

    icon: str
    color: str


UNRECOGNIZED_DEPLOYMENT_STATUS = DeploymentStatusDescriptor("?", "#9e9e9e")

DEPLOYMENT_STATUS_DESCRIPTORS: dict[str, DeploymentStatusDescriptor] = {
    DeploymentStatus.SUCCEEDED.value: DeploymentStatusDescriptor("✓", "#2e7d32"),
    DeploymentStatus.FAILED.value: DeploymentStatusDescriptor("✗", "#c62828"),
    DeploymentStatus.FAULT.value: DeploymentStatusDescriptor("✗", "#c62828"),
    DeploymentStatus.TIMED_OUT.value: DeploymentStatusDescriptor("⏱", "#e65100"),
    DeploymentStatus.IN_PROGRESS.value: DeploymentStatusDescriptor("⚡", "#1565c0"),
    DeploymentStatus.STARTED.value: DeploymentStatusDescriptor("⚡", "#1565c0"),
    DeploymentStatus.QUEUED.value: DeploymentStatusDescriptor("⏳", "#546e7a"),
    DeploymentStatus.PENDING_APPROVAL.value: DeploymentStatusDescriptor("⏳", "#f57f17"),
    DeploymentStatus.APPROVED.value: DeploymentStatusDescriptor("✓", "#1b5e20"),
    DeploymentStatus.ABORTED.value: DeploymentStatusDescriptor("⬛", "#616161"),
    DeploymentStatus.STOPPED.value: DeploymentStatusDescriptor("⬛", "#616161"),
    DeploymentStatus.REJECTED.value: DeploymentStatusDescriptor("✗", "#c62828"),
}


def classify_deployment_status(status: str | None) -> DeploymentStatusDescriptor:
    """Map a release status to its descriptor, with a fallback for unknown values."""
    if not isinstance(status, str):
        return UNRECOGNIZED_DEPLOYMENT_STATUS
    return DEPLOYMENT_STATUS_DESCRIPTORS.get(status, UNRECOGNIZED_DEPLOYMENT_STATUS)


def cluster_state_of(overview: Overview | None) -> str:
    """Return the reported cluster state, ``UNKNOWN`` when absent."""
    if overview is None or overview.cluster is None:
        return ClusterState.UNKNOWN.value
    return overview.cluster.cluster_state or ClusterState.UNKNOWN.value


# =============================================================================
# Header actions
# =============================================================================


@dataclass(frozen=True)
class HeaderAction:
    """One call-to-action button in the header."""

    label: str
    action: str
    primary: bool = False
    danger: bool = False


HEADER_ACTIONS: dict[str, tuple[HeaderAction, ...]] = {
    ClusterState.STOPPED.value: (
        HeaderAction("Launch", "launch", primary=True),
        HeaderAction("Run Plan", "plan"),
    ),
    ClusterState.RUNNING.value: (
        HeaderAction("Trigger Release", "trigger-release", primary=True),
        HeaderAction("Hotfix", "trigger-hotfix"),
        HeaderAction("Scale Down", "scale-down"),
        HeaderAction("Destroy", "destroy", danger=True),
    ),
    ClusterState.SCALE_DOWN.value: (
        HeaderAction("Scale Up", "scale-up", primary=True),
        HeaderAction("Trigger Release", "trigger-release"),
        HeaderAction("Destroy", "destroy", danger=True),
    ),
    ClusterState.LAUNCH_FAILED.value: (
        HeaderAction("Retry Launch", "launch", primary=True),
        HeaderAction("Run Plan", "plan"),
    ),
    ClusterState.DESTROY_FAILED.value: (
        HeaderAction("Retry Destroy", "destroy", primary=True, danger=True),
    ),
    ClusterState.SCALE_UP_FAILED.value: (
        HeaderAction("Retry Scale Up", "scale-up", primary=True),
    ),
    ClusterState.SCALE_DOWN_FAILED.value: (
        HeaderAction("Retry Scale Down", "scale-down", primary=True),
    ),
    ClusterState.LAUNCHING.value: (),
    ClusterState.DESTROYING.value: (),
    ClusterState.SCALING_UP.value: (),
    ClusterState.SCALING_DOWN.value: (),
}


def header_actions(state: str | None) -> tuple[HeaderAction, ...]:
    """Permitted header actions for a cluster state.

    Transitional states permit nothing. States missing from the table get
    the actions of a stopped environment.
    """
    if isinstance(state, str) and state in HEADER_ACTIONS:
        return HEADER_ACTIONS[state]
    return HEADER_ACTIONS[ClusterState.STOPPED.value]


# =============================================================================
# Activity and platform detection
# =============================================================================


def has_kubernetes(cluster: ClusterInfo | None) -> bool:
    """True when the environment runs on (or has credentials for) Kubernetes."""
    if cluster is None:
        return False
    if cluster.cloud == KUBERNETES_CLOUD:
        return True
    if cluster.has_k8s_credentials:
        return True
    return any(
        token in key.lower()
        for key in cluster.component_versions
        for token in KUBERNETES_COMPONENT_TOKENS
    )


def has_in_progress_deployment(overview: Overview | None) -> bool:
    return bool(overview and overview.in_progress_deployments)


def is_polling_active(overview: Overview | None) -> bool:
    """True while the server reports a transition in flight."""
    if has_in_progress_deployment(overview):
        return True
    return cluster_state_of(overview) in TRANSITIONAL_CLUSTER_STATES


def is_legacy_environment(cluster: ClusterInfo | None) -> bool:
    """Legacy environments carry no blueprint project type."""
    if cluster is None:
        return True
    return not (cluster.stack and cluster.stack.project_type_id)


def is_never_launched(overview: Overview | None) -> bool:
    """A stopped environment that has not had its first release yet."""
    if overview is None:
        return False
    stats = overview.deployments_stats
    return (
        cluster_state_of(overview) == ClusterState.STOPPED.value
        and stats is not None
        and stats.is_first_release
    )


# =============================================================================
# Launch readiness
# =============================================================================


@dataclass(frozen=True)
class ReadinessCheck:
    """One launch-readiness check."""

    label: str
    ok: bool
    hint: str

    @property
    def visible_hint(self) -> str | None:
        """Hints are only shown for failing checks."""
        return None if self.ok else self.hint


@dataclass(frozen=True)
class LegacyReadiness:
    """Pass/fail checklist for legacy environments; skipped checks are omitted."""

    checks: tuple[ReadinessCheck, ...]

    @property
    def ready(self) -> bool:
        return all(check.ok for check in self.checks)


@dataclass(frozen=True)
class BlueprintReadiness:
    """Descriptive readiness for blueprint environments (no gating)."""

    blueprint: str
    branch: str
    project_type: str
    resources_defined: int
    variables_set: int


def build_readiness(
    cluster: ClusterInfo | None,
    variable_counts: VariableCounts | None,
    resource_stats: ResourceStats | None,
) -> LegacyReadiness | BlueprintReadiness:
    """Build the readiness view for a never-launched environment."""
    env = cluster or ClusterInfo()

    if is_legacy_environment(env):
        kubernetes = has_kubernetes(env)
        checks = [
            ReadinessCheck(
                "Environment configured",
                env.configured,
                "Set cloud provider and credentials in environment settings",
            ),
            ReadinessCheck(
                "Cloud account linked",
                bool(env.cloud_account_id),
                f"Link a {env.cloud or 'cloud'} account to this environment",
            ),
        ]
        if kubernetes:
            checks.append(
                ReadinessCheck(
                    "Kubernetes credentials",
                    env.has_k8s_credentials,
                    "Configure K8s access credentials",
                )
            )
        checks.append(
            ReadinessCheck(
                "Variables populated",
                bool(variable_counts and variable_counts.total > 0),
                "Set required environment variables before launch",
            )
        )
        return LegacyReadiness(checks=tuple(checks))

    stack = env.stack
    return BlueprintReadiness(
        blueprint=(stack.name if stack else None) or env.stack_name or NO_VALUE,
        branch=env.branch or (stack.branch if stack else None) or "main",
        project_type=(stack.project_type_id if stack else None) or NO_VALUE,
        resources_defined=resource_stats.total_count if resource_stats else 0,
        variables_set=variable_counts.variable_count if variable_counts else 0,
    )


# =============================================================================
# Statistics
# =============================================================================


def _js_round(value: float) -> int:
    # Halves round up, matching how the control-plane UI reports percentages.
    return math.floor(value + 0.5)


def deploy_health_percentage(stats: DeploymentStats | None) -> int | None:
    """Share of successful releases, or None when there is no release data."""
    if stats is None or stats.total <= 0:
        return None
    return _js_round(stats.success_releases / stats.total * 100)


def deploy_health_tone(percentage: int | None) -> Tone | None:
    if percentage is None:
        return None
    if percentage >= 80:
        return Tone.GOOD
    if percentage >= 50:
        return Tone.WARNING
    return Tone.BAD


@dataclass(frozen=True)
class ReleaseBreakdown:
    """Release counters and their share of the total."""

    success: int = 0
    failed: int = 0
    no_change: int = 0
    success_pct: int = 0
    failed_pct: int = 0
    no_change_pct: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed + self.no_change


def release_breakdown(stats: DeploymentStats | None) -> ReleaseBreakdown:
    if stats is None:
        return ReleaseBreakdown()
    total = stats.total
    if total <= 0:
        return ReleaseBreakdown(
            stats.success_releases, stats.failed_releases, stats.no_change_releases
        )
    return ReleaseBreakdown(
        success=stats.success_releases,
        failed=stats.failed_releases,
        no_change=stats.no_change_releases,
        success_pct=_js_round(stats.success_releases / total * 100),
        failed_pct=_js_round(stats.failed_releases / total * 100),
        no_change_pct=_js_round(stats.no_change_releases / total * 100),
    )


@dataclass(frozen=True)
class ResourceSummary:
    total: int = 0
    enabled: int = 0

    @property
    def disabled(self) -> int:
        return max(0, self.total - self.enabled)


def resource_summary(stats: ResourceStats | None) -> ResourceSummary:
    if stats is None:
        return ResourceSummary()
    enabled = stats.enabled_count if stats.enabled_count is not None else stats.total_count
    return ResourceSummary(total=stats.total_count, enabled=enabled)


@dataclass(frozen=True)
class StatusCard:
    """One summary card under the header."""

    title: str
    value: str
    detail: str = ""
    tone: Tone | None = None


def build_status_cards(
    overview: Overview | None,
    resource_stats: ResourceStats | None,
    variable_counts: VariableCounts | None,
    now: datetime | None = None,
) -> list[StatusCard]:
    """Resources, last release, deploy health and variables cards.

    Each card degrades to a placeholder on its own when its source is absent.
    """
    cards: list[StatusCard] = []

    if resource_stats is None:
        cards.append(StatusCard("Resources", NO_VALUE, NO_DATA_YET))
    else:
        summary = resource_summary(resource_stats)
        cards.append(
            StatusCard(
                "Resources",
                str(summary.total),
                f"{summary.enabled} enabled · {summary.disabled} disabled",
            )
        )

    latest = overview.latest_deployment if overview else None
    if latest is None:
        cards.append(StatusCard("Last Release", NO_VALUE, NO_DATA_YET))
    else:
        descriptor = classify_deployment_status(latest.status)
        cards.append(
            StatusCard(
                "Last Release",
                f"{descriptor.icon} {humanize((latest.status or 'unknown').lower())}",
                format_relative(latest.created_on, now),
            )
        )

    stats = overview.deployments_stats if overview else None
    health = deploy_health_percentage(stats)
    if health is None:
        cards.append(StatusCard("Deploy Health", NO_VALUE, NO_DATA_YET))
    else:
        cards.append(
            StatusCard(
                "Deploy Health",
                f"{health}%",
                f"{stats.success_releases} of {stats.total} succeeded",
                deploy_health_tone(health),
            )
        )

    if variable_counts is None:
        cards.append(StatusCard("Variables", NO_VALUE, NO_DATA_YET))
    else:
        cards.append(
            StatusCard(
                "Variables",
                str(variable_counts.total),
                f"{variable_counts.variable_count} variables · "
                f"{variable_counts.secret_count} secrets",
            )
        )
    return cards


def group_resources_by_type(items: list[ResourceItem] | None) -> dict[str, int]:
    """Count resources per type, in first-seen order."""
    if not items:
        return {}
    return dict(Counter(item.resource_type for item in items))


# =============================================================================
# Banners
# =============================================================================


class BannerKind(Enum):
    IN_PROGRESS = "in_progress"
    PENDING_APPROVAL = "pending_approval"
    RELEASES_PAUSED = "releases_paused"
    QUEUED = "queued"


@dataclass(frozen=True)
class BannerAction:
    label: str
    action: str
    deployment_id: str | None = None
    danger: bool = False


@dataclass(frozen=True)
class Banner:
    kind: BannerKind
    message: str
    actions: tuple[BannerAction, ...] = field(default_factory=tuple)


def build_banners(overview: Overview | None, now: datetime | None = None) -> list[Banner]:
    """Banners shown above the status cards, in display order."""
    if overview is None:
        return []
    cluster = overview.cluster or ClusterInfo()
    banners: list[Banner] = []

    for deployment in overview.in_progress_deployments:
        message = f"{deployment.release_type or 'Release'} in progress"
        elapsed = format_elapsed(deployment.created_on, now)
        if elapsed:
            message += f" · started {elapsed}"
        if deployment.triggered_by:
            message += f" · by {deployment.triggered_by}"
        banners.append(
            Banner(
                BannerKind.IN_PROGRESS,
                message,
                (
                    BannerAction("View Logs", "view-release", deployment.id),
                    BannerAction("Abort", "abort", deployment.id, danger=True),
                ),
            )
        )

    latest = overview.latest_deployment
    if latest is not None and latest.status == DeploymentStatus.PENDING_APPROVAL.value:
        banners.append(
            Banner(
                BannerKind.PENDING_APPROVAL,
                f"Release {latest.release_trace_id or latest.id or ''} awaiting approval",
                (
                    BannerAction("Approve", "approve", latest.id),
                    BannerAction("Reject", "reject", latest.id, danger=True),
                ),
            )
        )

    if cluster.pause_releases or overview.is_scheduled_releases_paused:
        banners.append(
            Banner(
                BannerKind.RELEASES_PAUSED,
                "Releases are currently paused for this environment",
                (BannerAction("Resume Releases", "resume-releases"),),
            )
        )

    queued = len(overview.queued_releases)
    if queued > 0:
        banners.append(
            Banner(
                BannerKind.QUEUED,
                f"{queued} release{'s' if queued > 1 else ''} queued",
            )
        )
    return banners


# =============================================================================
# Identity rows and tags
# =============================================================================


def header_tags(cluster: ClusterInfo | None) -> list[str]:
    """Short tags shown next to the header metadata."""
    if cluster is None:
        return []
    tags: list[str] = []
    if cluster.is_ephemeral:
        tags.append("Ephemeral")
    if cluster.base_cluster_id:
        tags.append(f"Base: {cluster.base_cluster_name or 'env'}")
    if cluster.pause_releases:
        tags.append("Releases Paused")
    if cluster.require_sign_off:
        tags.append("Approval Required")
    if not is_legacy_environment(cluster):
        tags.append("Blueprint")
    return tags


def infrastructure_rows(cluster: ClusterInfo | None) -> list[tuple[str, str]]:
    """Label/value rows for the infrastructure identity section."""
    if cluster is None:
        return []
    rows: list[tuple[str, str]] = []
    stack = cluster.stack

    if cluster.cloud and cluster.cloud != NO_CLOUD:
        rows.append(("Cloud Provider", cluster.cloud))
    if cluster.cloud_account_id:
        rows.append(("Cloud Account", cluster.cloud_account_id))

    if not is_legacy_environment(cluster) and stack is not None:
        if stack.vcs_url:
            rows.append(("VCS", stack.vcs_url))
        if stack.branch:
            rows.append(("Blueprint Branch", stack.branch))
        if stack.project_type_id:
            rows.append(("Project Type", stack.project_type_id))
        if stack.primary_cloud:
            rows.append(("Primary Cloud", stack.primary_cloud))
        if stack.allowed_clouds:
            rows.append(("Allowed Clouds", ", ".join(stack.allowed_clouds)))
    for key, value in cluster.component_versions.items():
        rows.append((humanize(key), str(value)))

    if cluster.namespace:
        rows.append(("Namespace", cluster.namespace))

    if has_kubernetes(cluster):
        rows.append(
            (
                "K8s Credentials",
                "✓ Configured" if cluster.has_k8s_credentials else "✗ Not configured",
            )
        )
        if cluster.k8s_requests_to_limits_ratio is not None:
            rows.append(("K8s Req/Limit Ratio", f"{cluster.k8s_requests_to_limits_ratio:g}"))

    if cluster.base_cluster_name:
        rows.append(("Base Environment", cluster.base_cluster_name))
    if cluster.cd_pipeline_parent:
        rows.append(("CD Pipeline Parent", cluster.cd_pipeline_parent))
    if cluster.last_modified_by:
        rows.append(("Last Modified By", cluster.last_modified_by))
    if cluster.last_modified_date:
        rows.append(("Last Modified", format_date(cluster.last_modified_date)))
    return rows


def governance_rows(cluster: ClusterInfo | None) -> list[tuple[str, str]]:
    """Label/value rows for the configuration tab governance section."""
    env = cluster or ClusterInfo()
    auto_sign_off = "Enabled" if env.enable_auto_sign_off else "Disabled"
    if env.auto_sign_off_schedule:
        auto_sign_off += f" ({env.auto_sign_off_schedule})"
    return [
        ("Approval Required", "Yes" if env.require_sign_off else "No"),
        ("Auto Sign-off", auto_sign_off),
        ("Releases Paused", "Paused" if env.pause_releases else "Active"),
        ("Release Stream", env.release_stream or NO_VALUE),
    ]
