"""All enum definitions for EnvLens.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum, auto

# =============================================================================
# Status Enums
# =============================================================================

class ClusterState(str, Enum):
    """Environment (cluster) state values reported by the control plane."""

    RUNNING = "RUNNING"
    LAUNCHING = "LAUNCHING"
    SCALING_UP = "SCALING_UP"
    SCALING_DOWN = "SCALING_DOWN"
    DESTROYING = "DESTROYING"
    STOPPED = "STOPPED"
    SCALE_DOWN = "SCALE_DOWN"
    LAUNCH_FAILED = "LAUNCH_FAILED"
    DESTROY_FAILED = "DESTROY_FAILED"
    SCALE_DOWN_FAILED = "SCALE_DOWN_FAILED"
    SCALE_UP_FAILED = "SCALE_UP_FAILED"
    UNKNOWN = "UNKNOWN"


class DeploymentStatus(str, Enum):
    """Release (deployment) status values."""

    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    FAULT = "FAULT"
    TIMED_OUT = "TIMED_OUT"
    IN_PROGRESS = "IN_PROGRESS"
    STARTED = "STARTED"
    QUEUED = "QUEUED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    ABORTED = "ABORTED"
    STOPPED = "STOPPED"
    REJECTED = "REJECTED"


# States in which the server is mid-transition and the overview must be polled.
TRANSITIONAL_CLUSTER_STATES: frozenset[str] = frozenset(
    {
        ClusterState.LAUNCHING.value,
        ClusterState.DESTROYING.value,
        ClusterState.SCALING_UP.value,
        ClusterState.SCALING_DOWN.value,
    }
)


# =============================================================================
# Application State Enums
# =============================================================================

class LoadState(Enum):
    """Lifecycle of one environment loading session."""

    IDLE = "idle"
    RESOLVING_IDENTITY = "resolving_identity"
    LOADING_CRITICAL = "loading_critical"
    READY = "ready"
    FAILED = "failed"


class TabId(str, Enum):
    """Tab identifiers shared with the renderer."""

    OVERVIEW = "overview"
    RELEASES = "releases"
    RESOURCES = "resources"
    CONFIG = "config"
    SCHEDULE = "schedule"


# Tabs whose payload is fetched lazily on first selection.
LAZY_TABS: frozenset[TabId] = frozenset(
    {TabId.RELEASES, TabId.RESOURCES, TabId.SCHEDULE}
)


class TabState(Enum):
    """Tab state values for lazy loading tabs."""

    IDLE = auto()  # Not yet loaded
    LOADING = auto()  # Currently fetching
    LOADED = auto()  # Data available


class Tone(Enum):
    """Coarse severity used when colouring derived numbers."""

    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


class SessionEvent(Enum):
    """Notifications emitted by the staged loader as a session progresses."""

    RESET = "reset"
    FAILED = "failed"
    CRITICAL_READY = "critical_ready"
    SECONDARY_READY = "secondary_ready"
    TAB_LOADED = "tab_loaded"
    OVERVIEW_REFRESHED = "overview_refreshed"
