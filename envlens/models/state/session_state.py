"""Versioned per-session state for one environment overview."""

from dataclasses import dataclass, field

from envlens.constants.enums import LoadState, TabId
from envlens.models.cache.tab_cache import TabCache
from envlens.models.environment.identity import EnvironmentIdentity
from envlens.models.environment.payloads import (
    ClusterInfo,
    Overview,
    ResourceStats,
    VariableCounts,
)


@dataclass
class SessionState:
    """Everything fetched for one loading session.

    ``token`` increases every time a new session starts (initial load, hard
    reload, re-pick). Async results tagged with an older token are discarded.
    """

    token: int = 0
    identity: EnvironmentIdentity | None = None
    load_state: LoadState = LoadState.IDLE
    overview: Overview | None = None
    resource_stats: ResourceStats | None = None
    variable_counts: VariableCounts | None = None
    cost_enabled: bool = False
    tab_cache: TabCache = field(default_factory=TabCache)
    active_tab: TabId = TabId.OVERVIEW
    polling_active: bool = False
    error: str | None = None

    @property
    def cluster_id(self) -> str | None:
        return self.identity.id if self.identity else None

    @property
    def cluster(self) -> ClusterInfo | None:
        return self.overview.cluster if self.overview else None

    @property
    def is_ready(self) -> bool:
        return self.load_state is LoadState.READY

    @property
    def is_failed(self) -> bool:
        return self.load_state is LoadState.FAILED

    @property
    def stack_name(self) -> str | None:
        cluster = self.cluster
        if cluster and cluster.stack_name:
            return cluster.stack_name
        return self.identity.stack_name if self.identity else None

    @property
    def environment_name(self) -> str | None:
        cluster = self.cluster
        if cluster and cluster.name:
            return cluster.name
        return self.identity.cluster_name if self.identity else None
