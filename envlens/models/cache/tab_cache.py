"""Per-session cache of lazily fetched tab payloads."""

from dataclasses import dataclass, field
from typing import Union

from envlens.constants.enums import TabId, TabState
from envlens.models.environment.payloads import (
    AvailabilitySchedule,
    Deployment,
    IngressRule,
    MaintenanceWindow,
    ResourceItem,
)


@dataclass(frozen=True)
class ReleasesTabData:
    """First page of release history. ``None`` means the fetch came back absent."""

    deployments: list[Deployment] | None = None


@dataclass(frozen=True)
class ResourcesTabData:
    """Resources plus ingress rules.

    ``ingress_rules`` stays ``None`` permanently when the environment does not
    run on Kubernetes and the ingress fetch was skipped.
    """

    resources: list[ResourceItem] | None = None
    ingress_rules: list[IngressRule] | None = None
    ingress_skipped: bool = False


@dataclass(frozen=True)
class ScheduleTabData:
    """Availability schedules plus maintenance window."""

    schedules: list[AvailabilitySchedule] | None = None
    maintenance_window: MaintenanceWindow | None = None


TabPayload = Union[ReleasesTabData, ResourcesTabData, ScheduleTabData]


@dataclass
class TabCache:
    """Mapping of tab id to its lazily fetched payload.

    A missing entry means "not fetched yet", never "empty". Entries are never
    evicted during a session; ``clear()`` drops every entry in one step.
    """

    _entries: dict[TabId, TabPayload] = field(default_factory=dict)
    _in_flight: set[TabId] = field(default_factory=set)

    def get(self, tab: TabId) -> TabPayload | None:
        return self._entries.get(tab)

    def has(self, tab: TabId) -> bool:
        return tab in self._entries

    def state_for(self, tab: TabId) -> TabState:
        """Return the loading state of one tab."""
        if tab in self._entries:
            return TabState.LOADED
        if tab in self._in_flight:
            return TabState.LOADING
        return TabState.IDLE

    def claim(self, tab: TabId) -> bool:
        """Mark ``tab`` as being fetched.

        Returns False when the tab is already cached or already being
        fetched, in which case the caller must not issue a fetch.
        """
        if tab in self._entries or tab in self._in_flight:
            return False
        self._in_flight.add(tab)
        return True

    def release(self, tab: TabId) -> None:
        """Drop an in-flight claim without storing a payload."""
        self._in_flight.discard(tab)

    def set(self, tab: TabId, payload: TabPayload) -> None:
        """Store a tab payload and drop its in-flight claim."""
        self._entries[tab] = payload
        self._in_flight.discard(tab)

    def clear(self) -> None:
        """Drop every entry and in-flight claim at once."""
        self._entries = {}
        self._in_flight = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, tab: object) -> bool:
        return tab in self._entries
