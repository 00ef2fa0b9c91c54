"""Tab fetcher - lazy per-tab reads for releases, resources and schedule."""

from __future__ import annotations

from envlens.constants.defaults import RELEASES_PAGE_SIZE_DEFAULT
from envlens.controllers.environment.fetchers.environment_fetcher import FetchFunc
from envlens.controllers.environment.parsers.payload_parser import PayloadParser
from envlens.models.environment.payloads import (
    AvailabilitySchedule,
    Deployment,
    IngressRule,
    MaintenanceWindow,
    ResourceItem,
)


class TabFetcher:
    """Fetches the payloads behind the lazily loaded tabs."""

    def __init__(
        self,
        fetch_func: FetchFunc,
        parser: PayloadParser | None = None,
        *,
        page_size: int = RELEASES_PAGE_SIZE_DEFAULT,
    ) -> None:
        self._fetch = fetch_func
        self._parser = parser or PayloadParser()
        self.page_size = page_size

    async def fetch_releases(self, cluster_id: str) -> list[Deployment] | None:
        """Fetch the first page of release history."""
        raw = await self._fetch(
            f"clusters/{cluster_id}/deployments",
            params={"size": self.page_size, "page": 0},
        )
        return self._parser.parse_deployments(raw)

    async def fetch_resources(self, cluster_id: str) -> list[ResourceItem] | None:
        raw = await self._fetch(
            f"dropdown/cluster/{cluster_id}/resources-info",
            params={"includeContent": "false"},
        )
        return self._parser.parse_resources(raw)

    async def fetch_ingress_rules(self, cluster_id: str) -> list[IngressRule] | None:
        raw = await self._fetch(f"clusters/{cluster_id}/k8s-explorer/ingress-rules")
        return self._parser.parse_ingress_rules(raw)

    async def fetch_schedules(self, cluster_id: str) -> list[AvailabilitySchedule] | None:
        raw = await self._fetch(f"clusters/{cluster_id}/availability-schedule")
        return self._parser.parse_schedules(raw)

    async def fetch_maintenance_window(self, cluster_id: str) -> MaintenanceWindow | None:
        raw = await self._fetch(f"maintenance-window/{cluster_id}")
        return self._parser.parse_maintenance_window(raw)
