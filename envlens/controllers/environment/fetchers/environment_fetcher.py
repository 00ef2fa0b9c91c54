"""Environment fetcher - identity, critical and secondary phase reads."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

from envlens.controllers.environment.parsers.payload_parser import PayloadParser
from envlens.models.environment.payloads import (
    Overview,
    ResourceStats,
    VariableCounts,
)

FetchFunc = Callable[..., Awaitable[Any]]


class EnvironmentFetcher:
    """Fetches the environment snapshot and its aggregate counters."""

    def __init__(self, fetch_func: FetchFunc, parser: PayloadParser | None = None) -> None:
        """Initialize with the gateway fetch function.

        Args:
            fetch_func: Async ``fetch(path, params=None)`` returning data or None
            parser: Payload parser (a default one is created when omitted)
        """
        self._fetch = fetch_func
        self._parser = parser or PayloadParser()

    async def resolve_cluster_id(self, stack_name: str, cluster_name: str) -> str | None:
        """Look up the canonical id for a (stack, cluster) pair."""
        raw = await self._fetch(
            f"clusters/stack/{quote(stack_name, safe='')}"
            f"/cluster/{quote(cluster_name, safe='')}/info"
        )
        return self._parser.parse_cluster_id(raw)

    async def fetch_overview(self, cluster_id: str) -> Overview | None:
        raw = await self._fetch(f"clusters/{cluster_id}/deployments/overview")
        return self._parser.parse_overview(raw)

    async def fetch_resource_stats(self, cluster_id: str) -> ResourceStats | None:
        raw = await self._fetch(f"clusters/{cluster_id}/resource-stats")
        return self._parser.parse_resource_stats(raw)

    async def fetch_variable_counts(self, cluster_id: str) -> VariableCounts | None:
        raw = await self._fetch(f"clusters/{cluster_id}/variable-counts")
        return self._parser.parse_variable_counts(raw)

    async def fetch_cost_enabled(self) -> bool:
        """Probe whether the cost explorer is available."""
        raw = await self._fetch("cost-explorer/aws/enabled")
        return self._parser.parse_cost_enabled(raw)
