"""Picker fetcher - project and environment lists for the no-context flow."""

from __future__ import annotations

from urllib.parse import quote

from envlens.controllers.environment.fetchers.environment_fetcher import FetchFunc
from envlens.controllers.environment.parsers.payload_parser import PayloadParser
from envlens.models.environment.payloads import EnvironmentSummary, ProjectSummary


class PickerFetcher:
    """Fetches what the environment picker offers."""

    def __init__(self, fetch_func: FetchFunc, parser: PayloadParser | None = None) -> None:
        self._fetch = fetch_func
        self._parser = parser or PayloadParser()

    async def fetch_projects(self) -> list[ProjectSummary] | None:
        """Fetch all projects, sorted by name."""
        return self._parser.parse_projects(await self._fetch("stacks/"))

    async def fetch_environments(self, stack_name: str) -> list[EnvironmentSummary] | None:
        """Fetch environments of one project, sorted by name."""
        raw = await self._fetch(f"stacks/{quote(stack_name, safe='')}/clusters-overview")
        return self._parser.parse_environments(raw)
