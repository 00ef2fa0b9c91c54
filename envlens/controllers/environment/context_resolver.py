"""Context resolver - decides which environment to display.

Sources are tried in a fixed order and the first match wins:

1. explicit ``cluster-id`` attribute
2. explicit ``stack-name`` + ``cluster-name`` attributes
3. ``clusterId`` / ``cluster-id`` query parameter
4. ``/projects/{stack}/environments/{cluster}`` in the path
5. the same pattern in the fragment

No network calls happen here. A location that cannot be parsed yields no
context instead of an error.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import parse_qs, unquote, urlsplit

from envlens.constants.values import CLUSTER_ID_QUERY_PARAMS
from envlens.models.environment.identity import EnvironmentIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """The navigable location the overview is shown at."""

    path: str = ""
    query: str = ""
    fragment: str = ""

    @classmethod
    def from_url(cls, url: str | None) -> Location:
        """Split a URL (absolute or path-only) into a Location."""
        if not url:
            return cls()
        parts = urlsplit(url)
        return cls(path=parts.path, query=parts.query, fragment=parts.fragment)


class ContextResolver:
    """Resolves an ``EnvironmentIdentity`` from attributes and location."""

    ATTR_CLUSTER_ID = "cluster-id"
    ATTR_STACK_NAME = "stack-name"
    ATTR_CLUSTER_NAME = "cluster-name"

    _ENVIRONMENT_PATH_RE = re.compile(
        r"/projects/([^/?#]+)/environments/([^/?#]+)"
    )

    def resolve(
        self,
        attributes: Mapping[str, str | None] | None = None,
        location: Location | None = None,
    ) -> EnvironmentIdentity | None:
        """Return the identity to load, or ``None`` when there is no context.

        Args:
            attributes: Explicit identity attributes (``cluster-id``,
                ``stack-name``, ``cluster-name``)
            location: Current navigable location

        Returns:
            EnvironmentIdentity, or None to trigger the environment picker.
        """
        identity = self._from_attributes(attributes or {})
        if identity is not None:
            return identity

        try:
            return self._from_location(location or Location())
        except Exception:
            logger.debug("Ignoring unparseable location %r", location, exc_info=True)
            return None

    def _from_attributes(
        self, attributes: Mapping[str, str | None]
    ) -> EnvironmentIdentity | None:
        cluster_id = attributes.get(self.ATTR_CLUSTER_ID)
        if cluster_id:
            return EnvironmentIdentity(id=cluster_id)

        stack_name = attributes.get(self.ATTR_STACK_NAME)
        cluster_name = attributes.get(self.ATTR_CLUSTER_NAME)
        if stack_name and cluster_name:
            return EnvironmentIdentity(stack_name=stack_name, cluster_name=cluster_name)
        return None

    def _from_location(self, location: Location) -> EnvironmentIdentity | None:
        query = parse_qs(location.query.lstrip("?"))
        for param in CLUSTER_ID_QUERY_PARAMS:
            values = query.get(param)
            if values and values[0]:
                return EnvironmentIdentity(id=values[0])

        for portion in (location.path, location.fragment):
            identity = self._match_environment_path(portion)
            if identity is not None:
                return identity
        return None

    def _match_environment_path(self, text: str) -> EnvironmentIdentity | None:
        match = self._ENVIRONMENT_PATH_RE.search(text or "")
        if match is None:
            return None
        return EnvironmentIdentity(
            stack_name=unquote(match.group(1), errors="strict"),
            cluster_name=unquote(match.group(2), errors="strict"),
        )
