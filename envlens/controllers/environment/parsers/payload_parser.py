"""Payload parser - narrows raw API bodies to canonical models.

Every method accepts whatever the gateway returned (``None`` included) and
returns either a model, a list of models, or ``None`` for absent data.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from envlens.models.environment.payloads import (
    AvailabilitySchedule,
    Deployment,
    EnvironmentSummary,
    IngressRule,
    MaintenanceWindow,
    Overview,
    ProjectSummary,
    ResourceItem,
    ResourceStats,
    VariableCounts,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class PayloadParser:
    """Parses control-plane payloads into structured models."""

    # Envelope keys tried, in order, when a list arrives wrapped in an object.
    _DEPLOYMENT_LIST_KEYS = ("content", "deployments", "items")
    _RESOURCE_LIST_KEYS = ("content", "resources", "items")
    _INGRESS_LIST_KEYS = ("ingressRules", "rules")
    _SCHEDULE_LIST_KEYS = ("content", "schedules")
    _PROJECT_LIST_KEYS = ("content", "stacks", "items")
    _ENVIRONMENT_LIST_KEYS = ("content", "clusters", "items")

    @staticmethod
    def _parse_model(raw: Any, model: type[ModelT]) -> ModelT | None:
        if not isinstance(raw, dict):
            return None
        try:
            return model.model_validate(raw)
        except ValidationError:
            logger.debug("Discarding invalid %s payload", model.__name__, exc_info=True)
            return None

    @staticmethod
    def _unwrap_list(raw: Any, keys: tuple[str, ...]) -> list[Any] | None:
        if isinstance(raw, list):
            return raw
        if not isinstance(raw, dict):
            return None
        for key in keys:
            value = raw.get(key)
            if isinstance(value, list):
                return value
        return []

    @classmethod
    def _parse_list(
        cls, raw: Any, keys: tuple[str, ...], model: type[ModelT]
    ) -> list[ModelT] | None:
        items = cls._unwrap_list(raw, keys)
        if items is None:
            return None
        parsed: list[ModelT] = []
        for item in items:
            value = cls._parse_model(item, model)
            if value is not None:
                parsed.append(value)
        return parsed

    # =========================================================================
    # Critical / secondary phase payloads
    # =========================================================================

    def parse_cluster_id(self, raw: Any) -> str | None:
        """Extract the canonical id from an identity-resolution response."""
        if not isinstance(raw, dict):
            return None
        value = raw.get("id") or raw.get("clusterId")
        return str(value) if value else None

    def parse_overview(self, raw: Any) -> Overview | None:
        return self._parse_model(raw, Overview)

    def parse_resource_stats(self, raw: Any) -> ResourceStats | None:
        return self._parse_model(raw, ResourceStats)

    def parse_variable_counts(self, raw: Any) -> VariableCounts | None:
        return self._parse_model(raw, VariableCounts)

    def parse_cost_enabled(self, raw: Any) -> bool:
        """The probe answers either a bare boolean or ``{"enabled": bool}``."""
        if raw is True:
            return True
        return isinstance(raw, dict) and raw.get("enabled") is True

    # =========================================================================
    # Lazy tab payloads
    # =========================================================================

    def parse_deployments(self, raw: Any) -> list[Deployment] | None:
        return self._parse_list(raw, self._DEPLOYMENT_LIST_KEYS, Deployment)

    def parse_resources(self, raw: Any) -> list[ResourceItem] | None:
        return self._parse_list(raw, self._RESOURCE_LIST_KEYS, ResourceItem)

    def parse_ingress_rules(self, raw: Any) -> list[IngressRule] | None:
        return self._parse_list(raw, self._INGRESS_LIST_KEYS, IngressRule)

    def parse_schedules(self, raw: Any) -> list[AvailabilitySchedule] | None:
        return self._parse_list(raw, self._SCHEDULE_LIST_KEYS, AvailabilitySchedule)

    def parse_maintenance_window(self, raw: Any) -> MaintenanceWindow | None:
        return self._parse_model(raw, MaintenanceWindow)

    # =========================================================================
    # Picker payloads
    # =========================================================================

    def parse_projects(self, raw: Any) -> list[ProjectSummary] | None:
        projects = self._parse_list(raw, self._PROJECT_LIST_KEYS, ProjectSummary)
        if projects is None:
            return None
        return sorted(projects, key=lambda project: project.name)

    def parse_environments(self, raw: Any) -> list[EnvironmentSummary] | None:
        environments = self._parse_list(
            raw, self._ENVIRONMENT_LIST_KEYS, EnvironmentSummary
        )
        if environments is None:
            return None
        return sorted(environments, key=lambda env: env.name or "")
