"""Environment domain models."""

from envlens.models.environment.identity import EnvironmentIdentity
from envlens.models.environment.payloads import (
    AvailabilitySchedule,
    ClusterInfo,
    Deployment,
    DeploymentStats,
    EnvironmentSummary,
    IngressRule,
    MaintenanceWindow,
    Overview,
    ProjectSummary,
    ResourceItem,
    ResourceStats,
    StackInfo,
    VariableCounts,
    VariableMeta,
)

__all__ = [
    "AvailabilitySchedule",
    "ClusterInfo",
    "Deployment",
    "DeploymentStats",
    "EnvironmentIdentity",
    "EnvironmentSummary",
    "IngressRule",
    "MaintenanceWindow",
    "Overview",
    "ProjectSummary",
    "ResourceItem",
    "ResourceStats",
    "StackInfo",
    "VariableCounts",
    "VariableMeta",
]
