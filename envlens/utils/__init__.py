"""Utility functions for EnvLens."""

from envlens.utils.environment_state import (
    build_banners,
    build_readiness,
    build_status_cards,
    classify_cluster_state,
    classify_deployment_status,
    deploy_health_percentage,
    has_kubernetes,
    header_actions,
    is_never_launched,
    is_polling_active,
)
from envlens.utils.time_format import (
    format_date,
    format_duration,
    format_elapsed,
    format_relative,
    humanize,
)

__all__ = [
    # Derivation
    "build_banners",
    "build_readiness",
    "build_status_cards",
    "classify_cluster_state",
    "classify_deployment_status",
    "deploy_health_percentage",
    "has_kubernetes",
    "header_actions",
    "is_never_launched",
    "is_polling_active",
    # Formatting
    "format_date",
    "format_duration",
    "format_elapsed",
    "format_relative",
    "humanize",
]
