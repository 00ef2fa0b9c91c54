"""Scalar constants for EnvLens.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "EnvLens"
CONFIG_ENV_VAR: Final = "ENVLENS_CONFIG"
BASE_URL_ENV_VAR: Final = "ENVLENS_BASE_URL"

# ============================================================================
# Cloud markers
# ============================================================================

KUBERNETES_CLOUD: Final = "KUBERNETES"
NO_CLOUD: Final = "NO_CLOUD"
KUBERNETES_COMPONENT_TOKENS: Final = ("kubernetes", "k8s")

# ============================================================================
# Query parameters carrying an environment id
# ============================================================================

CLUSTER_ID_QUERY_PARAMS: Final = ("clusterId", "cluster-id")

# ============================================================================
# Display placeholders
# ============================================================================

NO_VALUE: Final = "—"
NO_DATA_YET: Final = "No data yet"
FAILED_TO_LOAD: Final = "Failed to load"

__all__ = [
    "APP_TITLE",
    "BASE_URL_ENV_VAR",
    "CLUSTER_ID_QUERY_PARAMS",
    "CONFIG_ENV_VAR",
    "FAILED_TO_LOAD",
    "KUBERNETES_CLOUD",
    "KUBERNETES_COMPONENT_TOKENS",
    "NO_CLOUD",
    "NO_DATA_YET",
    "NO_VALUE",
]
