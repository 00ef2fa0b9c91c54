"""Constants module for EnvLens.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, markers with Final)
- timeouts.py: Timeout and interval values (seconds)
- defaults.py: Default values for settings

Note: Keyboard bindings are defined in envlens.keyboard module.
"""

from envlens.constants.defaults import (
    API_PREFIX_DEFAULT,
    BASE_URL_DEFAULT,
    LOG_LEVEL_DEFAULT,
    RELEASES_PAGE_SIZE_DEFAULT,
)
from envlens.constants.enums import (
    LAZY_TABS,
    TRANSITIONAL_CLUSTER_STATES,
    ClusterState,
    DeploymentStatus,
    LoadState,
    SessionEvent,
    TabId,
    TabState,
    Tone,
)
from envlens.constants.timeouts import (
    HTTP_CONNECT_TIMEOUT,
    HTTP_REQUEST_TIMEOUT,
    OVERVIEW_REFRESH_INTERVAL,
)
from envlens.constants.values import (
    APP_TITLE,
    KUBERNETES_CLOUD,
    NO_CLOUD,
)

__all__ = [
    # Defaults
    "API_PREFIX_DEFAULT",
    # Application
    "APP_TITLE",
    "BASE_URL_DEFAULT",
    # Timeouts
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_REQUEST_TIMEOUT",
    "KUBERNETES_CLOUD",
    "LAZY_TABS",
    "LOG_LEVEL_DEFAULT",
    "NO_CLOUD",
    "OVERVIEW_REFRESH_INTERVAL",
    "RELEASES_PAGE_SIZE_DEFAULT",
    "TRANSITIONAL_CLUSTER_STATES",
    # Enums
    "ClusterState",
    "DeploymentStatus",
    "LoadState",
    "SessionEvent",
    "TabId",
    "TabState",
    "Tone",
]
