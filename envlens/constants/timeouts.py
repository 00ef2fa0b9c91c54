"""Timeout constants for EnvLens.

All timeout and interval values for API requests and refresh cycles.
"""

from typing import Final

# ============================================================================
# HTTP timeouts (float, in seconds)
# ============================================================================

HTTP_REQUEST_TIMEOUT: Final = 10.0
HTTP_CONNECT_TIMEOUT: Final = 5.0

# ============================================================================
# Refresh cycles (float, in seconds)
# ============================================================================

OVERVIEW_REFRESH_INTERVAL: Final = 15.0

__all__ = [
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_REQUEST_TIMEOUT",
    "OVERVIEW_REFRESH_INTERVAL",
]
