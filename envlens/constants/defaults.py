"""Default values for settings.

All default values used in AppSettings model and validation fallback values.
"""

from typing import Final

# ============================================================================
# API defaults
# ============================================================================

BASE_URL_DEFAULT: Final = "http://localhost:8080"
API_PREFIX_DEFAULT: Final = "/cc-ui/v1"
RELEASES_PAGE_SIZE_DEFAULT: Final = 25

# ============================================================================
# Logging defaults
# ============================================================================

LOG_LEVEL_DEFAULT: Final = "INFO"

__all__ = [
    "API_PREFIX_DEFAULT",
    "BASE_URL_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "RELEASES_PAGE_SIZE_DEFAULT",
]
