"""Cache models."""

from envlens.models.cache.tab_cache import (
    ReleasesTabData,
    ResourcesTabData,
    ScheduleTabData,
    TabCache,
    TabPayload,
)

__all__ = [
    "ReleasesTabData",
    "ResourcesTabData",
    "ScheduleTabData",
    "TabCache",
    "TabPayload",
]
