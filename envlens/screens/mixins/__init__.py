"""Screen mixins package for EnvLens."""

from envlens.screens.mixins.tabbed_view_mixin import TabbedViewMixin
from envlens.screens.mixins.worker_mixin import LoadingOverlay, WorkerMixin

__all__ = [
    "LoadingOverlay",
    "TabbedViewMixin",
    "WorkerMixin",
]
