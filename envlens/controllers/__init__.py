"""Controllers module for EnvLens.

This module provides the controllers that read environment data from the
control plane and stage it into per-session state.
"""

from __future__ import annotations

# Base classes
from envlens.controllers.base import BaseController, WorkerResult

# Environment domain
from envlens.controllers.environment import (
    ContextResolver,
    DataSourceGateway,
    EnvironmentController,
    IdentityResolutionError,
    Location,
    RefreshScheduler,
)

__all__ = [
    # Base
    "BaseController",
    # Environment domain
    "ContextResolver",
    "DataSourceGateway",
    "EnvironmentController",
    "IdentityResolutionError",
    "Location",
    "RefreshScheduler",
    "WorkerResult",
]
