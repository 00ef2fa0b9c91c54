"""Init file for environment module."""

from envlens.controllers.environment.context_resolver import ContextResolver, Location
from envlens.controllers.environment.controller import (
    EnvironmentController,
    IdentityResolutionError,
)
from envlens.controllers.environment.gateway import DataSourceGateway
from envlens.controllers.environment.refresh_scheduler import RefreshScheduler

__all__ = [
    "ContextResolver",
    "DataSourceGateway",
    "EnvironmentController",
    "IdentityResolutionError",
    "Location",
    "RefreshScheduler",
]
