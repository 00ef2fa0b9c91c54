"""Base controller classes."""

from envlens.controllers.base.base_controller import BaseController, WorkerResult

__all__ = [
    "BaseController",
    "WorkerResult",
]
