"""WorkerMixin - Worker lifecycle management for async environment loading.

This module provides a mixin class that implements consistent patterns for:
- Background worker management using Textual Workers
- Loading overlay visibility
- Error surfacing without crashing the app
- Loading duration tracking

Workers are grouped: starting an exclusive worker only cancels workers of
the same group, so a tab fetch never cancels the session load and vice versa.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from textual._context import NoActiveAppError
from textual.app import ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches, WrongType
from textual.reactive import reactive
from textual.widgets import Static
from textual.worker import Worker, WorkerState

logger = logging.getLogger(__name__)


class WorkerMixin:
    """Mixin providing Worker lifecycle management for screens.

    - `start_worker()`: worker creation with per-group exclusivity
    - `cancel_workers()`: cancel every running worker of the screen
    - `on_worker_state_changed()`: default handler for worker state changes
    - `show_loading_overlay()` / `hide_loading_overlay()` / `show_error_state()`

    The default overlay helpers expect a ``#loading-overlay`` container with a
    ``#loading-text`` Static inside it.
    """

    is_loading = reactive(False)
    error = reactive[str | None](None)
    loading_duration_ms = reactive(0.0, init=False)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        # Screen.__init__ must run so the DOM node is fully initialised.
        super().__init__(*args, **kwargs)
        self._load_start_time: float | None = None
        self._active_worker_name: str | None = None

    def watch_is_loading(self, loading: bool) -> None:
        if loading:
            self.show_loading_overlay()
        else:
            self.hide_loading_overlay()

    def watch_error(self, error: str | None) -> None:
        if error:
            self.show_error_state(error)

    def start_worker(
        self,
        worker_func: Callable[..., Awaitable[Any]],
        *,
        name: str | None = None,
        group: str = "default",
        exclusive: bool = True,
        exit_on_error: bool = False,
    ) -> Worker[Any]:
        """Start an async worker.

        Args:
            worker_func: Async function to run in the worker
            name: Worker name for debugging
            group: Worker group; ``exclusive`` only cancels this group
            exclusive: If True, cancel running workers of ``group`` first
            exit_on_error: If False, errors don't crash the app (default False)

        Returns:
            The Worker instance
        """
        self._load_start_time = time.monotonic()
        self._active_worker_name = name
        return self.run_worker(  # type: ignore[attr-defined]
            worker_func,
            name=name,
            group=group,
            exclusive=exclusive,
            exit_on_error=exit_on_error,
        )

    def cancel_workers(self) -> None:
        """Cancel all running workers using Textual's built-in WorkerManager."""
        with suppress(NoActiveAppError):
            self.workers.cancel_all()  # type: ignore[attr-defined]

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Log worker completion and surface worker errors."""
        duration_ms = 0.0
        if self._load_start_time is not None and event.state in (
            WorkerState.SUCCESS,
            WorkerState.CANCELLED,
            WorkerState.ERROR,
        ):
            duration_ms = (time.monotonic() - self._load_start_time) * 1000
            self.loading_duration_ms = duration_ms
            self._load_start_time = None

        if event.state == WorkerState.CANCELLED:
            logger.debug("Worker '%s' was cancelled (%.2fms)", event.worker.name, duration_ms)
        elif event.state == WorkerState.ERROR:
            logger.error("Worker '%s' error: %s", event.worker.name, event.worker.error)
            self.is_loading = False
            self.error = str(event.worker.error)
        elif event.state == WorkerState.SUCCESS:
            logger.debug("Worker '%s' completed (%.2fms)", event.worker.name, duration_ms)

    # =========================================================================
    # Loading State Management - Default implementations
    # =========================================================================

    def show_loading_overlay(self, message: str = "Loading...") -> None:
        with suppress(NoMatches, WrongType):
            overlay = self.query_one("#loading-overlay", Container)  # type: ignore[attr-defined]
            overlay.display = True
            with suppress(NoMatches, WrongType):
                loading_text = overlay.query_one("#loading-text", Static)
                loading_text.update(message)
                loading_text.remove_class("error-text")

    def hide_loading_overlay(self) -> None:
        with suppress(NoMatches, WrongType):
            overlay = self.query_one("#loading-overlay", Container)  # type: ignore[attr-defined]
            overlay.display = False

    def show_error_state(self, message: str) -> None:
        """Show ``message`` in the loading overlay, styled as an error."""
        with suppress(NoMatches, WrongType):
            overlay = self.query_one("#loading-overlay", Container)  # type: ignore[attr-defined]
            overlay.display = True
            loading_text = overlay.query_one("#loading-text", Static)
            loading_text.update(message)
            loading_text.add_class("error-text")


class LoadingOverlay(Container):
    """Centered loading message; compose it into screens using WorkerMixin."""

    def __init__(self, message: str = "Loading...") -> None:
        super().__init__(id="loading-overlay")
        self._message = message

    def compose(self) -> ComposeResult:
        yield Static(self._message, id="loading-text", markup=False)


__all__ = [
    "LoadingOverlay",
    "WorkerMixin",
]
