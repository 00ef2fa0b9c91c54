"""Refresh scheduler - the overview polling loop.

The loop only runs while a transition is in flight on the server. Each tick
re-fetches the overview and reports whether polling should continue; the
loop ends itself as soon as it should not.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from envlens.constants.timeouts import OVERVIEW_REFRESH_INTERVAL

logger = logging.getLogger(__name__)

TickFunc = Callable[[], Awaitable[bool]]


class RefreshScheduler:
    """Owns at most one recurring refresh task."""

    def __init__(self, tick: TickFunc, interval: float = OVERVIEW_REFRESH_INTERVAL) -> None:
        """Initialize the scheduler.

        Args:
            tick: Coroutine function run every ``interval`` seconds. It returns
                the recomputed polling flag; False ends the loop.
            interval: Seconds between ticks
        """
        self._tick = tick
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def evaluate(self, polling_active: bool) -> None:
        """Start the loop when polling is needed and none runs; stop it otherwise."""
        if polling_active:
            if not self.is_running:
                self.start()
        else:
            self.stop()

    def start(self) -> None:
        """Start a fresh loop, cancelling any loop already running."""
        self.stop()
        self._task = asyncio.create_task(self._run(), name="envlens-overview-refresh")
        logger.debug("Overview refresh started (every %ss)", self.interval)

    def stop(self) -> None:
        """Cancel the running loop, if any."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            # Stopped from inside a tick; the loop exits when the tick returns.
            return
        task.cancel()
        logger.debug("Overview refresh stopped")

    async def shutdown(self) -> None:
        """Cancel the loop unconditionally and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        if not task.done() and task is not asyncio.current_task():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        logger.debug("Overview refresh shut down")

    async def _run(self) -> None:
        current = asyncio.current_task()
        try:
            while True:
                await asyncio.sleep(self.interval)
                keep_polling = await self._tick()
                if not keep_polling or self._task is not current:
                    logger.debug("Overview refresh finished; no transition in flight")
                    return
        finally:
            if self._task is current:
                self._task = None
