"""Tests for RefreshScheduler - the overview polling loop."""

from __future__ import annotations

import asyncio

import pytest

from envlens.controllers.environment.refresh_scheduler import RefreshScheduler

INTERVAL = 0.01


class CountingTick:
    """Tick that keeps polling for ``rounds`` calls, then stops."""

    def __init__(self, rounds: int = 1) -> None:
        self.rounds = rounds
        self.calls = 0

    async def __call__(self) -> bool:
        self.calls += 1
        return self.calls < self.rounds


async def _wait_until_stopped(scheduler: RefreshScheduler, timeout: float = 1.0) -> None:
    async def _poll() -> None:
        while scheduler.is_running:
            await asyncio.sleep(INTERVAL)

    await asyncio.wait_for(_poll(), timeout)


class TestRefreshScheduler:
    """Tests for RefreshScheduler."""

    @pytest.mark.asyncio
    async def test_initial_state(self) -> None:
        scheduler = RefreshScheduler(CountingTick(), interval=INTERVAL)
        assert scheduler.is_running is False
        assert scheduler.interval == INTERVAL

    @pytest.mark.asyncio
    async def test_evaluate_true_starts_loop(self) -> None:
        scheduler = RefreshScheduler(CountingTick(rounds=100), interval=INTERVAL)

        scheduler.evaluate(True)

        assert scheduler.is_running is True
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_loop_ends_when_tick_returns_false(self) -> None:
        """The loop stops itself once polling is no longer needed."""
        tick = CountingTick(rounds=3)
        scheduler = RefreshScheduler(tick, interval=INTERVAL)

        scheduler.evaluate(True)
        await _wait_until_stopped(scheduler)

        assert tick.calls == 3
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_evaluate_true_twice_keeps_single_loop(self) -> None:
        scheduler = RefreshScheduler(CountingTick(rounds=100), interval=INTERVAL)

        scheduler.evaluate(True)
        first = scheduler._task
        scheduler.evaluate(True)

        assert scheduler._task is first
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_evaluate_false_stops_loop(self) -> None:
        tick = CountingTick(rounds=100)
        scheduler = RefreshScheduler(tick, interval=1.0)
        scheduler.evaluate(True)

        scheduler.evaluate(False)
        await asyncio.sleep(0)

        assert scheduler.is_running is False
        assert tick.calls == 0

    @pytest.mark.asyncio
    async def test_start_replaces_running_loop(self) -> None:
        scheduler = RefreshScheduler(CountingTick(rounds=100), interval=1.0)
        scheduler.start()
        first = scheduler._task

        scheduler.start()
        await asyncio.sleep(0)

        assert first is not None
        assert first.cancelled()
        assert scheduler.is_running is True
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_stop_from_inside_tick_ends_loop(self) -> None:
        """Stopping during a tick lets the tick finish, then the loop exits."""
        calls = 0
        scheduler: RefreshScheduler

        async def tick() -> bool:
            nonlocal calls
            calls += 1
            scheduler.stop()
            return True

        scheduler = RefreshScheduler(tick, interval=INTERVAL)
        scheduler.start()
        await asyncio.sleep(INTERVAL * 10)

        assert calls == 1
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_shutdown_cancels_and_waits(self) -> None:
        tick = CountingTick(rounds=100)
        scheduler = RefreshScheduler(tick, interval=1.0)
        scheduler.start()
        task = scheduler._task

        await scheduler.shutdown()

        assert task is not None
        assert task.done()
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_shutdown_without_loop_is_noop(self) -> None:
        scheduler = RefreshScheduler(CountingTick(), interval=INTERVAL)
        await scheduler.shutdown()
        assert scheduler.is_running is False
