"""Shared fixtures for EnvLens tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest


class FakeGateway:
    """In-memory stand-in for DataSourceGateway.

    ``routes`` maps a relative API path to the decoded body it answers; a
    missing route answers None like any failed request. ``gates`` holds
    events a fetch waits on before answering.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.closed = False

    async def fetch(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        self.calls.append((path, params))
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        value = self.routes.get(path)
        return value() if callable(value) else value

    def gate(self, path: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[path] = event
        return event

    def count(self, path: str) -> int:
        return sum(1 for called, _ in self.calls if called == path)

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]

    async def aclose(self) -> None:
        self.closed = True


def overview_payload(
    cluster_id: str = "c1",
    name: str = "staging",
    state: str = "RUNNING",
    **extra: Any,
) -> dict[str, Any]:
    """Overview body as the control plane sends it."""
    cluster = {
        "id": cluster_id,
        "name": name,
        "stackName": "shop",
        "clusterState": state,
        "cloud": "AWS",
    }
    cluster.update(extra.pop("cluster", {}))
    return {"cluster": cluster, **extra}


def environment_routes(cluster_id: str = "c1", **overview: Any) -> dict[str, Any]:
    """Routes answering every critical and secondary read for ``cluster_id``."""
    return {
        f"clusters/{cluster_id}/deployments/overview": overview_payload(cluster_id, **overview),
        f"clusters/{cluster_id}/resource-stats": {"totalCount": 5, "enabledCount": 4},
        f"clusters/{cluster_id}/variable-counts": {"variableCount": 3, "secretCount": 1},
        "cost-explorer/aws/enabled": {"enabled": True},
    }


@pytest.fixture
def make_gateway() -> Callable[..., FakeGateway]:
    """Factory for FakeGateway instances."""
    return FakeGateway


@pytest.fixture
def gateway() -> FakeGateway:
    """Gateway answering a running environment ``c1``."""
    return FakeGateway(environment_routes())


@pytest.fixture
def routes_for() -> Callable[..., dict[str, Any]]:
    return environment_routes


@pytest.fixture
def overview_body() -> Callable[..., dict[str, Any]]:
    return overview_payload


async def wait_for_call(gateway: FakeGateway, path: str, attempts: int = 100) -> None:
    """Yield to the loop until ``path`` was requested."""
    for _ in range(attempts):
        if path in gateway.paths:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"{path} was never fetched")


@pytest.fixture
def wait_for() -> Callable[..., Any]:
    return wait_for_call
