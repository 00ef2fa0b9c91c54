"""Environment screen presenter - session orchestration, polling, and view data."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from textual.message import Message

from envlens.constants.enums import SessionEvent, TabId
from envlens.constants.timeouts import OVERVIEW_REFRESH_INTERVAL
from envlens.controllers import (
    ContextResolver,
    DataSourceGateway,
    EnvironmentController,
    Location,
    RefreshScheduler,
)
from envlens.models.cache.tab_cache import TabPayload
from envlens.models.environment.identity import EnvironmentIdentity
from envlens.models.environment.payloads import (
    ClusterInfo,
    EnvironmentSummary,
    Overview,
    ProjectSummary,
)
from envlens.models.state.session_state import SessionState
from envlens.screens.environment.intents import IntentContext, IntentEmitter
from envlens.utils.environment_state import (
    Banner,
    BlueprintReadiness,
    HeaderAction,
    LegacyReadiness,
    ReleaseBreakdown,
    StateDescriptor,
    StatusCard,
    build_banners,
    build_readiness,
    build_status_cards,
    classify_cluster_state,
    cluster_state_of,
    governance_rows,
    group_resources_by_type,
    header_actions,
    header_tags,
    infrastructure_rows,
    is_never_launched,
    release_breakdown,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Worker Messages
# =============================================================================


class EnvironmentSessionUpdated(Message):
    """Message indicating the session state changed."""

    def __init__(self, event: SessionEvent, tab: TabId | None = None) -> None:
        super().__init__()
        self.event = event
        self.tab = tab


class EnvironmentLoadFailed(Message):
    """Message indicating the session failed to resolve its environment."""

    def __init__(self, error: str) -> None:
        super().__init__()
        self.error = error


class PickerRequested(Message):
    """Message indicating no environment context was found."""


class PickerProjectsLoaded(Message):
    """Message carrying the projects offered by the picker."""

    def __init__(self, projects: list[ProjectSummary] | None) -> None:
        super().__init__()
        self.projects = projects


class PickerEnvironmentsLoaded(Message):
    """Message carrying the environments of one project."""

    def __init__(
        self, stack_name: str, environments: list[EnvironmentSummary] | None
    ) -> None:
        super().__init__()
        self.stack_name = stack_name
        self.environments = environments


class EnvironmentPresenter:
    """Presenter for EnvironmentScreen - owns the loader, the polling loop and intents."""

    def __init__(
        self,
        screen: Any,
        gateway: DataSourceGateway,
        *,
        page_size: int | None = None,
        refresh_interval: float = OVERVIEW_REFRESH_INTERVAL,
        controller: EnvironmentController | None = None,
    ) -> None:
        self._screen = screen
        if controller is None:
            kwargs = {} if page_size is None else {"page_size": page_size}
            controller = EnvironmentController(gateway, **kwargs)
        self._controller = controller
        self._controller.set_listener(self._on_session_event)
        self._scheduler = RefreshScheduler(
            self._controller.refresh_overview, interval=refresh_interval
        )
        self._resolver = ContextResolver()
        self._intents = IntentEmitter(self._post)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._controller.state

    @property
    def controller(self) -> EnvironmentController:
        return self._controller

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def is_polling(self) -> bool:
        return self._scheduler.is_running

    # =========================================================================
    # Messaging
    # =========================================================================

    def _post(self, message: Message) -> None:
        try:
            self._screen.post_message(message)
        except Exception:
            logger.debug("Dropping %s; screen is gone", type(message).__name__, exc_info=True)

    def _start_worker(
        self, work: Any, *, name: str, group: str, exclusive: bool = True
    ) -> None:
        start_worker = getattr(self._screen, "start_worker", None)
        if callable(start_worker):
            start_worker(work, name=name, group=group, exclusive=exclusive)
            return
        self._screen.run_worker(work, name=name, group=group, exclusive=exclusive)

    def _on_session_event(self, event: SessionEvent, tab: TabId | None) -> None:
        state = self._controller.state
        if event is SessionEvent.RESET:
            self._scheduler.stop()
        elif event in (SessionEvent.CRITICAL_READY, SessionEvent.OVERVIEW_REFRESHED):
            self._scheduler.evaluate(state.polling_active)

        if event is SessionEvent.FAILED:
            self._post(EnvironmentLoadFailed(state.error or "Failed to load environment"))
            return
        self._post(EnvironmentSessionUpdated(event, tab))

    # =========================================================================
    # Loading
    # =========================================================================

    def start(
        self,
        attributes: Mapping[str, str | None] | None = None,
        location: Location | str | None = None,
    ) -> EnvironmentIdentity | None:
        """Resolve the environment from context and start loading it.

        Returns:
            The resolved identity, or None when the picker was requested.
        """
        if isinstance(location, str):
            location = Location.from_url(location)
        identity = self._resolver.resolve(attributes, location)
        if identity is None:
            logger.info("No environment context; opening the picker")
            self._post(PickerRequested())
            self.load_projects()
            return None
        self.load(identity)
        return identity

    def load(self, identity: EnvironmentIdentity) -> None:
        async def _load() -> None:
            await self._controller.load(identity, active_tab=self.state.active_tab)

        self._start_worker(_load, name="environment-load", group="environment-load")

    def reload(self) -> None:
        """Hard reload: discard everything and load the environment again."""
        self._scheduler.stop()

        async def _reload() -> None:
            result = await self._controller.fetch_all()
            logger.debug("Hard reload finished in %.0fms", result.duration_ms)

        self._start_worker(_reload, name="environment-load", group="environment-load")

    def pick(self, cluster_id: str) -> None:
        async def _pick() -> None:
            await self._controller.pick(cluster_id)

        self._start_worker(_pick, name="environment-load", group="environment-load")

    def select_tab(self, tab: TabId) -> None:
        """Activate ``tab``; its data is fetched the first time only."""

        async def _select() -> None:
            await self._controller.select_tab(tab)

        # Not exclusive: cancelling an in-flight tab fetch would allow a second one.
        self._start_worker(
            _select, name=f"environment-tab-{tab.value}", group="environment-tabs", exclusive=False
        )

    def load_projects(self) -> None:
        async def _projects() -> None:
            self._post(PickerProjectsLoaded(await self._controller.list_projects()))

        self._start_worker(_projects, name="picker-projects", group="picker")

    def load_environments(self, stack_name: str) -> None:
        async def _environments() -> None:
            environments = await self._controller.list_environments(stack_name)
            self._post(PickerEnvironmentsLoaded(stack_name, environments))

        self._start_worker(_environments, name="picker-environments", group="picker")

    async def teardown(self) -> None:
        """Cancel the polling loop; called when the screen goes away."""
        await self._scheduler.shutdown()

    # =========================================================================
    # Intents
    # =========================================================================

    def emit(
        self,
        action: str,
        *,
        deployment_id: str | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        target_environment: str | None = None,
    ) -> str | None:
        """Emit a navigation intent for ``action`` in the current environment."""
        state = self.state
        context = IntentContext(
            stack_name=state.stack_name or "",
            environment_name=state.environment_name or "",
            deployment_id=deployment_id,
            resource_type=resource_type,
            resource_name=resource_name,
            target_environment=target_environment,
        )
        return self._intents.emit(action, context)

    # =========================================================================
    # View Data
    # =========================================================================

    def get_overview(self) -> Overview | None:
        return self.state.overview

    def get_cluster(self) -> ClusterInfo | None:
        return self.state.cluster

    def get_title(self) -> str:
        state = self.state
        return " / ".join(part for part in (state.stack_name, state.environment_name) if part)

    def get_state_descriptor(self) -> StateDescriptor:
        return classify_cluster_state(cluster_state_of(self.state.overview))

    def get_header_actions(self) -> tuple[HeaderAction, ...]:
        return header_actions(cluster_state_of(self.state.overview))

    def get_header_tags(self) -> list[str]:
        return header_tags(self.state.cluster)

    def get_banners(self) -> list[Banner]:
        return build_banners(self.state.overview)

    def get_status_cards(self) -> list[StatusCard]:
        state = self.state
        return build_status_cards(state.overview, state.resource_stats, state.variable_counts)

    def get_readiness(self) -> LegacyReadiness | BlueprintReadiness | None:
        """Readiness is only shown for environments that were never launched."""
        state = self.state
        if not is_never_launched(state.overview):
            return None
        return build_readiness(state.cluster, state.variable_counts, state.resource_stats)

    def get_infrastructure_rows(self) -> list[tuple[str, str]]:
        return infrastructure_rows(self.state.cluster)

    def get_governance_rows(self) -> list[tuple[str, str]]:
        return governance_rows(self.state.cluster)

    def get_downstream_environments(self) -> list[str]:
        overview = self.state.overview
        return list(overview.down_stream_cluster_names) if overview else []

    def get_release_breakdown(self) -> ReleaseBreakdown:
        overview = self.state.overview
        return release_breakdown(overview.deployments_stats if overview else None)

    def get_tab_payload(self, tab: TabId) -> TabPayload | None:
        return self.state.tab_cache.get(tab)

    def get_resource_groups(self) -> dict[str, int]:
        payload = self.state.tab_cache.get(TabId.RESOURCES)
        resources = getattr(payload, "resources", None)
        return group_resources_by_type(resources)

    def is_cost_enabled(self) -> bool:
        return self.state.cost_enabled
