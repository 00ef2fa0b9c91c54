"""Environment controller - staged loading of one environment overview.

A session moves through fixed phases:

- identity: resolve ``(stack, cluster)`` names to an id (skipped when known)
- critical: overview, resource stats and variable counts, concurrently
- secondary: the cost-explorer probe, after critical completes
- lazy: one fetch set per tab, at most once per tab per session

Every session carries a token. Results that arrive for an older token are
dropped so a superseded request can never overwrite newer state.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from contextlib import suppress

from envlens.constants.defaults import RELEASES_PAGE_SIZE_DEFAULT
from envlens.constants.enums import LAZY_TABS, LoadState, SessionEvent, TabId
from envlens.controllers.base import BaseController, WorkerResult
from envlens.controllers.environment.fetchers import (
    EnvironmentFetcher,
    PickerFetcher,
    TabFetcher,
)
from envlens.controllers.environment.gateway import DataSourceGateway
from envlens.controllers.environment.parsers import PayloadParser
from envlens.models.cache.tab_cache import (
    ReleasesTabData,
    ResourcesTabData,
    ScheduleTabData,
    TabPayload,
)
from envlens.models.environment.identity import EnvironmentIdentity
from envlens.models.environment.payloads import (
    EnvironmentSummary,
    Overview,
    ProjectSummary,
)
from envlens.models.state.session_state import SessionState
from envlens.utils.environment_state import has_kubernetes, is_polling_active

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEvent, TabId | None], None]


class IdentityResolutionError(Exception):
    """Raised when the environment cannot be resolved to a concrete id."""


class EnvironmentController(BaseController):
    """Staged loader for a single environment overview.

    The controller owns the current ``SessionState``. Listeners are told
    about every state change through ``SessionEvent`` notifications; they
    read the new values from ``state``.
    """

    IDENTITY_ERROR_MESSAGE = "Could not resolve cluster ID from name"
    NO_CONTEXT_MESSAGE = "No environment selected"

    def __init__(
        self,
        gateway: DataSourceGateway,
        *,
        page_size: int = RELEASES_PAGE_SIZE_DEFAULT,
        listener: SessionListener | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            gateway: Data source gateway used for every read
            page_size: Release history page size
            listener: Called with ``(event, tab)`` after every state change
        """
        self._gateway = gateway
        parser = PayloadParser()
        self._environment_fetcher = EnvironmentFetcher(gateway.fetch, parser)
        self._tab_fetcher = TabFetcher(gateway.fetch, parser, page_size=page_size)
        self._picker_fetcher = PickerFetcher(gateway.fetch, parser)
        self._listener = listener
        self._token = 0
        self._state = SessionState()

    # =========================================================================
    # Session bookkeeping
    # =========================================================================

    @property
    def state(self) -> SessionState:
        """The current session (replaced wholesale on every new session)."""
        return self._state

    def set_listener(self, listener: SessionListener | None) -> None:
        self._listener = listener

    def _notify(self, event: SessionEvent, tab: TabId | None = None) -> None:
        if self._listener is None:
            return
        with suppress(Exception):
            self._listener(event, tab)

    def _is_current(self, token: int) -> bool:
        return token == self._state.token

    def _begin_session(
        self, identity: EnvironmentIdentity, active_tab: TabId
    ) -> SessionState:
        """Swap in a fresh session, discarding everything cached before."""
        self._token += 1
        self._state.tab_cache.clear()
        self._state = SessionState(
            token=self._token,
            identity=identity,
            load_state=(
                LoadState.LOADING_CRITICAL if identity.has_id else LoadState.RESOLVING_IDENTITY
            ),
            active_tab=active_tab,
        )
        logger.debug("Session %d started for %s", self._token, identity)
        self._notify(SessionEvent.RESET)
        return self._state

    # =========================================================================
    # Phases
    # =========================================================================

    async def load(
        self, identity: EnvironmentIdentity, active_tab: TabId = TabId.OVERVIEW
    ) -> SessionState:
        """Run a complete session for ``identity``.

        Returns:
            The session that was started. It may already be superseded by the
            time this returns.
        """
        state = self._begin_session(identity, active_tab)
        token = state.token

        try:
            resolved = await self._resolve_identity(identity)
        except IdentityResolutionError as exc:
            if self._is_current(token):
                logger.warning("Session %d failed: %s", token, exc)
                state.load_state = LoadState.FAILED
                state.overview = None
                state.error = str(exc)
                self._notify(SessionEvent.FAILED)
            return state

        if not self._is_current(token):
            logger.debug("Discarding identity for superseded session %d", token)
            return state
        state.identity = resolved
        state.load_state = LoadState.LOADING_CRITICAL

        await self._load_critical(token)
        if not self._is_current(token) or not state.is_ready:
            return state

        follow_ups = [self._load_secondary(token)]
        if state.active_tab in LAZY_TABS:
            follow_ups.append(self._load_tab(state, state.active_tab))
        await asyncio.gather(*follow_ups)
        return state

    async def _resolve_identity(self, identity: EnvironmentIdentity) -> EnvironmentIdentity:
        """Return ``identity`` carrying a canonical id.

        Raises:
            IdentityResolutionError: If no id can be obtained.
        """
        if identity.has_id:
            return identity
        if not identity.has_names:
            raise IdentityResolutionError(self.NO_CONTEXT_MESSAGE)

        cluster_id = await self._environment_fetcher.resolve_cluster_id(
            identity.stack_name or "", identity.cluster_name or ""
        )
        if not cluster_id:
            raise IdentityResolutionError(self.IDENTITY_ERROR_MESSAGE)
        return identity.with_id(cluster_id)

    async def _load_critical(self, token: int) -> None:
        state = self._state
        cluster_id = state.cluster_id or ""
        logger.debug("Session %d: loading critical data for %s", token, cluster_id)

        overview, resource_stats, variable_counts = await asyncio.gather(
            self._environment_fetcher.fetch_overview(cluster_id),
            self._environment_fetcher.fetch_resource_stats(cluster_id),
            self._environment_fetcher.fetch_variable_counts(cluster_id),
        )
        if not self._is_current(token):
            logger.debug("Discarding critical data for superseded session %d", token)
            return

        # An absent overview degrades the dashboard sections, it does not fail.
        state.overview = overview or Overview()
        state.resource_stats = resource_stats
        state.variable_counts = variable_counts
        state.polling_active = is_polling_active(state.overview)
        state.load_state = LoadState.READY
        logger.debug(
            "Session %d ready (polling=%s)", token, state.polling_active
        )
        self._notify(SessionEvent.CRITICAL_READY)

    async def _load_secondary(self, token: int) -> None:
        cost_enabled = await self._environment_fetcher.fetch_cost_enabled()
        if not self._is_current(token):
            return
        self._state.cost_enabled = cost_enabled
        self._notify(SessionEvent.SECONDARY_READY)

    # =========================================================================
    # Lazy tabs
    # =========================================================================

    async def select_tab(self, tab: TabId) -> bool:
        """Make ``tab`` active and fetch its data if it was never fetched.

        Before the session is ready only the selection is recorded; the
        active tab is fetched once critical data arrives.

        Returns:
            True if this call fetched and stored the tab's data.
        """
        state = self._state
        state.active_tab = tab
        if tab not in LAZY_TABS or not state.is_ready:
            return False
        return await self._load_tab(state, tab)

    async def _load_tab(self, state: SessionState, tab: TabId) -> bool:
        token = state.token
        if not self._is_current(token):
            return False
        cache = state.tab_cache
        if not cache.claim(tab):
            return False

        payload: TabPayload | None = None
        try:
            payload = await self._fetch_tab_payload(state, tab)
        finally:
            if payload is None:
                cache.release(tab)

        if not self._is_current(token):
            cache.release(tab)
            logger.debug("Discarding %s data for superseded session %d", tab.value, token)
            return False
        cache.set(tab, payload)
        self._notify(SessionEvent.TAB_LOADED, tab)
        return True

    async def _fetch_tab_payload(self, state: SessionState, tab: TabId) -> TabPayload:
        cluster_id = state.cluster_id or ""

        if tab is TabId.RELEASES:
            return ReleasesTabData(await self._tab_fetcher.fetch_releases(cluster_id))

        if tab is TabId.RESOURCES:
            if has_kubernetes(state.cluster):
                resources, ingress_rules = await asyncio.gather(
                    self._tab_fetcher.fetch_resources(cluster_id),
                    self._tab_fetcher.fetch_ingress_rules(cluster_id),
                )
                return ResourcesTabData(resources, ingress_rules)
            resources = await self._tab_fetcher.fetch_resources(cluster_id)
            return ResourcesTabData(resources, None, ingress_skipped=True)

        if tab is TabId.SCHEDULE:
            schedules, maintenance_window = await asyncio.gather(
                self._tab_fetcher.fetch_schedules(cluster_id),
                self._tab_fetcher.fetch_maintenance_window(cluster_id),
            )
            return ScheduleTabData(schedules, maintenance_window)

        raise ValueError(f"Tab {tab.value!r} has no lazy data")

    # =========================================================================
    # Reload and refresh
    # =========================================================================

    async def hard_reload(self) -> SessionState:
        """Discard everything and reload the current environment.

        Only the active tab's lazy data is fetched again; other tabs stay cold
        until selected.
        """
        previous = self._state
        if previous.identity is None:
            return previous
        return await self.load(previous.identity, active_tab=previous.active_tab)

    async def pick(self, cluster_id: str) -> SessionState:
        """Replace the identity with a picked environment and load it."""
        return await self.load(EnvironmentIdentity(id=cluster_id))

    async def refresh_overview(self) -> bool:
        """Re-fetch only the overview and recompute the polling flag.

        Returns:
            Whether polling should continue.
        """
        state = self._state
        token = state.token
        if not state.is_ready or not state.cluster_id:
            return False

        fresh = await self._environment_fetcher.fetch_overview(state.cluster_id)
        if not self._is_current(token):
            logger.debug("Discarding refresh for superseded session %d", token)
            return self._state.polling_active

        if fresh is not None:
            if fresh.cluster is None and state.cluster is not None:
                fresh = fresh.model_copy(update={"cluster": state.cluster})
            state.overview = fresh
        state.polling_active = is_polling_active(state.overview)
        self._notify(SessionEvent.OVERVIEW_REFRESHED)
        return state.polling_active

    # =========================================================================
    # Picker
    # =========================================================================

    async def list_projects(self) -> list[ProjectSummary] | None:
        return await self._picker_fetcher.fetch_projects()

    async def list_environments(self, stack_name: str) -> list[EnvironmentSummary] | None:
        return await self._picker_fetcher.fetch_environments(stack_name)

    # =========================================================================
    # BaseController
    # =========================================================================

    async def check_connection(self) -> bool:
        """Check that the control plane answers the project list."""
        return await self._picker_fetcher.fetch_projects() is not None

    async def fetch_all(self) -> WorkerResult:
        """Hard-reload the current environment.

        Returns:
            WorkerResult carrying the new session as ``data``.
        """
        started_at = time.perf_counter()
        state = await self.hard_reload()
        return WorkerResult(
            success=not state.is_failed,
            data=state,
            error=state.error,
            duration_ms=(time.perf_counter() - started_at) * 1000,
        )
