"""Environment screen - dashboard overview of one provisioned environment."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.css.query import NoMatches, WrongType
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    OptionList,
    Static,
    TabbedContent,
    TabPane,
)
from textual.widgets.option_list import Option

from envlens.constants.enums import SessionEvent, TabId, TabState, Tone
from envlens.constants.timeouts import OVERVIEW_REFRESH_INTERVAL
from envlens.constants.values import APP_TITLE, FAILED_TO_LOAD, NO_DATA_YET, NO_VALUE
from envlens.controllers import DataSourceGateway, Location
from envlens.keyboard import ENVIRONMENT_SCREEN_BINDINGS
from envlens.models.cache.tab_cache import (
    ReleasesTabData,
    ResourcesTabData,
    ScheduleTabData,
)
from envlens.screens.environment.config import (
    BANNERS_ID,
    BOOT_ERROR_ID,
    CARDS_ID,
    HEADER_ACTIONS_ID,
    HEADER_ID,
    INGRESS_TABLE_COLUMNS,
    PANE_TO_TAB,
    PICKER_ENVIRONMENTS_ID,
    PICKER_ID,
    PICKER_PROJECTS_ID,
    RELEASES_TABLE_COLUMNS,
    RESOURCES_TABLE_COLUMNS,
    SCHEDULE_TABLE_COLUMNS,
    TAB_CONFIG,
    TAB_IDS,
    TAB_OVERVIEW,
    TAB_RELEASES,
    TAB_RESOURCES,
    TAB_SCHEDULE,
    TAB_TITLES,
    TAB_TO_PANE,
    TABBED_CONTENT_ID,
)
from envlens.screens.environment.presenter import (
    EnvironmentLoadFailed,
    EnvironmentPresenter,
    EnvironmentSessionUpdated,
    PickerEnvironmentsLoaded,
    PickerProjectsLoaded,
    PickerRequested,
)
from envlens.screens.mixins import LoadingOverlay, TabbedViewMixin, WorkerMixin
from envlens.utils.environment_state import (
    BlueprintReadiness,
    LegacyReadiness,
    classify_deployment_status,
)
from envlens.utils.time_format import format_duration, format_relative, humanize

logger = logging.getLogger(__name__)

_TONE_STYLES: dict[Tone, str] = {
    Tone.GOOD: "bold green",
    Tone.WARNING: "bold yellow",
    Tone.BAD: "bold red",
}


class IntentButton(Button):
    """Button that emits a navigation intent when pressed."""

    def __init__(
        self,
        label: str,
        action: str,
        *,
        deployment_id: str | None = None,
        target_environment: str | None = None,
        variant: str = "default",
    ) -> None:
        super().__init__(label, variant=variant, classes="intent-btn")  # type: ignore[arg-type]
        self.intent_action = action
        self.deployment_id = deployment_id
        self.target_environment = target_environment


class EnvironmentScreen(WorkerMixin, TabbedViewMixin, Screen[None]):
    """Environment overview: header, banners, status cards and lazy tabs."""

    BINDINGS = ENVIRONMENT_SCREEN_BINDINGS
    TAB_IDS = TAB_IDS

    DEFAULT_CSS = """
    EnvironmentScreen #env-body { height: 1fr; }
    EnvironmentScreen #env-header { padding: 0 1; text-style: bold; }
    EnvironmentScreen #env-header-actions { height: auto; padding: 0 1; }
    EnvironmentScreen #env-banners { height: auto; }
    EnvironmentScreen .banner { height: auto; padding: 0 1; background: $boost; }
    EnvironmentScreen .banner-text { width: 1fr; }
    EnvironmentScreen #env-cards { height: auto; }
    EnvironmentScreen .status-card { width: 1fr; border: round $primary; padding: 0 1; }
    EnvironmentScreen .intent-btn { margin: 0 1 0 0; min-width: 10; }
    EnvironmentScreen #env-boot-error { color: $error; padding: 1 2; text-style: bold; }
    EnvironmentScreen #env-picker { padding: 1 2; }
    EnvironmentScreen #loading-overlay { height: auto; padding: 0 1; }
    EnvironmentScreen .error-text { color: $error; }
    """

    def __init__(
        self,
        gateway: DataSourceGateway,
        *,
        attributes: Mapping[str, str | None] | None = None,
        location: Location | str | None = None,
        page_size: int | None = None,
        refresh_interval: float = OVERVIEW_REFRESH_INTERVAL,
    ) -> None:
        super().__init__()
        self._attributes = dict(attributes or {})
        self._location = location
        self._presenter = EnvironmentPresenter(
            self,
            gateway,
            page_size=page_size,
            refresh_interval=refresh_interval,
        )
        self._resource_rows: dict[str, tuple[str, str]] = {}

    @property
    def presenter(self) -> EnvironmentPresenter:
        return self._presenter

    # =========================================================================
    # Composition
    # =========================================================================

    def compose(self) -> ComposeResult:
        yield Header()
        yield LoadingOverlay("Loading environment...")
        yield Static("", id=BOOT_ERROR_ID, markup=False)
        with Vertical(id=PICKER_ID):
            yield Static("Select a project, then an environment", markup=False)
            yield OptionList(id=PICKER_PROJECTS_ID)
            yield OptionList(id=PICKER_ENVIRONMENTS_ID)
        with Vertical(id="env-body"):
            yield Static("", id=HEADER_ID, markup=False)
            yield Horizontal(id=HEADER_ACTIONS_ID)
            yield Vertical(id=BANNERS_ID)
            yield Horizontal(id=CARDS_ID)
            with TabbedContent(id=TABBED_CONTENT_ID, initial=TAB_OVERVIEW):
                with TabPane(TAB_TITLES[TAB_OVERVIEW], id=TAB_OVERVIEW):
                    with VerticalScroll():
                        yield Static("", id="overview-body", markup=False)
                        yield Horizontal(id="overview-links")
                with TabPane(TAB_TITLES[TAB_RELEASES], id=TAB_RELEASES):
                    yield Static("", id="releases-summary", markup=False)
                    yield DataTable(id="releases-table", cursor_type="row")
                with TabPane(TAB_TITLES[TAB_RESOURCES], id=TAB_RESOURCES):
                    yield Static("", id="resources-summary", markup=False)
                    yield DataTable(id="resources-table", cursor_type="row")
                    yield Static("", id="ingress-summary", markup=False)
                    yield DataTable(id="ingress-table", cursor_type="row")
                with TabPane(TAB_TITLES[TAB_CONFIG], id=TAB_CONFIG):
                    with VerticalScroll():
                        yield Static("", id="config-body", markup=False)
                        yield Horizontal(
                            IntentButton("Add Variable", "add-variable"),
                            id="config-actions",
                        )
                with TabPane(TAB_TITLES[TAB_SCHEDULE], id=TAB_SCHEDULE):
                    yield DataTable(id="schedule-table", cursor_type="row")
                    yield Static("", id="maintenance-body", markup=False)
                    yield Horizontal(
                        IntentButton("Add Schedule", "add-schedule"),
                        IntentButton("Maintenance", "toggle-maintenance"),
                        id="schedule-actions",
                    )
        yield Footer()

    def on_mount(self) -> None:
        self.app.title = f"{APP_TITLE} - Environment"
        self._add_columns("releases-table", RELEASES_TABLE_COLUMNS)
        self._add_columns("resources-table", RESOURCES_TABLE_COLUMNS)
        self._add_columns("ingress-table", INGRESS_TABLE_COLUMNS)
        self._add_columns("schedule-table", SCHEDULE_TABLE_COLUMNS)
        self._set_display(PICKER_ID, False)
        self._set_display(BOOT_ERROR_ID, False)
        self._presenter.start(self._attributes, self._location)

    async def on_unmount(self) -> None:
        """Stop polling and workers when the screen is removed."""
        await self._presenter.teardown()
        self.cancel_workers()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _add_columns(self, table_id: str, columns: list[tuple[str, int]]) -> None:
        with suppress(NoMatches, WrongType):
            table = self.query_one(f"#{table_id}", DataTable)
            for name, width in columns:
                table.add_column(name, width=width)

    def _set_display(self, widget_id: str, visible: bool) -> None:
        with suppress(NoMatches):
            self.query_one(f"#{widget_id}").display = visible

    def _update_static(self, widget_id: str, content: Any) -> None:
        with suppress(NoMatches, WrongType):
            self.query_one(f"#{widget_id}", Static).update(content)

    def _replace_children(self, container_id: str, *widgets: Any) -> None:
        with suppress(NoMatches):
            container = self.query_one(f"#{container_id}")
            container.remove_children()
            if widgets:
                container.mount(*widgets)

    def _tab_placeholder(self, tab: TabId) -> str:
        state = self._presenter.state.tab_cache.state_for(tab)
        return "Loading..." if state is TabState.LOADING else NO_DATA_YET

    # =========================================================================
    # Message Handlers
    # =========================================================================

    def on_environment_session_updated(self, event: EnvironmentSessionUpdated) -> None:
        if event.event is SessionEvent.RESET:
            self.error = None
            self.is_loading = True
            self._set_display(BOOT_ERROR_ID, False)
            self._set_display(PICKER_ID, False)
            self._set_display("env-body", True)
            self._resource_rows.clear()
            self.show_tab(self._presenter.state.active_tab)
            self._render_all()
        elif event.event is SessionEvent.CRITICAL_READY:
            self.is_loading = False
            self._render_all()
        elif event.event is SessionEvent.SECONDARY_READY:
            self._render_overview_tab()
        elif event.event is SessionEvent.TAB_LOADED and event.tab is not None:
            self._render_tab(event.tab)
        elif event.event is SessionEvent.OVERVIEW_REFRESHED:
            self._render_summary()
            self._render_overview_tab()

    def on_environment_load_failed(self, event: EnvironmentLoadFailed) -> None:
        self.is_loading = False
        self._set_display("env-body", False)
        self._set_display(BOOT_ERROR_ID, True)
        self._update_static(BOOT_ERROR_ID, event.error)

    def on_picker_requested(self, _: PickerRequested) -> None:
        self.is_loading = False
        self._set_display("env-body", False)
        self._set_display(BOOT_ERROR_ID, False)
        self._set_display(PICKER_ID, True)

    def on_picker_projects_loaded(self, event: PickerProjectsLoaded) -> None:
        with suppress(NoMatches, WrongType):
            projects = self.query_one(f"#{PICKER_PROJECTS_ID}", OptionList)
            projects.clear_options()
            if not event.projects:
                projects.add_option(Option(FAILED_TO_LOAD if event.projects is None else "No projects", disabled=True))
                return
            projects.add_options(Option(p.name, id=p.name) for p in event.projects)
            projects.focus()

    def on_picker_environments_loaded(self, event: PickerEnvironmentsLoaded) -> None:
        with suppress(NoMatches, WrongType):
            environments = self.query_one(f"#{PICKER_ENVIRONMENTS_ID}", OptionList)
            environments.clear_options()
            if not event.environments:
                environments.add_option(Option("No environments", disabled=True))
                return
            environments.add_options(Option(e.label, id=e.id) for e in event.environments)
            environments.focus()

    @on(OptionList.OptionSelected, f"#{PICKER_PROJECTS_ID}")
    def _on_project_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self._presenter.load_environments(event.option.id)

    @on(OptionList.OptionSelected, f"#{PICKER_ENVIRONMENTS_ID}")
    def _on_environment_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self._set_display(PICKER_ID, False)
            self._presenter.pick(event.option.id)

    @on(TabbedContent.TabActivated, f"#{TABBED_CONTENT_ID}")
    def _on_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        pane_id = event.pane.id or ""
        tab = PANE_TO_TAB.get(pane_id)
        if tab is None:
            return
        self._current_tab = pane_id
        self._presenter.select_tab(tab)
        self._render_tab(tab)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button = event.button
        if isinstance(button, IntentButton):
            self._presenter.emit(
                button.intent_action,
                deployment_id=button.deployment_id,
                target_environment=button.target_environment,
            )

    @on(DataTable.RowSelected, "#releases-table")
    def _on_release_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value:
            self._presenter.emit("view-release", deployment_id=event.row_key.value)

    @on(DataTable.RowSelected, "#resources-table")
    def _on_resource_selected(self, event: DataTable.RowSelected) -> None:
        resource = self._resource_rows.get(event.row_key.value or "")
        if resource is not None:
            self._presenter.emit(
                "view-resource", resource_type=resource[0], resource_name=resource[1]
            )

    # =========================================================================
    # Rendering
    # =========================================================================

    def _render_all(self) -> None:
        self._render_summary()
        for tab in TabId:
            self._render_tab(tab)

    def _render_summary(self) -> None:
        self._render_header()
        self._render_banners()
        self._render_cards()

    def _render_header(self) -> None:
        presenter = self._presenter
        descriptor = presenter.get_state_descriptor()
        header = Text(presenter.get_title() or APP_TITLE, style="bold")
        header.append("  ")
        header.append("●", style=f"{descriptor.dot} blink" if descriptor.pulse else descriptor.dot)
        header.append(f" {descriptor.label}", style=descriptor.color)
        for tag in presenter.get_header_tags():
            header.append(f"  [{tag}]", style="dim")
        self._update_static(HEADER_ID, header)

        buttons = [
            IntentButton(
                action.label,
                action.action,
                variant="error" if action.danger else "primary" if action.primary else "default",
            )
            for action in presenter.get_header_actions()
        ]
        if presenter.state.is_ready:
            self._replace_children(HEADER_ACTIONS_ID, *buttons)
        else:
            self._replace_children(HEADER_ACTIONS_ID)

    def _render_banners(self) -> None:
        widgets = []
        for banner in self._presenter.get_banners():
            widgets.append(
                Horizontal(
                    Static(banner.message, classes="banner-text", markup=False),
                    *(
                        IntentButton(
                            action.label,
                            action.action,
                            deployment_id=action.deployment_id,
                            variant="error" if action.danger else "default",
                        )
                        for action in banner.actions
                    ),
                    classes=f"banner banner-{banner.kind.value}",
                )
            )
        self._replace_children(BANNERS_ID, *widgets)

    def _render_cards(self) -> None:
        if not self._presenter.state.is_ready:
            self._replace_children(CARDS_ID)
            return
        widgets = []
        for card in self._presenter.get_status_cards():
            content = Text(f"{card.title}\n", style="dim")
            content.append(card.value, style=_TONE_STYLES.get(card.tone, "bold"))
            if card.detail:
                content.append(f"\n{card.detail}", style="dim")
            widgets.append(Static(content, classes="status-card"))
        self._replace_children(CARDS_ID, *widgets)

    def _render_tab(self, tab: TabId) -> None:
        if tab is TabId.OVERVIEW:
            self._render_overview_tab()
        elif tab is TabId.RELEASES:
            self._render_releases_tab()
        elif tab is TabId.RESOURCES:
            self._render_resources_tab()
        elif tab is TabId.CONFIG:
            self._render_config_tab()
        elif tab is TabId.SCHEDULE:
            self._render_schedule_tab()

    def _render_overview_tab(self) -> None:
        presenter = self._presenter
        if not presenter.state.is_ready:
            self._update_static("overview-body", NO_DATA_YET)
            self._replace_children("overview-links")
            return

        body = Text()
        readiness = presenter.get_readiness()
        if isinstance(readiness, LegacyReadiness):
            body.append("Launch Readiness\n", style="bold")
            for check in readiness.checks:
                body.append("✓ " if check.ok else "✗ ", style="green" if check.ok else "red")
                body.append(check.label)
                if check.visible_hint:
                    body.append(f"  {check.visible_hint}", style="dim")
                body.append("\n")
            body.append(
                "Ready to launch\n\n" if readiness.ready else "Not ready to launch\n\n",
                style="bold green" if readiness.ready else "bold yellow",
            )
        elif isinstance(readiness, BlueprintReadiness):
            body.append("Blueprint\n", style="bold")
            body.append(f"Blueprint: {readiness.blueprint}\n")
            body.append(f"Branch: {readiness.branch}\n")
            body.append(f"Project Type: {readiness.project_type}\n")
            body.append(f"Resources Defined: {readiness.resources_defined}\n")
            body.append(f"Variables Set: {readiness.variables_set}\n\n")

        rows = presenter.get_infrastructure_rows()
        body.append("Infrastructure\n", style="bold")
        if not rows:
            body.append(f"{NO_DATA_YET}\n")
        for label, value in rows:
            body.append(f"{label}: ", style="dim")
            body.append(f"{value}\n")

        downstream = presenter.get_downstream_environments()
        if downstream:
            body.append("\nDownstream Environments\n", style="bold")
            body.append(", ".join(downstream))
        self._update_static("overview-body", body)

        links = [
            IntentButton(f"View {name}", "view-environment", target_environment=name)
            for name in downstream
        ]
        links.append(IntentButton("Manage Resources", "manage-resources"))
        if presenter.is_cost_enabled():
            links.append(IntentButton("Cost Explorer", "open-cost"))
        self._replace_children("overview-links", *links)

    def _render_releases_tab(self) -> None:
        presenter = self._presenter
        breakdown = presenter.get_release_breakdown()
        summary = Text(
            f"Succeeded {breakdown.success} ({breakdown.success_pct}%)  "
            f"Failed {breakdown.failed} ({breakdown.failed_pct}%)  "
            f"No change {breakdown.no_change} ({breakdown.no_change_pct}%)"
        )
        payload = presenter.get_tab_payload(TabId.RELEASES)
        with suppress(NoMatches, WrongType):
            table = self.query_one("#releases-table", DataTable)
            table.clear()
            if not isinstance(payload, ReleasesTabData):
                summary.append(f"\n{self._tab_placeholder(TabId.RELEASES)}", style="dim")
            elif payload.deployments is None:
                summary.append(f"\n{FAILED_TO_LOAD}", style="red")
            elif not payload.deployments:
                summary.append("\nNo releases yet", style="dim")
            else:
                for index, deployment in enumerate(payload.deployments):
                    descriptor = classify_deployment_status(deployment.status)
                    table.add_row(
                        Text(f"{descriptor.icon} {deployment.status or NO_VALUE}", style=descriptor.color),
                        deployment.release_type or NO_VALUE,
                        deployment.triggered_by or NO_VALUE,
                        format_relative(deployment.created_on),
                        format_duration(deployment.time_taken_in_seconds),
                        deployment.release_trace_id or NO_VALUE,
                        key=deployment.id or f"row-{index}",
                    )
        self._update_static("releases-summary", summary)

    def _render_resources_tab(self) -> None:
        presenter = self._presenter
        payload = presenter.get_tab_payload(TabId.RESOURCES)
        summary = Text()
        ingress = Text()
        self._resource_rows.clear()
        with suppress(NoMatches, WrongType):
            table = self.query_one("#resources-table", DataTable)
            ingress_table = self.query_one("#ingress-table", DataTable)
            table.clear()
            ingress_table.clear()
            if not isinstance(payload, ResourcesTabData):
                summary.append(self._tab_placeholder(TabId.RESOURCES), style="dim")
                ingress_table.display = False
            else:
                if payload.resources is None:
                    summary.append(FAILED_TO_LOAD, style="red")
                else:
                    groups = presenter.get_resource_groups()
                    summary.append(
                        "  ".join(f"{humanize(kind)}: {count}" for kind, count in groups.items())
                        or "No resources"
                    )
                    for index, item in enumerate(payload.resources):
                        key = f"resource-{index}"
                        self._resource_rows[key] = (item.resource_type, item.name)
                        table.add_row(
                            item.resource_type,
                            item.name,
                            "✓" if item.enabled else "✗",
                            "✓" if item.has_override else "",
                            key=key,
                        )

                # Skipped ingress (not Kubernetes) shows nothing at all.
                ingress_table.display = not payload.ingress_skipped
                if payload.ingress_rules is None and not payload.ingress_skipped:
                    ingress.append(f"Ingress: {FAILED_TO_LOAD}", style="red")
                elif payload.ingress_rules is not None:
                    ingress.append(f"Ingress Rules ({len(payload.ingress_rules)})", style="bold")
                    for rule in payload.ingress_rules:
                        ingress_table.add_row(
                            rule.url or NO_VALUE, rule.service_name or NO_VALUE, rule.port or NO_VALUE
                        )
        self._update_static("resources-summary", summary)
        self._update_static("ingress-summary", ingress)

    def _render_config_tab(self) -> None:
        presenter = self._presenter
        cluster = presenter.get_cluster()
        body = Text("Governance\n", style="bold")
        for label, value in presenter.get_governance_rows():
            body.append(f"{label}: ", style="dim")
            body.append(f"{value}\n")

        body.append("\nVariables\n", style="bold")
        variables = cluster.variables if cluster else {}
        if not variables:
            body.append(f"{NO_DATA_YET}\n", style="dim")
        for name, meta in sorted(variables.items()):
            body.append(name)
            if meta.secret:
                body.append("  secret", style="yellow")
            if meta.description:
                body.append(f"  {meta.description}", style="dim")
            body.append("\n")
        self._update_static("config-body", body)

    def _render_schedule_tab(self) -> None:
        payload = self._presenter.get_tab_payload(TabId.SCHEDULE)
        maintenance = Text()
        with suppress(NoMatches, WrongType):
            table = self.query_one("#schedule-table", DataTable)
            table.clear()
            if isinstance(payload, ScheduleTabData):
                for schedule in payload.schedules or []:
                    table.add_row(
                        schedule.name or NO_VALUE,
                        schedule.start_cron or NO_VALUE,
                        schedule.stop_cron or NO_VALUE,
                        schedule.timezone or NO_VALUE,
                        "✓" if schedule.enabled else "✗",
                    )

        if not isinstance(payload, ScheduleTabData):
            maintenance.append(self._tab_placeholder(TabId.SCHEDULE), style="dim")
            self._update_static("maintenance-body", maintenance)
            return
        if payload.schedules is None:
            maintenance.append(f"Schedules: {FAILED_TO_LOAD}\n\n", style="red")
        maintenance.append("Maintenance Window\n", style="bold")

        window = payload.maintenance_window
        if window is None:
            maintenance.append(NO_DATA_YET, style="dim")
        else:
            maintenance.append("Enabled" if window.enabled else "Disabled")
            if window.start or window.end:
                maintenance.append(f"  {window.start or NO_VALUE} → {window.end or NO_VALUE}", style="dim")
        self._update_static("maintenance-body", maintenance)

    # =========================================================================
    # Actions
    # =========================================================================

    def action_refresh(self) -> None:
        """Hard reload the environment."""
        self._presenter.reload()

    def action_open_picker(self) -> None:
        self._set_display("env-body", False)
        self._set_display(PICKER_ID, True)
        self._presenter.load_projects()

    def show_tab(self, tab: TabId) -> None:
        """Activate the pane for ``tab`` unless it is already active."""
        pane_id = TAB_TO_PANE[tab]
        if self._current_tab != pane_id:
            self.switch_tab(pane_id)


__all__ = ["EnvironmentScreen", "IntentButton"]
