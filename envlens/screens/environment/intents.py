"""Intent emitter - turns UI action names into navigation requests.

The overview never navigates by itself. Each action name maps through a
static route table to a single ``NavigateRequested`` message that the
application handles. Unknown actions are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from textual.message import Message

logger = logging.getLogger(__name__)


class NavigateRequested(Message):
    """Request to navigate to ``route`` in the hosting console."""

    def __init__(self, route: str) -> None:
        super().__init__()
        self.route = route


@dataclass(frozen=True)
class IntentContext:
    """What an action refers to.

    ``deployment_id`` comes from the triggering banner or row; the resource
    and environment fields are only used by the ``view-*`` actions.
    """

    stack_name: str
    environment_name: str
    deployment_id: str | None = None
    resource_type: str | None = None
    resource_name: str | None = None
    target_environment: str | None = None


ENVIRONMENT_BASE = "/projects/{stack}/environments/{env}"

ROUTE_TEMPLATES: dict[str, str] = {
    "launch": ENVIRONMENT_BASE + "/launch",
    "plan": ENVIRONMENT_BASE + "/releases/plan",
    "run-plan": ENVIRONMENT_BASE + "/releases/plan",
    "trigger-release": ENVIRONMENT_BASE + "/releases/new",
    "trigger-hotfix": ENVIRONMENT_BASE + "/releases/hotfix",
    "scale-up": ENVIRONMENT_BASE + "/scale-up",
    "scale-down": ENVIRONMENT_BASE + "/scale-down",
    "resume-releases": ENVIRONMENT_BASE + "/settings?action=resume-releases",
    "add-variable": ENVIRONMENT_BASE + "/settings?tab=variables",
    "add-schedule": ENVIRONMENT_BASE + "/settings?tab=schedule",
    "toggle-maintenance": ENVIRONMENT_BASE + "/settings?tab=maintenance",
    "manage-resources": ENVIRONMENT_BASE + "/resources",
    "open-cost": "/projects/{stack}/cost",
    "destroy": ENVIRONMENT_BASE + "/destroy",
}

# Actions applied to one release; routed with the action as a query modifier.
DEPLOYMENT_ACTIONS: frozenset[str] = frozenset({"approve", "reject", "abort"})
DEPLOYMENT_ROUTE = ENVIRONMENT_BASE + "/releases/{deployment}?action={action}"

VIEW_RELEASE_ROUTE = ENVIRONMENT_BASE + "/releases/{deployment}"
VIEW_RESOURCE_ROUTE = ENVIRONMENT_BASE + "/resources/{resource_type}/{resource_name}"
VIEW_ENVIRONMENT_ROUTE = "/projects/{stack}/environments/{target}"


class IntentEmitter:
    """Maps action names to routes and posts them as messages."""

    def __init__(self, post: Callable[[Message], Any] | None = None) -> None:
        """Initialize the emitter.

        Args:
            post: Callable receiving the ``NavigateRequested`` message, usually
                a widget's ``post_message``. When omitted, routes are only
                returned.
        """
        self._post = post

    @staticmethod
    def route_for(action: str, context: IntentContext) -> str | None:
        """Build the route for ``action``, or None when it has no route."""
        names = {"stack": context.stack_name, "env": context.environment_name}

        if action in DEPLOYMENT_ACTIONS:
            if not context.deployment_id:
                return None
            return DEPLOYMENT_ROUTE.format(
                **names, deployment=context.deployment_id, action=action
            )
        if action == "view-release":
            if not context.deployment_id:
                return None
            return VIEW_RELEASE_ROUTE.format(**names, deployment=context.deployment_id)
        if action == "view-resource":
            if not (context.resource_type and context.resource_name):
                return None
            return VIEW_RESOURCE_ROUTE.format(
                **names,
                resource_type=context.resource_type,
                resource_name=context.resource_name,
            )
        if action == "view-environment":
            if not context.target_environment:
                return None
            return VIEW_ENVIRONMENT_ROUTE.format(**names, target=context.target_environment)

        template = ROUTE_TEMPLATES.get(action)
        if template is None:
            return None
        return template.format(**names)

    def emit(self, action: str, context: IntentContext) -> str | None:
        """Emit the navigation intent for ``action``.

        Returns:
            The route that was emitted, or None for an unknown action.
        """
        route = self.route_for(action, context)
        if route is None:
            logger.debug("Ignoring action %r without a route", action)
            return None
        if self._post is not None:
            self._post(NavigateRequested(route))
        return route


__all__ = [
    "DEPLOYMENT_ACTIONS",
    "ROUTE_TEMPLATES",
    "IntentContext",
    "IntentEmitter",
    "NavigateRequested",
]
