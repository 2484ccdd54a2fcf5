"""
team_console.routing.guard

Route guard: decides, per navigation attempt, whether a destination may render.

Responsibilities:
- Hold navigation while the session is still loading (no redirect yet).
- Send unauthenticated operators to login and under-privileged ones to the dashboard.
- Re-evaluate on every call; decisions are never cached.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from team_console.observability.logging import get_logger
from team_console.permissions.resolver import PermissionResolver
from team_console.routing.destinations import ROUTES, Destination, resolve
from team_console.session.provider import SessionProvider, SessionState

log = get_logger(__name__)


class GuardOutcome(enum.StrEnum):
    evaluating = "evaluating"
    denied_unauthenticated = "denied_unauthenticated"
    denied_forbidden = "denied_forbidden"
    permitted = "permitted"
    not_found = "not_found"


@dataclass(frozen=True, slots=True)
class GuardDecision:
    outcome: GuardOutcome
    destination: Destination | None = None
    redirect_to: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not GuardOutcome.evaluating


class RouteGuard:
    def __init__(
        self,
        *,
        session: SessionProvider,
        resolver: PermissionResolver,
        login_path: str = "/login",
        dashboard_path: str = "/dashboard",
        routes: tuple[Destination, ...] = ROUTES,
    ) -> None:
        self._session = session
        self._resolver = resolver
        self._login_path = login_path
        self._dashboard_path = dashboard_path
        self._routes = routes

    def evaluate(self, target: str | Destination, params: dict[str, Any] | None = None) -> GuardDecision:
        if isinstance(target, Destination):
            destination, params = target, params or {}
        else:
            resolved = resolve(target, self._routes)
            if resolved is None:
                return GuardDecision(GuardOutcome.not_found)
            destination, params = resolved

        if destination.public:
            return GuardDecision(GuardOutcome.permitted, destination, params=params)

        state = self._session.state
        if state is SessionState.loading:
            return GuardDecision(GuardOutcome.evaluating, destination, params=params)

        if state is SessionState.unauthenticated:
            # The requested destination is dropped; login always lands on the dashboard.
            log.info("navigation_denied", destination=destination.name, reason="unauthenticated")
            return GuardDecision(
                GuardOutcome.denied_unauthenticated, destination, redirect_to=self._login_path
            )

        required = destination.required_capability
        if required is not None and not self._resolver.can(required):
            log.info(
                "navigation_denied",
                destination=destination.name,
                reason="forbidden",
                capability=required.value,
            )
            return GuardDecision(
                GuardOutcome.denied_forbidden, destination, redirect_to=self._dashboard_path
            )

        return GuardDecision(GuardOutcome.permitted, destination, params=params)


# --- Module Notes -----------------------------------------------------------
# There is no "return to the originally requested page" after login; a denied
# operator always lands on a fixed destination (login or dashboard).
