"""
team_console.routing.destinations

Console destinations and the capability each one requires.

Responsibilities:
- Declare every console destination with its optional required capability.
- Resolve a concrete path (e.g. `/members/42/edit`) to a destination + params.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from starlette.convertors import Convertor
from starlette.routing import compile_path

from team_console.auth.roles import Capability


@dataclass(frozen=True, slots=True)
class Destination:
    name: str
    pattern: str
    required_capability: Capability | None = None
    public: bool = False

    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _convertors: dict[str, Convertor[Any]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        regex, _, convertors = compile_path(self.pattern)
        object.__setattr__(self, "_regex", regex)
        object.__setattr__(self, "_convertors", convertors)

    def match(self, path: str) -> dict[str, Any] | None:
        m = self._regex.match(path)
        if m is None:
            return None
        return {key: self._convertors[key].convert(value) for key, value in m.groupdict().items()}


# Static segments (`/new`, `/summary`) come before `{id}` patterns that would swallow them.
ROUTES: tuple[Destination, ...] = (
    Destination("login", "/login", public=True),
    Destination("dashboard", "/dashboard"),
    Destination("settings", "/settings"),
    # Members
    Destination("members.list", "/members", Capability.view_members),
    Destination("members.new", "/members/new", Capability.create_member),
    Destination("members.detail", "/members/{member_id}", Capability.view_members),
    Destination("members.edit", "/members/{member_id}/edit", Capability.edit_member),
    # Users (admin)
    Destination("users.list", "/admin/users", Capability.view_users),
    Destination("users.new", "/admin/users/new", Capability.create_user),
    Destination("users.detail", "/admin/users/{user_id}", Capability.view_users),
    Destination("users.edit", "/admin/users/{user_id}/edit", Capability.edit_user),
    # Teams
    Destination("teams.list", "/admin/teams", Capability.view_teams),
    Destination("teams.new", "/admin/teams/new", Capability.create_team),
    Destination("teams.detail", "/admin/teams/{team_id}", Capability.view_teams),
    Destination("teams.edit", "/admin/teams/{team_id}/edit", Capability.edit_team),
    # Finance
    Destination("finance.list", "/finance", Capability.view_finance),
    Destination("finance.new", "/finance/new", Capability.create_finance),
    Destination("finance.summary", "/finance/summary", Capability.view_finance),
    Destination("finance.detail", "/finance/{transaction_id}", Capability.view_finance),
    Destination("finance.edit", "/finance/{transaction_id}/edit", Capability.edit_finance),
    # Inventory
    Destination("inventory.list", "/inventory", Capability.view_inventory),
    Destination("inventory.new", "/inventory/new", Capability.create_inventory),
    Destination("inventory.detail", "/inventory/{item_id}", Capability.view_inventory),
    Destination("inventory.edit", "/inventory/{item_id}/edit", Capability.edit_inventory),
    # Files and calendar
    Destination("files.list", "/files", Capability.view_files),
    Destination("calendar.list", "/calendar", Capability.view_calendar),
    Destination("calendar.detail", "/calendar/{event_id}", Capability.view_calendar),
    Destination("calendar.edit", "/calendar/{event_id}/edit", Capability.manage_calendar),
)


def normalize_path(path: str) -> str:
    return "/" + path.strip("/")


def resolve(
    path: str,
    routes: tuple[Destination, ...] = ROUTES,
) -> tuple[Destination, dict[str, Any]] | None:
    target = normalize_path(path)
    for destination in routes:
        params = destination.match(target)
        if params is not None:
            return destination, params
    return None
