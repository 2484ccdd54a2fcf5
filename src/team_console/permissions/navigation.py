"""
team_console.permissions.navigation

Sidebar navigation items filtered by capability.
"""

from __future__ import annotations

from dataclasses import dataclass

from team_console.auth.roles import Capability
from team_console.permissions.resolver import PermissionResolver


@dataclass(frozen=True, slots=True)
class NavItem:
    name: str
    path: str
    capability: Capability | None = None

    def payload(self) -> dict[str, str]:
        return {"name": self.name, "path": self.path}


NAVIGATION: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/dashboard", Capability.view_dashboard),
    NavItem("Members", "/members", Capability.view_members),
    NavItem("Teams", "/admin/teams", Capability.view_teams),
    NavItem("Finance", "/finance", Capability.view_finance),
    NavItem("Inventory", "/inventory", Capability.view_inventory),
    NavItem("Files", "/files", Capability.view_files),
    NavItem("Calendar", "/calendar", Capability.view_calendar),
    NavItem("Settings", "/settings"),
)


def visible_navigation(
    resolver: PermissionResolver,
    items: tuple[NavItem, ...] = NAVIGATION,
) -> list[NavItem]:
    if not resolver.authenticated:
        # No menu at all, not even ungated items.
        return []
    capabilities = resolver.capability_set()
    return [item for item in items if item.capability is None or capabilities[item.capability]]
