"""
team_console.auth.roles

Role catalog: the closed set of roles, the closed set of capabilities, and the
static role -> capability table.

Responsibilities:
- Define `Role` and `Capability` as closed enums shared by every call site.
- Hold the explicit role x capability table (every pair spelled out).
- Fail at import time if the table is not total.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from types import MappingProxyType


class Role(enum.StrEnum):
    # Canonical values are what the console persists and sends in payloads.
    admin = "admin"
    team_leader = "team_leader"
    advisor = "advisor"
    finance_director = "finance_director"
    member = "member"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]

    @classmethod
    def parse(cls, value: str | None) -> Role:
        """
        Normalize a role coming from persistence, the legacy console or the backend.

        Unknown or missing values fall back to `member`, the least-privileged role.
        """

        if value is None:
            return cls.member
        raw = value.strip().casefold()
        try:
            return cls(raw)
        except ValueError:
            pass
        return _ROLE_ALIASES.get(raw, cls.member)


_ROLE_LABELS: dict[Role, str] = {
    Role.admin: "Administrator",
    Role.team_leader: "Team Leader",
    Role.advisor: "Faculty Advisor",
    Role.finance_director: "Finance Director",
    Role.member: "Member",
}

# Legacy console labels and backend access types (`tipoAcesso`).
# The backend only knows three access types; advisor/director never come from it.
_ROLE_ALIASES: dict[str, Role] = {
    "lider": Role.team_leader,
    "professor": Role.advisor,
    "diretor": Role.finance_director,
    "membro": Role.member,
    "administrador": Role.admin,
    "líder": Role.team_leader,
}


class Capability(enum.StrEnum):
    # Values keep the camelCase keys the UI layer already consumes.
    view_dashboard = "canViewDashboard"

    view_members = "canViewMembers"
    create_member = "canCreateMember"
    edit_member = "canEditMember"
    delete_member = "canDeleteMember"

    view_users = "canViewUsers"
    create_user = "canCreateUser"
    edit_user = "canEditUser"
    delete_user = "canDeleteUser"

    view_teams = "canViewTeams"
    create_team = "canCreateTeam"
    edit_team = "canEditTeam"
    delete_team = "canDeleteTeam"

    view_finance = "canViewFinance"
    create_finance = "canCreateFinance"
    edit_finance = "canEditFinance"
    delete_finance = "canDeleteFinance"

    view_inventory = "canViewInventory"
    create_inventory = "canCreateInventory"
    edit_inventory = "canEditInventory"
    delete_inventory = "canDeleteInventory"

    view_files = "canViewFiles"
    manage_files = "canManageFiles"

    view_calendar = "canViewCalendar"
    manage_calendar = "canManageCalendar"

    @classmethod
    def parse(cls, value: Capability | str) -> Capability:
        # Raises ValueError on a misspelled key instead of silently resolving to "denied".
        return value if isinstance(value, cls) else cls(value)


CapabilitySet = Mapping[Capability, bool]


class CatalogIncompleteError(Exception):
    pass


_T, _F = True, False

# Column order must match `_COLUMNS`.
_COLUMNS: tuple[Role, ...] = (
    Role.admin,
    Role.team_leader,
    Role.advisor,
    Role.finance_director,
    Role.member,
)

_TABLE: dict[Capability, tuple[bool, ...]] = {
    #                                  admin leader advisor director member
    Capability.view_dashboard:        (_T,   _T,    _T,     _T,      _T),
    Capability.view_members:          (_T,   _T,    _T,     _T,      _T),
    Capability.create_member:         (_T,   _T,    _F,     _F,      _F),
    Capability.edit_member:           (_T,   _T,    _T,     _F,      _F),
    Capability.delete_member:         (_T,   _T,    _F,     _F,      _F),
    Capability.view_users:            (_T,   _F,    _F,     _F,      _F),
    Capability.create_user:           (_T,   _F,    _F,     _F,      _F),
    Capability.edit_user:             (_T,   _F,    _F,     _F,      _F),
    Capability.delete_user:           (_T,   _F,    _F,     _F,      _F),
    Capability.view_teams:            (_T,   _T,    _T,     _T,      _T),
    Capability.create_team:           (_T,   _F,    _F,     _F,      _F),
    Capability.edit_team:             (_T,   _F,    _F,     _F,      _F),
    Capability.delete_team:           (_T,   _F,    _F,     _F,      _F),
    Capability.view_finance:          (_T,   _T,    _F,     _T,      _F),
    Capability.create_finance:        (_T,   _T,    _F,     _F,      _F),
    Capability.edit_finance:          (_T,   _T,    _F,     _F,      _F),
    Capability.delete_finance:        (_T,   _T,    _F,     _F,      _F),
    Capability.view_inventory:        (_T,   _T,    _F,     _F,      _T),
    Capability.create_inventory:      (_T,   _T,    _F,     _F,      _F),
    Capability.edit_inventory:        (_T,   _T,    _F,     _F,      _F),
    Capability.delete_inventory:      (_T,   _T,    _F,     _F,      _F),
    Capability.view_files:            (_T,   _T,    _T,     _T,      _T),
    Capability.manage_files:          (_T,   _T,    _F,     _F,      _F),
    Capability.view_calendar:         (_T,   _T,    _T,     _T,      _T),
    Capability.manage_calendar:       (_T,   _T,    _F,     _F,      _F),
}  # fmt: skip


def build_catalog(
    table: Mapping[Capability, tuple[bool, ...]],
    columns: tuple[Role, ...] = _COLUMNS,
) -> dict[Role, CapabilitySet]:
    """
    Pivot a capability-major table into one read-only CapabilitySet per role.

    Rows with the wrong arity or non-bool cells are rejected here; missing rows
    and missing roles are reported by `ensure_catalog_total`.
    """

    per_role: dict[Role, dict[Capability, bool]] = {role: {} for role in columns}
    for capability, row in table.items():
        if len(row) != len(columns):
            raise CatalogIncompleteError(
                f"{capability.value}: expected {len(columns)} role values, got {len(row)}"
            )
        for role, allowed in zip(columns, row):
            if not isinstance(allowed, bool):
                raise CatalogIncompleteError(
                    f"{capability.value}/{role.value}: value must be a bool, got {allowed!r}"
                )
            per_role[role][capability] = allowed

    catalog = {role: MappingProxyType(caps) for role, caps in per_role.items()}
    ensure_catalog_total(catalog)
    return catalog


def ensure_catalog_total(
    catalog: Mapping[Role, CapabilitySet],
    *,
    roles: Iterable[Role] = Role,
    capabilities: Iterable[Capability] = Capability,
) -> None:
    roles = list(roles)
    capabilities = list(capabilities)

    missing_roles = [role.value for role in roles if role not in catalog]
    if missing_roles:
        raise CatalogIncompleteError(f"roles without a capability set: {missing_roles}")

    gaps = [
        f"{role.value}.{capability.value}"
        for role in roles
        for capability in capabilities
        if capability not in catalog[role]
    ]
    if gaps:
        raise CatalogIncompleteError(f"undefined role/capability pairs: {gaps}")


_CATALOG: dict[Role, CapabilitySet] = build_catalog(_TABLE)

_EMPTY: CapabilitySet = MappingProxyType({capability: False for capability in Capability})


def capabilities_for(role: Role) -> CapabilitySet:
    return _CATALOG[role]


def empty_capabilities() -> CapabilitySet:
    return _EMPTY


def as_payload(capabilities: CapabilitySet) -> dict[str, bool]:
    return {capability.value: allowed for capability, allowed in capabilities.items()}


# --- Module Notes -----------------------------------------------------------
# This table only decides what the console shows and where it lets the operator
# navigate. The team backend must enforce the same role checks on every API call;
# hiding an action here is not the same as denying it.
