"""
team_console.permissions.resolver

Stateless permission resolver over the live session.

Responsibilities:
- `can(capability)`: catalog lookup for the current role, `False` without a principal.
- `capability_set()`: the full set, or the all-false set when unauthenticated.
"""

from __future__ import annotations

from team_console.auth.errors import Forbidden, Unauthenticated
from team_console.auth.roles import (
    Capability,
    CapabilitySet,
    as_payload,
    capabilities_for,
    empty_capabilities,
)
from team_console.session.provider import SessionProvider


class PermissionResolver:
    def __init__(self, session: SessionProvider) -> None:
        self._session = session

    @property
    def authenticated(self) -> bool:
        return self._session.is_authenticated and self._session.current_principal() is not None

    def capability_set(self) -> CapabilitySet:
        # Re-derived on every call from the live principal; no caching across logins.
        principal = self._session.current_principal()
        if principal is None or not self._session.is_authenticated:
            return empty_capabilities()
        return capabilities_for(principal.role)

    def can(self, capability: Capability | str) -> bool:
        return self.capability_set()[Capability.parse(capability)]

    def require(self, capability: Capability | str) -> None:
        """
        Assert form of `can` for view code about to act (e.g. before a delete call).
        """

        capability = Capability.parse(capability)
        if not self.authenticated:
            raise Unauthenticated("no active session")
        if not self.capability_set()[capability]:
            raise Forbidden(capability.value)

    def as_payload(self) -> dict[str, bool]:
        return as_payload(self.capability_set())


# --- Module Notes -----------------------------------------------------------
# Advisory only: these answers decide what the console renders. The backend must
# reject the same calls on its own.
