"""
team_console.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) owned by the session provider.
- Define the account record returned by credential verification (`AccountRecord`).
- Define the persisted, secret-free form of a principal (`PrincipalRecord`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from team_console.auth.roles import Role


@dataclass(frozen=True, slots=True)
class AccountRecord:
    # What the credential collaborator knows about an account; never carries the secret.
    id: str
    display_name: str
    email: str
    role: Role
    team_id: str | None
    active: bool
    token: str = field(default="", repr=False)


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated console operator.

    `team_id` is None for roles without a team (admin, advisor, finance director).
    """

    id: str
    display_name: str
    email: str
    role: Role
    team_id: str | None
    token: str = field(repr=False)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin

    @classmethod
    def from_account(cls, account: AccountRecord) -> Principal:
        return cls(
            id=account.id,
            display_name=account.display_name,
            email=account.email,
            role=account.role,
            team_id=account.team_id,
            token=account.token,
        )

    def summary(self) -> dict[str, str | None]:
        # Safe-to-render view of the principal; the token stays server-side.
        return {
            "id": self.id,
            "display_name": self.display_name,
            "email": self.email,
            "role": self.role.value,
            "role_label": self.role.label,
            "team_id": self.team_id,
        }


class PrincipalRecord(BaseModel):
    """
    Persisted session payload: identity, role, team and bearer token.

    `extra="forbid"` rejects payloads carrying unexpected fields (e.g. a password),
    which restore then treats as corrupt.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    display_name: str
    email: str
    role: Role
    team_id: str | None = None
    token: str = Field(min_length=1, repr=False)
    saved_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def from_principal(cls, principal: Principal) -> PrincipalRecord:
        return cls(
            id=principal.id,
            display_name=principal.display_name,
            email=principal.email,
            role=principal.role,
            team_id=principal.team_id,
            token=principal.token,
        )

    def to_principal(self) -> Principal:
        return Principal(
            id=self.id,
            display_name=self.display_name,
            email=self.email,
            role=self.role,
            team_id=self.team_id,
            token=self.token,
        )
