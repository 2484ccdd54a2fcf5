"""
tests.conftest

Shared fixtures: an in-process credential verifier and per-role accounts.
"""

from __future__ import annotations

import pytest

from team_console.auth.models import AccountRecord
from team_console.auth.roles import Role
from team_console.session.provider import SessionProvider
from team_console.session.store import MemorySessionStore

PASSWORD = "correct horse battery staple"


class FakeVerifier:
    """
    Stand-in for the backend's /auth/login and /auth/me.

    Accounts are keyed by email; tokens are `token-<id>`.
    """

    def __init__(self, accounts: list[AccountRecord]) -> None:
        self.accounts = {a.email: a for a in accounts}
        self.by_token = {a.token: a for a in accounts}
        self.verify_calls: list[str] = []
        self.lookup_calls: list[str] = []

    async def verify(self, identifier: str, secret: str) -> AccountRecord | None:
        self.verify_calls.append(identifier)
        account = self.accounts.get(identifier)
        if account is None or secret != PASSWORD:
            return None
        return account

    async def lookup(self, token: str) -> AccountRecord | None:
        self.lookup_calls.append(token)
        return self.by_token.get(token)


def make_account(
    id: str,
    role: Role,
    *,
    team_id: str | None = None,
    active: bool = True,
) -> AccountRecord:
    return AccountRecord(
        id=id,
        display_name=f"{role.label} {id}",
        email=f"{role.value}{id}@example.com",
        role=role,
        team_id=team_id,
        active=active,
        token=f"token-{id}",
    )


@pytest.fixture
def accounts() -> dict[str, AccountRecord]:
    return {
        "admin": make_account("1", Role.admin),
        "team_leader": make_account("2", Role.team_leader, team_id="7"),
        "advisor": make_account("3", Role.advisor),
        "finance_director": make_account("4", Role.finance_director),
        "member": make_account("5", Role.member, team_id="7"),
        "inactive": make_account("6", Role.member, team_id="7", active=False),
    }


@pytest.fixture
def verifier(accounts: dict[str, AccountRecord]) -> FakeVerifier:
    return FakeVerifier(list(accounts.values()))


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def provider(store: MemorySessionStore, verifier: FakeVerifier) -> SessionProvider:
    return SessionProvider(store=store, verifier=verifier)
