"""
tests.test_session_provider

Session lifecycle: restore, login, logout.
"""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from team_console.auth.errors import AccountInactive, InvalidCredentials
from team_console.auth.models import AccountRecord, PrincipalRecord
from team_console.auth.roles import Role
from team_console.session.provider import SessionProvider, SessionState
from team_console.session.store import MemorySessionStore
from tests.conftest import PASSWORD, FakeVerifier, make_account

_KEY = "k" * 32


def _record_for(account: AccountRecord, **overrides) -> str:
    record = PrincipalRecord(
        id=account.id,
        display_name=account.display_name,
        email=account.email,
        role=account.role,
        team_id=account.team_id,
        token=account.token,
    )
    return record.model_copy(update=overrides).model_dump_json()


@pytest.mark.asyncio
async def test_restore_without_persisted_session(provider: SessionProvider) -> None:
    assert await provider.restore_session() is None
    assert provider.state is SessionState.unauthenticated
    assert provider.current_principal() is None


@pytest.mark.asyncio
async def test_login_with_wrong_secret_fails(provider: SessionProvider, store) -> None:
    with pytest.raises(InvalidCredentials):
        await provider.login("admin@example.com", "wrong")

    assert provider.state is SessionState.unauthenticated
    assert provider.current_principal() is None
    assert store.raw is None


@pytest.mark.asyncio
async def test_login_success_persists_record_without_secret(
    provider: SessionProvider, store, accounts
) -> None:
    leader = accounts["team_leader"]

    principal = await provider.login(leader.email, PASSWORD)

    assert provider.state is SessionState.authenticated
    assert provider.current_principal() == principal
    assert principal.id == leader.id
    assert principal.role is Role.team_leader
    assert principal.team_id == "7"

    persisted = json.loads(store.raw)
    assert persisted["id"] == leader.id
    assert persisted["role"] == "team_leader"
    assert persisted["team_id"] == "7"
    assert PASSWORD not in store.raw
    assert "password" not in persisted and "secret" not in persisted


@pytest.mark.asyncio
async def test_login_inactive_account_does_not_mutate_state(
    provider: SessionProvider, store, accounts
) -> None:
    inactive = accounts["inactive"]

    with pytest.raises(AccountInactive) as exc:
        await provider.login(inactive.email, PASSWORD)

    assert exc.value.account_id == inactive.id
    # Same user-facing message as InvalidCredentials.
    assert str(exc.value) == str(InvalidCredentials())
    assert provider.state is SessionState.unauthenticated
    assert store.raw is None


@pytest.mark.asyncio
async def test_failed_login_keeps_existing_session(provider: SessionProvider, accounts) -> None:
    admin = await provider.login(accounts["admin"].email, PASSWORD)

    with pytest.raises(InvalidCredentials):
        await provider.login(accounts["member"].email, "nope")

    assert provider.current_principal() == admin
    assert provider.state is SessionState.authenticated


@pytest.mark.asyncio
async def test_logout_then_reload_yields_nothing(provider: SessionProvider, store, verifier, accounts) -> None:
    await provider.login(accounts["member"].email, PASSWORD)

    await provider.logout()

    assert provider.current_principal() is None
    assert provider.state is SessionState.unauthenticated
    assert store.raw is None

    reloaded = SessionProvider(store=store, verifier=verifier)
    assert await reloaded.restore_session() is None
    assert reloaded.state is SessionState.unauthenticated


@pytest.mark.asyncio
async def test_logout_is_idempotent(provider: SessionProvider, store, accounts) -> None:
    await provider.login(accounts["admin"].email, PASSWORD)

    await provider.logout()
    first = (provider.state, provider.current_principal(), store.raw)
    await provider.logout()

    assert (provider.state, provider.current_principal(), store.raw) == first


@pytest.mark.asyncio
async def test_logout_when_never_logged_in(provider: SessionProvider) -> None:
    await provider.logout()
    assert provider.state is SessionState.unauthenticated


@pytest.mark.asyncio
async def test_restore_revalidates_and_refreshes(verifier: FakeVerifier, accounts) -> None:
    member = accounts["member"]
    # Persisted copy is stale: the backend now reports a different team.
    store = MemorySessionStore(_record_for(member, team_id="99"))
    provider = SessionProvider(store=store, verifier=verifier)

    principal = await provider.restore_session()

    assert principal is not None
    assert principal.team_id == "7"
    assert provider.state is SessionState.authenticated
    assert verifier.lookup_calls == [member.token]
    assert json.loads(store.raw)["team_id"] == "7"


@pytest.mark.asyncio
async def test_restore_without_revalidation_uses_persisted_record(verifier: FakeVerifier, accounts) -> None:
    store = MemorySessionStore(_record_for(accounts["advisor"]))
    provider = SessionProvider(store=store, verifier=verifier, revalidate_on_restore=False)

    principal = await provider.restore_session()

    assert principal is not None
    assert principal.role is Role.advisor
    assert verifier.lookup_calls == []


@pytest.mark.asyncio
async def test_restore_with_revoked_token_clears_store(verifier: FakeVerifier) -> None:
    ghost = make_account("42", Role.admin)
    store = MemorySessionStore(_record_for(ghost))
    provider = SessionProvider(store=store, verifier=verifier)

    assert await provider.restore_session() is None
    assert provider.state is SessionState.unauthenticated
    assert store.raw is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"id": "1"}),
        json.dumps({"id": "1", "display_name": "x", "email": "x", "role": "overlord", "token": "t"}),
        json.dumps(
            {
                "id": "1",
                "display_name": "x",
                "email": "x",
                "role": "admin",
                "token": "t",
                "password": "leaked",
            }
        ),
    ],
)
async def test_corrupt_record_is_treated_as_absent(raw: str, verifier: FakeVerifier) -> None:
    store = MemorySessionStore(raw)
    provider = SessionProvider(store=store, verifier=verifier)

    assert await provider.restore_session() is None
    assert provider.state is SessionState.unauthenticated
    assert store.raw is None
    assert verifier.lookup_calls == []


@pytest.mark.asyncio
async def test_expired_token_is_not_restored(verifier: FakeVerifier, accounts) -> None:
    past = datetime.now(tz=UTC) - timedelta(hours=1)
    token = jwt.encode({"sub": "5", "exp": int(past.timestamp())}, _KEY, algorithm="HS256")
    store = MemorySessionStore(_record_for(accounts["member"], token=token))
    provider = SessionProvider(store=store, verifier=verifier)

    assert await provider.restore_session() is None
    assert verifier.lookup_calls == []
    assert store.raw is None


@pytest.mark.asyncio
async def test_start_restore_enters_loading_immediately(provider: SessionProvider) -> None:
    task = provider.start_restore()
    assert provider.state is SessionState.loading
    assert provider.is_loading

    await task
    assert provider.state is SessionState.unauthenticated


class _FailingSaveStore(MemorySessionStore):
    async def save(self, record: PrincipalRecord) -> None:
        raise OSError("disk full")


@pytest.mark.asyncio
async def test_login_is_atomic_when_persistence_fails(verifier: FakeVerifier, accounts) -> None:
    provider = SessionProvider(store=_FailingSaveStore(), verifier=verifier)

    with pytest.raises(OSError):
        await provider.login(accounts["admin"].email, PASSWORD)

    assert provider.state is SessionState.unauthenticated
    assert provider.current_principal() is None


class _ExplodingStore(MemorySessionStore):
    async def load(self) -> PrincipalRecord | None:
        raise RuntimeError("store offline")


@pytest.mark.asyncio
async def test_restore_never_raises(verifier: FakeVerifier) -> None:
    provider = SessionProvider(store=_ExplodingStore(), verifier=verifier)

    assert await provider.restore_session() is None
    assert provider.state is SessionState.unauthenticated


@pytest.mark.asyncio
async def test_concurrent_logins_resolve_last_write_wins(provider: SessionProvider, accounts) -> None:
    await asyncio.gather(
        provider.login(accounts["admin"].email, PASSWORD),
        provider.login(accounts["member"].email, PASSWORD),
    )

    principal = provider.current_principal()
    assert principal is not None
    assert principal.id == accounts["member"].id


class _UnreadableStore(MemorySessionStore):
    async def load(self) -> PrincipalRecord | None:
        raise RuntimeError("driver exploded")


@pytest.mark.asyncio
async def test_failed_restore_discards_persisted_record(verifier: FakeVerifier, accounts) -> None:
    store = _UnreadableStore(_record_for(accounts["admin"]))
    provider = SessionProvider(store=store, verifier=verifier)

    assert await provider.restore_session() is None
    assert provider.state is SessionState.unauthenticated
    assert store.raw is None


@pytest.mark.asyncio
async def test_out_of_range_token_expiry_still_revalidates(verifier: FakeVerifier, accounts) -> None:
    token = jwt.encode({"sub": "1", "exp": 10**20}, _KEY, algorithm="HS256")
    store = MemorySessionStore(_record_for(accounts["admin"], token=token))
    provider = SessionProvider(store=store, verifier=verifier)

    # The backend does not know this token, so the record is dropped rather than retried forever.
    assert await provider.restore_session() is None
    assert verifier.lookup_calls == [token]
    assert store.raw is None
