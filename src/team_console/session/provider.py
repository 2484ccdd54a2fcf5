"""
team_console.session.provider

Session/identity provider (exclusive owner of the current principal).

Responsibilities:
- Restore a persisted session at startup (never raising).
- Log in through the credential collaborator and persist the secret-free record.
- Log out (idempotent) and expose synchronous reads of the current state.
"""

from __future__ import annotations

import asyncio
import enum
from datetime import timedelta

from team_console.auth.errors import (
    AccountInactive,
    CredentialServiceUnavailable,
    InvalidCredentials,
    SessionRestoreCorrupt,
)
from team_console.auth.models import Principal, PrincipalRecord
from team_console.auth.tokens import is_token_expired
from team_console.observability.logging import get_logger
from team_console.session.credentials import CredentialVerifier
from team_console.session.store import SessionStore

log = get_logger(__name__)


class SessionState(enum.StrEnum):
    unauthenticated = "unauthenticated"
    loading = "loading"
    authenticated = "authenticated"


class SessionProvider:
    """
    One instance per console; pass it explicitly to the resolver, guard and clients.

    Mutations (restore/login/logout) are serialized by a lock so each of them is
    observed either fully applied or not at all. Concurrent logins resolve
    last-write-wins; preventing double submission is the caller's job.
    """

    def __init__(
        self,
        *,
        store: SessionStore,
        verifier: CredentialVerifier,
        revalidate_on_restore: bool = True,
        token_leeway: timedelta = timedelta(seconds=30),
    ) -> None:
        self._store = store
        self._verifier = verifier
        self._revalidate_on_restore = revalidate_on_restore
        self._token_leeway = token_leeway

        self._principal: Principal | None = None
        self._state = SessionState.unauthenticated
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is SessionState.loading

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.authenticated

    def current_principal(self) -> Principal | None:
        return self._principal

    def start_restore(self) -> asyncio.Task[Principal | None]:
        """
        Schedule `restore_session` and enter `loading` immediately, so nothing can
        observe `unauthenticated` between app start and the first await of the task.
        """

        self._state = SessionState.loading
        return asyncio.create_task(self.restore_session())

    async def restore_session(self) -> Principal | None:
        async with self._lock:
            self._state = SessionState.loading
            try:
                principal = await self._restore()
            except Exception:  # noqa: BLE001
                # Restore never raises; an unexpected store/verifier failure means "no session".
                log.exception("session_restore_failed")
                await self._discard()
                principal = None
            self._principal = principal
            self._state = (
                SessionState.authenticated if principal is not None else SessionState.unauthenticated
            )
            log.info("session_restored", restored=principal is not None)
            return principal

    async def _restore(self) -> Principal | None:
        try:
            record = await self._store.load()
        except SessionRestoreCorrupt as e:
            log.warning("session_restore_corrupt", reason=str(e))
            await self._discard()
            return None

        if record is None:
            return None

        if is_token_expired(record.token, leeway=self._token_leeway):
            log.info("session_token_expired", principal_id=record.id)
            await self._discard()
            return None

        if not self._revalidate_on_restore:
            return record.to_principal()

        try:
            account = await self._verifier.lookup(record.token)
        except CredentialServiceUnavailable as e:
            log.warning("session_revalidation_failed", principal_id=record.id, reason=str(e))
            await self._discard()
            return None

        if account is None or not account.active:
            log.info("session_revoked", principal_id=record.id)
            await self._discard()
            return None

        principal = Principal.from_account(account)
        # Keep the persisted copy in sync with what the backend reports now.
        try:
            await self._store.save(PrincipalRecord.from_principal(principal))
        except Exception:  # noqa: BLE001
            log.exception("session_refresh_save_failed", principal_id=principal.id)
        return principal

    async def login(self, identifier: str, secret: str) -> Principal:
        async with self._lock:
            account = await self._verifier.verify(identifier, secret)

            if account is None:
                log.info("login_rejected", reason="invalid_credentials")
                raise InvalidCredentials()
            if not account.active:
                # Distinct only in the audit trail; callers show the generic message.
                log.info("login_rejected", reason="account_inactive", principal_id=account.id)
                raise AccountInactive(account.id)

            principal = Principal.from_account(account)
            # Persist first: if saving fails nothing has changed yet.
            await self._store.save(PrincipalRecord.from_principal(principal))
            self._principal = principal
            self._state = SessionState.authenticated
            log.info("login_succeeded", principal_id=principal.id, role=principal.role.value)
            return principal

    async def logout(self) -> None:
        async with self._lock:
            previous = self._principal
            await self._discard()
            self._principal = None
            self._state = SessionState.unauthenticated
            if previous is not None:
                log.info("logout", principal_id=previous.id)

    async def _discard(self) -> None:
        try:
            await self._store.clear()
        except Exception:  # noqa: BLE001
            # The in-memory state is authoritative; a failed clear is retried on next logout.
            log.exception("session_clear_failed")


# --- Module Notes -----------------------------------------------------------
# Only this class mutates the principal. The resolver and route guard read it through
# `current_principal()` / `state` on every call, so nothing downstream can go stale.
