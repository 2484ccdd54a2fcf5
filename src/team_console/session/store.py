"""
team_console.session.store

Persistence collaborator for the session provider.

Responsibilities:
- Define the three-operation `SessionStore` contract (save/load/clear).
- Provide an in-memory store and a SQLAlchemy-backed key-value store.
- Report unreadable/malformed records as `SessionRestoreCorrupt`.
"""

from __future__ import annotations

from typing import Protocol

from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from team_console.auth.errors import SessionRestoreCorrupt
from team_console.auth.models import PrincipalRecord
from team_console.db.models import PersistedSession


class SessionStore(Protocol):
    async def save(self, record: PrincipalRecord) -> None: ...

    async def load(self) -> PrincipalRecord | None: ...

    async def clear(self) -> None: ...


def encode_record(record: PrincipalRecord) -> str:
    return record.model_dump_json()


def decode_record(raw: str) -> PrincipalRecord:
    try:
        return PrincipalRecord.model_validate_json(raw)
    except ValidationError as e:
        # Never echo the payload: it may carry a token.
        raise SessionRestoreCorrupt(f"persisted session is malformed ({e.error_count()} errors)") from e


class MemorySessionStore:
    """
    Process-local store. `raw` seeds the store with an already-serialized payload,
    which is how tests simulate a reload (including a damaged one).
    """

    def __init__(self, raw: str | None = None) -> None:
        self._raw = raw

    @property
    def raw(self) -> str | None:
        return self._raw

    async def save(self, record: PrincipalRecord) -> None:
        self._raw = encode_record(record)

    async def load(self) -> PrincipalRecord | None:
        if self._raw is None:
            return None
        return decode_record(self._raw)

    async def clear(self) -> None:
        self._raw = None


class DatabaseSessionStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        key: str = "default",
    ) -> None:
        self._session_factory = session_factory
        self._key = key

    async def save(self, record: PrincipalRecord) -> None:
        async with self._session_factory() as session:
            row = await session.get(PersistedSession, self._key)
            if row is None:
                session.add(PersistedSession(key=self._key, payload=encode_record(record)))
            else:
                row.payload = encode_record(record)
            await session.commit()

    async def load(self) -> PrincipalRecord | None:
        try:
            async with self._session_factory() as session:
                row = await session.get(PersistedSession, self._key)
                raw = row.payload if row is not None else None
        except SQLAlchemyError as e:
            raise SessionRestoreCorrupt(f"persisted session is unreadable: {type(e).__name__}") from e

        if raw is None:
            return None
        return decode_record(raw)

    async def clear(self) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(PersistedSession).where(PersistedSession.key == self._key))
            await session.commit()


# --- Module Notes -----------------------------------------------------------
# Each operation opens and closes its own DB session; an exception inside the
# `async with` block rolls back, so a failed save never leaves a half-written row.
