"""
team_console.db.models

Persistence schema for the console.

Responsibilities:
- Define the key-value table backing `DatabaseSessionStore`.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from team_console.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps, matching the sqlite default backend.
    return datetime.utcnow()


class PersistedSession(Base):
    __tablename__ = "persisted_sessions"

    # One row per console profile (`Settings.session_key`).
    key: Mapped[str] = mapped_column(String(128), primary_key=True)

    # Raw JSON of `PrincipalRecord`; kept as text so a damaged row can still be read
    # and reported as corrupt instead of failing inside the driver.
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# The payload never contains the operator's password; only the bearer token issued
# by the backend is stored, so restore can re-attach it to requests.
