"""
team_console.auth.tokens

Bearer token helpers.

Responsibilities:
- Build the `Authorization` header for backend calls.
- Read the `exp` claim of JWT-shaped tokens so an obviously expired session is not restored.

Note:
- The console never validates signatures; the token is opaque to it and the backend
  remains the only authority. Non-JWT tokens are simply treated as "expiry unknown".
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
from jwt import InvalidTokenError


def bearer_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_expires_at(token: str) -> datetime | None:
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except InvalidTokenError:
        return None

    exp = claims.get("exp")
    if not isinstance(exp, int | float):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=UTC)
    except (OverflowError, OSError, ValueError):
        # Out-of-range `exp`; treat like a token without one.
        return None


def is_token_expired(
    token: str,
    *,
    leeway: timedelta = timedelta(seconds=0),
    now: datetime | None = None,
) -> bool:
    expires_at = token_expires_at(token)
    if expires_at is None:
        return False
    current = now or datetime.now(tz=UTC)
    # Leeway treats tokens about to expire as already expired.
    return expires_at <= current + leeway
