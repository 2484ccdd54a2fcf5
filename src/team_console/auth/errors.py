"""
team_console.auth.errors

Error taxonomy for session and access-control failures.

Responsibilities:
- Give each failure mode its own type so callers can recover precisely.
- Keep a single user-facing message for credential failures (no account enumeration).
"""

from __future__ import annotations

# Shown for both unknown and deactivated accounts.
GENERIC_LOGIN_FAILURE = "Invalid email or password"


class AuthError(Exception):
    pass


class InvalidCredentials(AuthError):
    def __init__(self) -> None:
        super().__init__(GENERIC_LOGIN_FAILURE)


class AccountInactive(AuthError):
    """
    A matching account exists but is deactivated.

    Callers at the UI boundary must treat this exactly like `InvalidCredentials`;
    `account_id` exists for audit logging only.
    """

    def __init__(self, account_id: str) -> None:
        super().__init__(GENERIC_LOGIN_FAILURE)
        self.account_id = account_id


class SessionRestoreCorrupt(AuthError):
    # Raised by session stores; the provider recovers by treating it as "no session".
    pass


class Unauthenticated(AuthError):
    pass


class Forbidden(AuthError):
    def __init__(self, capability: str) -> None:
        super().__init__(f"missing capability: {capability}")
        self.capability = capability


class CredentialServiceUnavailable(AuthError):
    pass
