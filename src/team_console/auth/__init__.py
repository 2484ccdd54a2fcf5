"""
team_console.auth

Authentication/authorization domain package.

Responsibilities:
- Role catalog (roles, capabilities, the static role -> capability table).
- Principal and persisted-record models.
- Error taxonomy shared by the session provider, guard and backend client.
"""
