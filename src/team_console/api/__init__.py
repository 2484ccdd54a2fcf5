"""
team_console.api

Console shell HTTP surface (FastAPI).

Responsibilities:
- App factory and composition root.
- Session endpoints (login/logout/state) and guarded navigation.
"""
