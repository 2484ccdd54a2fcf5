"""
team_console.api.deps

FastAPI dependency wiring for the console shell.

Responsibilities:
- Expose the per-app collaborators stored on `app.state` at startup.
"""

from __future__ import annotations

from fastapi import Request

from team_console.clients.backend import BackendClient
from team_console.permissions.resolver import PermissionResolver
from team_console.routing.guard import RouteGuard
from team_console.session.provider import SessionProvider
from team_console.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The factory's settings, not `get_settings()`: tests build apps with their own.
    return request.app.state.settings  # type: ignore[attr-defined]


def session_provider(request: Request) -> SessionProvider:
    return request.app.state.session  # type: ignore[attr-defined]


def permission_resolver(request: Request) -> PermissionResolver:
    return request.app.state.resolver  # type: ignore[attr-defined]


def route_guard(request: Request) -> RouteGuard:
    return request.app.state.guard  # type: ignore[attr-defined]


def backend_client(request: Request) -> BackendClient:
    return request.app.state.backend  # type: ignore[attr-defined]
