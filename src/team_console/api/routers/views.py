"""
team_console.api.routers.views

Guarded navigation for console destinations.

Responsibilities:
- Run the route guard for every requested console path.
- Turn guard decisions into HTTP: view descriptor, loading, redirect or 404.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_202_ACCEPTED, HTTP_303_SEE_OTHER, HTTP_404_NOT_FOUND

from team_console.api.deps import permission_resolver, route_guard, session_provider, settings_dep
from team_console.permissions.navigation import visible_navigation
from team_console.permissions.resolver import PermissionResolver
from team_console.routing.guard import GuardOutcome, RouteGuard
from team_console.session.provider import SessionProvider
from team_console.settings import Settings

router = APIRouter(tags=["views"])


@router.get("/")
async def root(settings: Settings = Depends(settings_dep)) -> RedirectResponse:
    return RedirectResponse(settings.dashboard_path, status_code=HTTP_303_SEE_OTHER)


@router.get("/{path:path}", response_model=None)
async def navigate(
    path: str,
    guard: RouteGuard = Depends(route_guard),
    session: SessionProvider = Depends(session_provider),
    resolver: PermissionResolver = Depends(permission_resolver),
) -> JSONResponse | RedirectResponse:
    decision = guard.evaluate(path)

    if decision.outcome is GuardOutcome.not_found:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    if decision.outcome is GuardOutcome.evaluating:
        # Neutral waiting state: the UI polls again once the session has resolved.
        return JSONResponse({"view": "loading"}, status_code=HTTP_202_ACCEPTED)

    if decision.redirect_to is not None:
        return RedirectResponse(decision.redirect_to, status_code=HTTP_303_SEE_OTHER)

    destination = decision.destination
    principal = session.current_principal()
    body: dict[str, Any] = {
        "view": destination.name if destination is not None else None,
        "params": decision.params,
        "principal": principal.summary() if principal is not None else None,
        "capabilities": resolver.as_payload(),
        "navigation": [item.payload() for item in visible_navigation(resolver)],
    }
    return JSONResponse(body)
