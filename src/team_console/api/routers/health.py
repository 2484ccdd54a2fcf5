"""
team_console.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): ready once session restore has finished.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from team_console.api.deps import session_provider
from team_console.session.provider import SessionProvider

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: SessionProvider = Depends(session_provider)) -> JSONResponse:
    if session.is_loading:
        return JSONResponse({"status": "restoring"}, status_code=503)
    return JSONResponse({"status": "ready", "session": session.state.value})
