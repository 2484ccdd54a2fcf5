"""
team_console.api.routers.backend

Authenticated pass-through from the console UI to the team backend.

Responsibilities:
- Forward `/v1/backend/<path>` to `<backend_base_url>/<path>` with the session's bearer token.
- Map `Unauthenticated` to 401 and backend errors to their original status.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.status import HTTP_204_NO_CONTENT, HTTP_401_UNAUTHORIZED

from team_console.api.deps import backend_client
from team_console.auth.errors import Unauthenticated
from team_console.clients.backend import BackendClient, BackendError

router = APIRouter(prefix="/v1/backend", tags=["backend"])


@router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], response_model=None)
async def forward(
    path: str,
    request: Request,
    backend: BackendClient = Depends(backend_client),
) -> Response:
    kwargs: dict[str, Any] = {"params": list(request.query_params.multi_items())}
    raw = await request.body()
    if raw:
        kwargs["content"] = raw
        kwargs["headers"] = {"Content-Type": request.headers.get("content-type", "application/json")}

    try:
        result = await backend.request(request.method, f"/{path}", **kwargs)
    except Unauthenticated as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authenticated") from e
    except BackendError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e

    if result is None:
        return Response(status_code=HTTP_204_NO_CONTENT)
    return JSONResponse(result)


# --- Module Notes -----------------------------------------------------------
# No capability check here: the backend authorizes each call with the forwarded token.
# Capabilities only shape what the UI offers.
