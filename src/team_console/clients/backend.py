"""
team_console.clients.backend

Authenticated HTTP client for the team backend.

Responsibilities:
- Attach the live session's bearer token to every call.
- Refuse to call out without a principal.
- Map backend failures (transport errors and unreadable bodies included) to
  `Unauthenticated` / `BackendError`, optionally treating a 401 as an implicit logout.
"""

from __future__ import annotations

from typing import Any

import httpx

from team_console.auth.errors import Unauthenticated
from team_console.auth.tokens import bearer_header
from team_console.observability.logging import get_logger
from team_console.session.provider import SessionProvider

log = get_logger(__name__)


class BackendError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"backend answered {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class BackendClient:
    """
    Thin pass-through used by console views. It does not check capabilities:
    the backend is the authority for every call made here.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        session: SessionProvider,
        logout_on_unauthorized: bool = False,
    ) -> None:
        self._http = http
        self._session = session
        self._logout_on_unauthorized = logout_on_unauthorized

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        principal = self._session.current_principal()
        if principal is None:
            raise Unauthenticated("no active session")

        headers = {**kwargs.pop("headers", {}), **bearer_header(principal.token)}
        try:
            r = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            log.warning("backend_unreachable", path=path, error=type(e).__name__)
            raise BackendError(502, "Backend unavailable") from e

        if r.status_code == 401:
            log.info("backend_unauthorized", path=path, principal_id=principal.id)
            if self._logout_on_unauthorized:
                await self._session.logout()
            raise Unauthenticated("backend rejected the session token")

        if r.is_error:
            detail = _error_detail(r)
            log.warning("backend_error", path=path, status=r.status_code)
            raise BackendError(r.status_code, detail)

        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            log.warning("backend_invalid_body", path=path, status=r.status_code)
            raise BackendError(502, "Backend returned an unreadable response") from e

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)


def _error_detail(r: httpx.Response) -> str:
    # The backend reports errors as {"detail": ...} (FastAPI) or {"message": ...}.
    try:
        body = r.json()
    except ValueError:
        return f"Error {r.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if detail:
            return str(detail)
    return f"Error {r.status_code}"


# --- Module Notes -----------------------------------------------------------
# `logout_on_unauthorized` is off by default: an expired token then surfaces as
# `Unauthenticated` and the caller decides whether to log out.
