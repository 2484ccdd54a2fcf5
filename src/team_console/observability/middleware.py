"""
team_console.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs.
- Bind the console session (state + principal id) into structlog contextvars so
  guard decisions and backend calls are attributable without parameter threading.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )

        # The provider only exists after startup; health probes may arrive earlier.
        provider = getattr(request.app.state, "session", None)
        if provider is not None:
            principal = provider.current_principal()
            structlog.contextvars.bind_contextvars(
                session_state=provider.state.value,
                principal_id=principal.id if principal is not None else None,
            )

        try:
            response: Response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Values are captured at request entry; a login/logout inside the request is logged
# by the session provider itself with the new state.
