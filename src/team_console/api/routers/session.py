"""
team_console.api.routers.session

Session endpoints for the console UI.

Responsibilities:
- Report the session state, principal summary, capabilities and navigation.
- Log in / log out through the session provider.
- Answer every credential failure with the same generic 401.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from starlette.status import (
    HTTP_204_NO_CONTENT,
    HTTP_401_UNAUTHORIZED,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from team_console.api.deps import permission_resolver, session_provider
from team_console.auth.errors import (
    GENERIC_LOGIN_FAILURE,
    AccountInactive,
    CredentialServiceUnavailable,
    InvalidCredentials,
)
from team_console.permissions.navigation import visible_navigation
from team_console.permissions.resolver import PermissionResolver
from team_console.session.provider import SessionProvider

router = APIRouter(prefix="/v1/session", tags=["session"])


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=1024, repr=False)


class SessionResponse(BaseModel):
    state: str
    principal: dict[str, Any] | None
    capabilities: dict[str, bool]
    navigation: list[dict[str, str]]


def session_snapshot(session: SessionProvider, resolver: PermissionResolver) -> SessionResponse:
    principal = session.current_principal()
    return SessionResponse(
        state=session.state.value,
        principal=principal.summary() if principal is not None else None,
        capabilities=resolver.as_payload(),
        navigation=[item.payload() for item in visible_navigation(resolver)],
    )


@router.get("", response_model=SessionResponse)
async def get_session(
    session: SessionProvider = Depends(session_provider),
    resolver: PermissionResolver = Depends(permission_resolver),
) -> SessionResponse:
    return session_snapshot(session, resolver)


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    session: SessionProvider = Depends(session_provider),
    resolver: PermissionResolver = Depends(permission_resolver),
) -> SessionResponse:
    try:
        await session.login(body.email, body.password)
    except (InvalidCredentials, AccountInactive) as e:
        # Same status and detail for both, so the endpoint cannot be used to probe accounts.
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=GENERIC_LOGIN_FAILURE) from e
    except CredentialServiceUnavailable as e:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        ) from e
    return session_snapshot(session, resolver)


@router.post("/logout", status_code=HTTP_204_NO_CONTENT)
async def logout(session: SessionProvider = Depends(session_provider)) -> Response:
    await session.logout()
    return Response(status_code=HTTP_204_NO_CONTENT)
