"""
team_console.session.credentials

Credential verification collaborator.

Responsibilities:
- Define the `CredentialVerifier` contract used by the session provider.
- Implement it against the team backend's `/auth/login` and `/auth/me` endpoints.
- Translate backend payloads (`ApiUser`) into `AccountRecord`s.

The console never holds or compares secrets: the submitted password is forwarded
once to the backend, which verifies it against its stored hash.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from team_console.auth.errors import CredentialServiceUnavailable
from team_console.auth.models import AccountRecord
from team_console.auth.roles import Role
from team_console.auth.tokens import bearer_header
from team_console.observability.logging import get_logger

log = get_logger(__name__)

# Statuses the login endpoint uses for "no such active account / wrong secret".
_NO_MATCH = frozenset({400, 401, 404})


class CredentialVerifier(Protocol):
    async def verify(self, identifier: str, secret: str) -> AccountRecord | None: ...

    async def lookup(self, token: str) -> AccountRecord | None: ...


class ApiUser(BaseModel):
    # Backend user shape; fields the console does not need are ignored.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str
    nome_completo: str = Field(alias="nomeCompleto")
    email: str
    tipo_acesso: str | None = Field(default=None, alias="tipoAcesso")
    equipe_id: int | str | None = Field(default=None, alias="equipeId")
    ativo: bool = True

    def to_account(self, *, token: str) -> AccountRecord:
        return AccountRecord(
            id=str(self.id),
            display_name=self.nome_completo,
            email=self.email,
            role=Role.parse(self.tipo_acesso),
            team_id=str(self.equipe_id) if self.equipe_id is not None else None,
            active=self.ativo,
            token=token,
        )


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: ApiUser


class HttpCredentialVerifier:
    """
    `http` must be configured with the backend base url (e.g. `.../api/v1`).
    """

    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def verify(self, identifier: str, secret: str) -> AccountRecord | None:
        r = await self._send("POST", "/auth/login", json={"email": identifier, "password": secret})

        if r.status_code in _NO_MATCH:
            return None
        if r.status_code == 403:
            return self._inactive_account(r, identifier)
        self._raise_for_unexpected(r)

        try:
            body = LoginResponse.model_validate(r.json())
        except (ValidationError, ValueError) as e:
            raise CredentialServiceUnavailable("login response has an unexpected shape") from e
        return body.user.to_account(token=body.access_token)

    async def lookup(self, token: str) -> AccountRecord | None:
        r = await self._send("GET", "/auth/me", headers=bearer_header(token))

        if r.status_code in (401, 403):
            return None
        self._raise_for_unexpected(r)

        try:
            user = ApiUser.model_validate(r.json())
        except (ValidationError, ValueError) as e:
            raise CredentialServiceUnavailable("identity response has an unexpected shape") from e
        return user.to_account(token=token)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.warning("credential_service_unreachable", path=path, error=type(e).__name__)
            raise CredentialServiceUnavailable(f"credential service unreachable: {e}") from e

    @staticmethod
    def _raise_for_unexpected(r: httpx.Response) -> None:
        if r.is_success:
            return
        log.warning("credential_service_error", path=r.request.url.path, status=r.status_code)
        raise CredentialServiceUnavailable(f"credential service answered {r.status_code}")

    @staticmethod
    def _inactive_account(r: httpx.Response, identifier: str) -> AccountRecord:
        # 403 carries the user when the backend includes it; otherwise only the identifier is known.
        try:
            user = ApiUser.model_validate(r.json().get("user") or {})
        except (ValidationError, ValueError, AttributeError):
            return AccountRecord(
                id=identifier,
                display_name="",
                email=identifier,
                role=Role.member,
                team_id=None,
                active=False,
            )
        return replace(user.to_account(token=""), active=False)
