"""
team_console.api.app

FastAPI app factory for the console shell.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build the session provider, resolver, guard and backend client for this app instance.
- Start session restore at startup and dispose shared infrastructure at shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator
from datetime import timedelta

import httpx
from fastapi import FastAPI

from team_console import __version__
from team_console.api.routers.backend import router as backend_router
from team_console.api.routers.health import router as health_router
from team_console.api.routers.session import router as session_router
from team_console.api.routers.views import router as views_router
from team_console.clients.backend import BackendClient
from team_console.db.init_db import init_db
from team_console.db.session import create_engine, create_sessionmaker
from team_console.observability.logging import configure_logging, get_logger
from team_console.observability.middleware import RequestContextMiddleware
from team_console.permissions.resolver import PermissionResolver
from team_console.routing.guard import RouteGuard
from team_console.session.credentials import CredentialVerifier, HttpCredentialVerifier
from team_console.session.provider import SessionProvider
from team_console.session.store import DatabaseSessionStore, MemorySessionStore, SessionStore
from team_console.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    store: SessionStore | None = None,
    verifier: CredentialVerifier | None = None,
    backend_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `store`, `verifier` and `backend_transport` replace the settings-driven
    collaborators (tests inject fakes here).
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await _startup(app)
        try:
            yield
        finally:
            await _shutdown(app)

    async def _startup(app: FastAPI) -> None:
        log.info("startup", env=settings.env, session_store=settings.session_store)

        http = httpx.AsyncClient(
            base_url=settings.backend_base_url,
            timeout=settings.backend_timeout_seconds,
            transport=backend_transport,
        )
        app.state.http = http

        session_store = store
        if session_store is None:
            session_store = await _build_store(app, settings)

        provider = SessionProvider(
            store=session_store,
            verifier=verifier or HttpCredentialVerifier(http=http),
            revalidate_on_restore=settings.revalidate_on_restore,
            token_leeway=timedelta(seconds=settings.token_leeway_seconds),
        )
        resolver = PermissionResolver(provider)

        app.state.session = provider
        app.state.resolver = resolver
        app.state.guard = RouteGuard(
            session=provider,
            resolver=resolver,
            login_path=settings.login_path,
            dashboard_path=settings.dashboard_path,
        )
        app.state.backend = BackendClient(
            http=http,
            session=provider,
            logout_on_unauthorized=settings.logout_on_unauthorized,
        )
        # Navigation answers "loading" until this task resolves.
        app.state.restore_task = provider.start_restore()

    async def _shutdown(app: FastAPI) -> None:
        task = getattr(app.state, "restore_task", None)
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        http = getattr(app.state, "http", None)
        if http is not None:
            await http.aclose()

        engine = getattr(app.state, "engine", None)
        if engine is not None:
            await engine.dispose()
        log.info("shutdown")

    app = FastAPI(
        title="Team Console",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(session_router)
    app.include_router(backend_router)
    # Catch-all navigation; must stay last.
    app.include_router(views_router)

    return app


async def _build_store(app: FastAPI, settings: Settings) -> SessionStore:
    if settings.session_store == "memory":
        return MemorySessionStore()

    engine = create_engine(settings)
    app.state.engine = engine
    if settings.env in ("dev", "test"):
        # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
        await init_db(engine)
    return DatabaseSessionStore(create_sessionmaker(engine), key=settings.session_key)


# --- Module Notes -----------------------------------------------------------
# One app instance serves one console operator, the way one browser tab held one
# session. Nothing here is module-global, so tests can build isolated apps.
