"""
team_console.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the console shell and its collaborators.
- Keep navigation destinations (login/dashboard) configurable in one place.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    - Env-driven configuration (prefix `TEAM_CONSOLE_`)
    - Defaults safe for local dev against a backend on 127.0.0.1:8000
    """

    model_config = SettingsConfigDict(env_prefix="TEAM_CONSOLE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "team-console"
    log_level: str = "INFO"

    api_host: str = "127.0.0.1"
    api_port: int = 5173

    # Team backend (members/teams/finance/inventory + /auth endpoints).
    backend_base_url: str = "http://127.0.0.1:8000/api/v1"
    backend_timeout_seconds: float = Field(default=10.0, gt=0)

    # Session persistence
    session_store: Literal["memory", "database"] = "database"
    database_url: str = "sqlite+aiosqlite:///./team_console.db"
    session_key: str = "default"

    # Session lifecycle
    revalidate_on_restore: bool = True
    token_leeway_seconds: int = Field(default=30, ge=0)
    logout_on_unauthorized: bool = False

    # Route guard destinations
    login_path: str = "/login"
    dashboard_path: str = "/dashboard"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
