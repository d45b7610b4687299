"""
painel_authz.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `PAINEL_`); defaults are safe for local dev.
    """

    model_config = SettingsConfigDict(env_prefix="PAINEL_", case_sensitive=False)

    # `dev`/`test` auto-create tables and expose the dev token endpoint.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "painel-authz"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Identity provider (bearer JWT, `sub` = user id)
    jwt_alg: str = "HS256"
    jwt_issuer: str = "painel-auth"
    jwt_audience: str = "painel-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./painel.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()
