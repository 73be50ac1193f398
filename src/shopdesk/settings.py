"""
shopdesk.settings

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
    Env-driven configuration shared by the API, auth and tenancy layers.
    Defaults are safe for local dev.
    """

    model_config = SettingsConfigDict(env_prefix="SHOPDESK_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and dev tokens.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "shopdesk"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8081

    # Auth
    # "signed" issues/accepts JWTs; "opaque" keeps the legacy `<user-id>.<suffix>` form.
    token_scheme: Literal["signed", "opaque"] = "signed"
    jwt_alg: str = "HS256"
    jwt_issuer: str = "shopdesk"
    jwt_audience: str = "shopdesk-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    token_ttl_minutes: int = 12 * 60

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./shopdesk.db"

    # Tenancy
    # Set to None to disable the last-resort tenant fallback (multi-tenant prod).
    fallback_tenant_subdomain: str | None = "demo"

    # Bootstrap
    seed_defaults: bool = True
    admin_email: str = "admin@example.com"
    superadmin_email: str = "super_admin@example.com"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Settings are immutable for the life of the process; nothing request-scoped
# should ever be stored on this object.
