"""
shopdesk.api.app

FastAPI app factory for the shopdesk service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Construct the request-path components (token parser, authz gate, tenant
  resolver) once and hand them to routes through `app.state`.
- Accept the password verifier from the deployment (login is disabled without one).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shopdesk import __version__
from shopdesk.api.routers.auth import router as auth_router
from shopdesk.api.routers.dev_auth import router as dev_auth_router
from shopdesk.api.routers.health import router as health_router
from shopdesk.api.routers.roles import router as roles_router
from shopdesk.api.routers.tenants import router as tenants_router
from shopdesk.auth.authz import Authz
from shopdesk.auth.passwords import PasswordVerifier
from shopdesk.auth.tokens import TokenConfig, TokenParser
from shopdesk.db.directory import SqlDirectory
from shopdesk.db.init_db import init_db
from shopdesk.db.seed import seed_defaults
from shopdesk.db.session import create_engine, create_sessionmaker
from shopdesk.errors import install_error_handlers
from shopdesk.observability.logging import configure_logging, get_logger
from shopdesk.observability.middleware import RequestContextMiddleware
from shopdesk.settings import Settings
from shopdesk.tenancy.resolver import TenantResolver

log = get_logger(__name__)


def create_app(
    *, settings: Settings, password_verifier: PasswordVerifier | None = None
) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            token_scheme=settings.token_scheme,
            password_login=password_verifier is not None,
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)

        directory = SqlDirectory(app.state.sessionmaker)
        app.state.directory = directory
        app.state.authz = Authz(directory)
        app.state.tenant_resolver = TenantResolver(
            directory, fallback_subdomain=settings.fallback_tenant_subdomain
        )

        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(engine)
        if settings.seed_defaults:
            app.state.seed = await seed_defaults(app.state.sessionmaker, settings)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="shopdesk",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_parser = TokenParser(TokenConfig.from_settings(settings))
    app.state.password_verifier = password_verifier

    install_error_handlers(app)
    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(auth_router)
    app.include_router(roles_router)
    app.include_router(tenants_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Authz and TenantResolver are plain objects on app.state, so tests can build
# several independent apps (or swap in an in-memory directory) side by side.
