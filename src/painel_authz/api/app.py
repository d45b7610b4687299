"""
painel_authz.api.app

FastAPI app factory for the dashboard authorization service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from painel_authz import __version__
from painel_authz.api.routers.admin_permissions import router as admin_router
from painel_authz.api.routers.dev_auth import router as dev_auth_router
from painel_authz.api.routers.health import router as health_router
from painel_authz.api.routers.me import router as me_router
from painel_authz.authz.radar import RadarMembershipResolver
from painel_authz.db.init_db import init_db
from painel_authz.db.session import create_engine, create_sessionmaker
from painel_authz.observability.logging import configure_logging, get_logger
from painel_authz.observability.middleware import RequestContextMiddleware
from painel_authz.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # No migration tooling ships with the service; dev/test bootstrap the schema.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Painel Authorization Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.radar_resolver = RadarMembershipResolver()

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(me_router)
    app.include_router(admin_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Authorization rules live in `painel_authz.authz`; this module only wires them to HTTP.
