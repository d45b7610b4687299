"""
painel_authz.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Encapsulate app.state access patterns (settings/engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from painel_authz.authz.radar import RadarMembershipResolver
from painel_authz.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings the app was built with, not a fresh read of the environment.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the lifespan of `painel_authz.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]



def radar_resolver_from_app(request: Request) -> RadarMembershipResolver:
    # Shared by every request; `resolve` never awaits, so calls do not interleave.
    return request.app.state.radar_resolver  # type: ignore[attr-defined]

async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session
