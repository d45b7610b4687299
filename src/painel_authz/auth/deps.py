"""
painel_authz.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `UserIdentity` (or no identity).
- Refuse users whose profile is not approved yet.
- Load the caller's capabilities and enforce permission gates.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from painel_authz.api.deps import db_session, sessionmaker_from_app, settings_dep
from painel_authz.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from painel_authz.auth.models import UserIdentity
from painel_authz.authz.gate import gate_allows
from painel_authz.authz.resolver import PermissionResolver
from painel_authz.authz.stores import SqlFeaturePermissionStore, SqlRoleStore
from painel_authz.db.repositories.profiles import ProfileRepo
from painel_authz.settings import Settings

_bearer = HTTPBearer(auto_error=False)


async def get_identity_optional(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> UserIdentity | None:
    # No token is the unauthenticated state, not an error.
    if creds is None or not creds.credentials:
        return None

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    subject = str(payload.get("sub", ""))
    if not subject:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")

    structlog.contextvars.bind_contextvars(user_id=subject)
    return UserIdentity(user_id=subject)


def get_identity(identity: UserIdentity | None = Depends(get_identity_optional)) -> UserIdentity:
    if identity is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return identity


async def require_approved(
    identity: UserIdentity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> UserIdentity:
    profile = await ProfileRepo(session).get_by_user_id(identity.user_id)
    if profile is None or not profile.approved:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Awaiting approval")
    return identity


async def get_permission_resolver(
    identity: UserIdentity = Depends(require_approved),
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> PermissionResolver:
    resolver = PermissionResolver(
        roles=SqlRoleStore(session_factory),
        permissions=SqlFeaturePermissionStore(session_factory),
    )
    await resolver.load(identity)
    return resolver


def require_permission(*codes: str, require_all: bool = False):
    def _dep(resolver: PermissionResolver = Depends(get_permission_resolver)) -> PermissionResolver:
        if not gate_allows(resolver.capabilities, permissions=codes, require_all=require_all):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Missing permission")
        return resolver

    return _dep


def require_admin():
    def _dep(resolver: PermissionResolver = Depends(get_permission_resolver)) -> PermissionResolver:
        if not gate_allows(resolver.capabilities, require_admin=True):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Admin only")
        return resolver

    return _dep


# --- Module Notes -----------------------------------------------------------
# Feature routes elsewhere in the dashboard guard themselves with
# `Depends(require_permission("comissoes.visualizar"))`; admins pass every gate.
