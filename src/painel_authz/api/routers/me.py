"""
painel_authz.api.routers.me

Capability endpoints for the signed-in user.

Responsibilities:
- Expose the resolved capability set and single permission checks.
- Expose the radar membership view (owner/manager flags, area).
- Expose the navigation sections the caller may see.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from painel_authz.api.deps import radar_resolver_from_app, sessionmaker_from_app
from painel_authz.auth.deps import get_permission_resolver
from painel_authz.authz.navigation import DEFAULT_NAVIGATION, visible_navigation
from painel_authz.authz.radar import RadarMembership, RadarMembershipResolver, fetch_membership
from painel_authz.authz.resolver import PermissionResolver
from painel_authz.authz.stores import SqlMembershipStore

router = APIRouter(prefix="/v1/me", tags=["me"])


class CapabilitiesResponse(BaseModel):
    user_id: str | None
    is_admin: bool
    roles: list[str]
    permissions: dict[str, bool]
    loading: bool


class PermissionCheckResponse(BaseModel):
    code: str
    allowed: bool


class RadarResponse(BaseModel):
    organizational_role: str | None
    area: str | None
    is_owner: bool
    is_manager: bool
    is_colaborador: bool
    can_manage_objectives: bool
    can_manage_team: bool
    loading: bool


class NavItemResponse(BaseModel):
    title: str
    href: str


class NavSectionResponse(BaseModel):
    title: str
    items: list[NavItemResponse]


async def _radar_for(
    resolver: PermissionResolver,
    session_factory: async_sessionmaker[AsyncSession],
    radar_resolver: RadarMembershipResolver,
) -> RadarMembership:
    record = await fetch_membership(SqlMembershipStore(session_factory), resolver.identity)
    return radar_resolver.resolve(resolver.capabilities, record)


@router.get("/capabilities", response_model=CapabilitiesResponse)
async def get_capabilities(
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> CapabilitiesResponse:
    caps = resolver.capabilities
    return CapabilitiesResponse(
        user_id=caps.user_id,
        is_admin=caps.is_admin,
        roles=sorted(caps.roles),
        permissions=dict(caps.permissions),
        loading=caps.loading,
    )


@router.get("/permissions/{code}", response_model=PermissionCheckResponse)
async def check_permission(
    code: str,
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> PermissionCheckResponse:
    return PermissionCheckResponse(code=code, allowed=resolver.has_permission(code))


@router.get("/radar", response_model=RadarResponse)
async def get_radar(
    resolver: PermissionResolver = Depends(get_permission_resolver),
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
    radar_resolver: RadarMembershipResolver = Depends(radar_resolver_from_app),
) -> RadarResponse:
    radar = await _radar_for(resolver, session_factory, radar_resolver)
    return RadarResponse(
        organizational_role=radar.organizational_role.value if radar.organizational_role else None,
        area=radar.area,
        is_owner=radar.is_owner,
        is_manager=radar.is_manager,
        is_colaborador=radar.is_colaborador,
        can_manage_objectives=radar.can_manage_objectives,
        can_manage_team=radar.can_manage_team,
        loading=radar.loading,
    )


@router.get("/navigation", response_model=list[NavSectionResponse])
async def get_navigation(
    resolver: PermissionResolver = Depends(get_permission_resolver),
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
    radar_resolver: RadarMembershipResolver = Depends(radar_resolver_from_app),
) -> list[NavSectionResponse]:
    radar = await _radar_for(resolver, session_factory, radar_resolver)
    sections = visible_navigation(DEFAULT_NAVIGATION, resolver.capabilities, radar)
    return [
        NavSectionResponse(
            title=s.title,
            items=[NavItemResponse(title=i.title, href=i.href) for i in s.items],
        )
        for s in sections
    ]
