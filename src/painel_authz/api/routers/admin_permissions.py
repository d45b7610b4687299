"""
painel_authz.api.routers.admin_permissions

Admin-only endpoints for user administration and per-user feature permissions.

Responsibilities:
- List the feature catalogue, approved users and pending sign-ups.
- Approve or reject sign-ups and toggle the admin role.
- Read and save a user's permission grid.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from painel_authz.api.deps import db_session
from painel_authz.auth.deps import require_admin
from painel_authz.authz.resolver import PermissionResolver
from painel_authz.services.permission_admin_service import (
    PermissionAdminService,
    UnknownFeatureError,
    UnknownUserError,
)

router = APIRouter(prefix="/v1/admin", tags=["admin"])


class FeatureResponse(BaseModel):
    id: uuid.UUID
    code: str
    name: str


class ModuleResponse(BaseModel):
    id: uuid.UUID
    name: str
    route: str
    features: list[FeatureResponse]


class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    is_admin: bool


class PendingUserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    department: str | None


class ApprovalResponse(BaseModel):
    user_id: str
    approved: bool


class SetAdminRequest(BaseModel):
    is_admin: bool


class SetAdminResponse(BaseModel):
    user_id: str
    is_admin: bool


class PermissionGridResponse(BaseModel):
    user_id: str
    is_admin: bool
    allowed: dict[uuid.UUID, bool]


class SavePermissionsRequest(BaseModel):
    changes: dict[uuid.UUID, bool] = Field(default_factory=dict)


class SavePermissionsResponse(BaseModel):
    saved: int


def _actor(resolver: PermissionResolver) -> str:
    return resolver.identity.user_id if resolver.identity else "unknown"


@router.get("/modules", response_model=list[ModuleResponse])
async def list_modules(
    _: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> list[ModuleResponse]:
    modules = await PermissionAdminService(session=session).list_modules()
    return [
        ModuleResponse(
            id=m.module.id,
            name=m.module.name,
            route=m.module.route,
            features=[FeatureResponse(id=f.id, code=f.code, name=f.name) for f in m.features],
        )
        for m in modules
    ]


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    _: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> list[UserResponse]:
    users = await PermissionAdminService(session=session).list_users()
    return [
        UserResponse(
            user_id=u.profile.user_id,
            name=u.profile.name,
            email=u.profile.email,
            is_admin=u.is_admin,
        )
        for u in users
    ]


@router.get("/users/pending", response_model=list[PendingUserResponse])
async def list_pending_users(
    _: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> list[PendingUserResponse]:
    profiles = await PermissionAdminService(session=session).list_pending_users()
    return [
        PendingUserResponse(
            user_id=p.user_id, name=p.name, email=p.email, department=p.department
        )
        for p in profiles
    ]


@router.post("/users/{user_id}/approve", response_model=ApprovalResponse)
async def approve_user(
    user_id: str,
    resolver: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> ApprovalResponse:
    svc = PermissionAdminService(session=session)
    try:
        profile = await svc.approve_user(user_id=user_id, actor=_actor(resolver))
    except UnknownUserError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found") from e
    return ApprovalResponse(user_id=profile.user_id, approved=profile.approved)


@router.delete("/users/{user_id}", status_code=HTTP_204_NO_CONTENT)
async def reject_user(
    user_id: str,
    resolver: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> None:
    svc = PermissionAdminService(session=session)
    try:
        await svc.reject_user(user_id=user_id, actor=_actor(resolver))
    except UnknownUserError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found") from e


@router.put("/users/{user_id}/admin", response_model=SetAdminResponse)
async def set_user_admin(
    user_id: str,
    body: SetAdminRequest,
    resolver: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> SetAdminResponse:
    svc = PermissionAdminService(session=session)
    try:
        is_admin = await svc.set_admin(
            user_id=user_id, is_admin=body.is_admin, actor=_actor(resolver)
        )
    except UnknownUserError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found") from e
    return SetAdminResponse(user_id=user_id, is_admin=is_admin)


@router.get("/users/{user_id}/permissions", response_model=PermissionGridResponse)
async def get_user_permissions(
    user_id: str,
    _: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> PermissionGridResponse:
    try:
        grid = await PermissionAdminService(session=session).user_permission_grid(user_id)
    except UnknownUserError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found") from e
    return PermissionGridResponse(user_id=grid.user_id, is_admin=grid.is_admin, allowed=grid.allowed)


@router.put("/users/{user_id}/permissions", response_model=SavePermissionsResponse)
async def save_user_permissions(
    user_id: str,
    body: SavePermissionsRequest,
    resolver: PermissionResolver = Depends(require_admin()),
    session: AsyncSession = Depends(db_session),
) -> SavePermissionsResponse:
    svc = PermissionAdminService(session=session)
    try:
        saved = await svc.save_permissions(
            user_id=user_id, changes=body.changes, actor=_actor(resolver)
        )
    except UnknownUserError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found") from e
    except UnknownFeatureError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return SavePermissionsResponse(saved=saved)


# --- Module Notes -----------------------------------------------------------
# Admins are never listed with a grid to edit in the dashboard UI, but the API still
# returns one; their stored rows are ignored by `has_permission` anyway.
