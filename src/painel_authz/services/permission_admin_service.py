"""
painel_authz.services.permission_admin_service

Administration of per-user feature permissions.

Responsibilities:
- List the active feature catalogue grouped by module.
- List approved users together with their admin flag.
- Produce a user's permission grid (every active feature, default deny).
- Save a batch of pending changes as upserts on (user_id, feature_id).
- Approve or reject pending sign-ups and grant or revoke the admin role.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from painel_authz.authz.models import AppRole
from painel_authz.db.models import Feature, Module, Profile
from painel_authz.db.repositories.features import FeatureRepo
from painel_authz.db.repositories.permissions import FeaturePermissionRepo
from painel_authz.db.repositories.profiles import ProfileRepo
from painel_authz.db.repositories.roles import UserRoleRepo
from painel_authz.observability.logging import get_logger

log = get_logger(__name__)


class UnknownUserError(LookupError):
    pass


class UnknownFeatureError(ValueError):
    def __init__(self, feature_ids: list[uuid.UUID]) -> None:
        super().__init__(f"unknown feature ids: {', '.join(str(f) for f in feature_ids)}")
        self.feature_ids = feature_ids


@dataclass(slots=True)
class ModuleFeatures:
    module: Module
    features: list[Feature] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UserSummary:
    profile: Profile
    is_admin: bool


@dataclass(frozen=True, slots=True)
class PermissionGrid:
    user_id: str
    is_admin: bool
    # Every active feature id -> saved decision (False when no row exists).
    allowed: dict[uuid.UUID, bool]


class PermissionAdminService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._features = FeatureRepo(session)
        self._permissions = FeaturePermissionRepo(session)
        self._profiles = ProfileRepo(session)
        self._roles = UserRoleRepo(session)

    async def list_modules(self) -> list[ModuleFeatures]:
        modules = await self._features.list_active_modules()
        grouped = {m.id: ModuleFeatures(module=m) for m in modules}
        for feature in await self._features.list_active_features():
            entry = grouped.get(feature.module_id)
            # Features of an inactive module are not editable.
            if entry is not None:
                entry.features.append(feature)
        return list(grouped.values())

    async def list_users(self) -> list[UserSummary]:
        admins = await self._roles.admin_user_ids()
        return [
            UserSummary(profile=p, is_admin=p.user_id in admins)
            for p in await self._profiles.list_approved()
        ]

    async def user_permission_grid(self, user_id: str) -> PermissionGrid:
        if await self._profiles.get_by_user_id(user_id) is None:
            raise UnknownUserError(user_id)

        rows = await self._permissions.list_for_user(user_id)
        saved = {p.feature_id: bool(p.allowed) for p in rows}
        features = await self._features.list_active_features()
        return PermissionGrid(
            user_id=user_id,
            is_admin=await self._roles.is_admin(user_id),
            allowed={f.id: saved.get(f.id, False) for f in features},
        )

    async def save_permissions(
        self, *, user_id: str, changes: dict[uuid.UUID, bool], actor: str
    ) -> int:
        if not changes:
            return 0
        if await self._profiles.get_by_user_id(user_id) is None:
            raise UnknownUserError(user_id)

        known = {f.id for f in await self._features.get_many(list(changes))}
        missing = [fid for fid in changes if fid not in known]
        if missing:
            raise UnknownFeatureError(missing)

        for feature_id, allowed in changes.items():
            await self._permissions.upsert(user_id=user_id, feature_id=feature_id, allowed=allowed)
        await self._session.commit()

        log.info("permissions_saved", user_id=user_id, actor=actor, changed=len(changes))
        return len(changes)


    async def list_pending_users(self) -> list[Profile]:
        return await self._profiles.list_pending()

    async def approve_user(self, *, user_id: str, actor: str) -> Profile:
        profile = await self._require_profile(user_id)
        if not profile.approved:
            profile.approved = True
            await self._session.commit()
            log.info("user_approved", user_id=user_id, actor=actor)
        return profile

    async def reject_user(self, *, user_id: str, actor: str) -> None:
        profile = await self._require_profile(user_id)
        removed_roles = await self._roles.remove_all_for_user(user_id)
        await self._profiles.delete(profile)
        await self._session.commit()
        log.info("user_rejected", user_id=user_id, actor=actor, removed_roles=removed_roles)

    async def set_admin(self, *, user_id: str, is_admin: bool, actor: str) -> bool:
        await self._require_profile(user_id)
        currently = await self._roles.is_admin(user_id)
        if is_admin == currently:
            return currently

        if is_admin:
            await self._roles.add(user_id=user_id, role=AppRole.admin)
        else:
            await self._roles.remove(user_id=user_id, role=AppRole.admin)
        await self._session.commit()

        log.info("admin_role_changed", user_id=user_id, actor=actor, is_admin=is_admin)
        return is_admin

    async def _require_profile(self, user_id: str) -> Profile:
        profile = await self._profiles.get_by_user_id(user_id)
        if profile is None:
            raise UnknownUserError(user_id)
        return profile


# --- Module Notes -----------------------------------------------------------
# Saved grants take effect on the target user's next capability load; there is no
# push invalidation of resolvers that already loaded. Rejecting a user removes the profile
# and its role rows; stored feature grants are left in place.
