"""
painel_authz.db.repositories.permissions

Repository for `UserFeaturePermission` rows.

Responsibilities:
- Read a user's grants joined with their canonical feature codes.
- Upsert grants on (user_id, feature_id) for the admin permission editor.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from painel_authz.authz.models import PermissionRow
from painel_authz.db.models import Feature, UserFeaturePermission


class FeaturePermissionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_codes_for_user(self, user_id: str) -> list[PermissionRow]:
        # Outer join: a grant whose feature cannot be resolved still comes back, with code "".
        # Ordered so "first row wins" on duplicates is deterministic.
        stmt = (
            select(Feature.code, UserFeaturePermission.allowed)
            .select_from(UserFeaturePermission)
            .outerjoin(Feature, Feature.id == UserFeaturePermission.feature_id)
            .where(UserFeaturePermission.user_id == user_id)
            .order_by(UserFeaturePermission.created_at, UserFeaturePermission.id)
        )
        rows = (await self._session.execute(stmt)).all()
        return [
            PermissionRow(feature_code=code or "", allowed=bool(allowed)) for code, allowed in rows
        ]

    async def list_for_user(self, user_id: str) -> list[UserFeaturePermission]:
        stmt = select(UserFeaturePermission).where(UserFeaturePermission.user_id == user_id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def upsert(
        self, *, user_id: str, feature_id: uuid.UUID, allowed: bool
    ) -> UserFeaturePermission:
        stmt = select(UserFeaturePermission).where(
            UserFeaturePermission.user_id == user_id,
            UserFeaturePermission.feature_id == feature_id,
        )
        perm = (await self._session.execute(stmt)).scalar_one_or_none()
        if perm is None:
            perm = UserFeaturePermission(user_id=user_id, feature_id=feature_id, allowed=allowed)
            self._session.add(perm)
        else:
            perm.allowed = allowed
        await self._session.flush()
        return perm
