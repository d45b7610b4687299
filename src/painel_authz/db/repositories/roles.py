"""
painel_authz.db.repositories.roles

Repository for `UserRole` assignments.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from painel_authz.authz.models import AppRole
from painel_authz.db.models import UserRole


class UserRoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: str) -> list[str]:
        stmt = select(UserRole.role).where(UserRole.user_id == user_id)
        return [str(r) for r in (await self._session.execute(stmt)).scalars().all()]

    async def is_admin(self, user_id: str) -> bool:
        stmt = (
            select(UserRole.id)
            .where(UserRole.user_id == user_id, UserRole.role == AppRole.admin)
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def add(self, *, user_id: str, role: AppRole) -> UserRole:
        ur = UserRole(user_id=user_id, role=role)
        self._session.add(ur)
        await self._session.flush()
        return ur

    async def remove(self, *, user_id: str, role: AppRole) -> int:
        stmt = delete(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        return (await self._session.execute(stmt)).rowcount or 0

    async def remove_all_for_user(self, user_id: str) -> int:
        stmt = delete(UserRole).where(UserRole.user_id == user_id)
        return (await self._session.execute(stmt)).rowcount or 0

    async def admin_user_ids(self) -> set[str]:
        stmt = select(UserRole.user_id).where(UserRole.role == AppRole.admin)
        return set((await self._session.execute(stmt)).scalars().all())
