from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from painel_authz.db.models import Profile


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user_id(self, user_id: str) -> Profile | None:
        stmt = select(Profile).where(Profile.user_id == user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_approved(self) -> list[Profile]:
        stmt = select(Profile).where(Profile.approved.is_(True)).order_by(Profile.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_pending(self) -> list[Profile]:
        stmt = (
            select(Profile)
            .where(Profile.approved.is_(False))
            .order_by(Profile.created_at.desc())
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, profile: Profile) -> None:
        await self._session.delete(profile)
        await self._session.flush()

    async def create(
        self,
        *,
        user_id: str,
        name: str,
        email: str,
        approved: bool = False,
        department: str | None = None,
    ) -> Profile:
        profile = Profile(
            user_id=user_id,
            name=name,
            email=email,
            approved=approved,
            department=department,
        )
        self._session.add(profile)
        await self._session.flush()
        return profile
