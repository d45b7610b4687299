"""
painel_authz.db.repositories.radar_members

Repository for `RadarMember` entities (team membership in the radar).
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from painel_authz.db.models import RadarMember


class RadarMemberRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active_for_user(self, user_id: str) -> RadarMember | None:
        # At most one active membership per user is expected; take the oldest if not.
        stmt = (
            select(RadarMember)
            .where(RadarMember.user_id == user_id, RadarMember.active.is_(True))
            .order_by(RadarMember.created_at, RadarMember.id)
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        name: str,
        radar_role: str,
        user_id: str | None = None,
        area: str | None = None,
        email: str | None = None,
        active: bool = True,
    ) -> RadarMember:
        member = RadarMember(
            user_id=user_id,
            name=name,
            email=email,
            area=area,
            radar_role=radar_role,
            active=active,
        )
        self._session.add(member)
        await self._session.flush()
        return member
