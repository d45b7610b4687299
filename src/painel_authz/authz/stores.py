"""
painel_authz.authz.stores

Store boundaries consumed by the resolvers.

Responsibilities:
- Define the minimal async interfaces the resolvers depend on.
- Provide SQLAlchemy-backed implementations that open one session per call, so
  independent fetches can run concurrently.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from painel_authz.authz.models import MembershipRecord, PermissionRow
from painel_authz.db.repositories.permissions import FeaturePermissionRepo
from painel_authz.db.repositories.radar_members import RadarMemberRepo
from painel_authz.db.repositories.roles import UserRoleRepo


class RoleStore(Protocol):
    async def roles_for(self, user_id: str) -> list[str]: ...


class FeaturePermissionStore(Protocol):
    async def permissions_for(self, user_id: str) -> list[PermissionRow]: ...


class MembershipStore(Protocol):
    async def membership_for(self, user_id: str) -> MembershipRecord | None: ...


class SqlRoleStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def roles_for(self, user_id: str) -> list[str]:
        async with self._session_factory() as session:
            return await UserRoleRepo(session).list_for_user(user_id)


class SqlFeaturePermissionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def permissions_for(self, user_id: str) -> list[PermissionRow]:
        async with self._session_factory() as session:
            return await FeaturePermissionRepo(session).list_codes_for_user(user_id)


class SqlMembershipStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def membership_for(self, user_id: str) -> MembershipRecord | None:
        async with self._session_factory() as session:
            member = await RadarMemberRepo(session).get_active_for_user(user_id)
        if member is None:
            return None
        return MembershipRecord(role=member.radar_role, area=member.area)


# --- Module Notes -----------------------------------------------------------
# Tests substitute in-memory fakes for these protocols; the resolvers never see a
# session directly.
