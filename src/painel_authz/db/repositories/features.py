"""
painel_authz.db.repositories.features

Repository for the feature catalogue (`Module` + `Feature`).
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from painel_authz.db.models import Feature, Module


class FeatureRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active_modules(self) -> list[Module]:
        stmt = select(Module).where(Module.active.is_(True)).order_by(Module.position, Module.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_active_features(self) -> list[Feature]:
        stmt = select(Feature).where(Feature.active.is_(True)).order_by(Feature.code)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get_many(self, feature_ids: list[uuid.UUID]) -> list[Feature]:
        if not feature_ids:
            return []
        stmt = select(Feature).where(Feature.id.in_(feature_ids))
        return list((await self._session.execute(stmt)).scalars().all())

    async def create_module(
        self, *, name: str, route: str, position: int | None = None
    ) -> Module:
        module = Module(name=name, route=route, position=position, active=True)
        self._session.add(module)
        await self._session.flush()
        return module

    async def create_feature(
        self,
        *,
        module_id: uuid.UUID,
        code: str,
        name: str,
        active: bool = True,
    ) -> Feature:
        feature = Feature(module_id=module_id, code=code, name=name, active=active)
        self._session.add(feature)
        await self._session.flush()
        return feature
