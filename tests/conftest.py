"""
tests.conftest

Shared fixtures and in-memory store fakes.

Responsibilities:
- Provide fake role/permission/membership stores for resolver tests.
- Boot the FastAPI app against a temporary SQLite database for API tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from painel_authz.api.app import create_app
from painel_authz.auth.jwt import JwtConfig, issue_token
from painel_authz.authz.models import MembershipRecord, PermissionRow
from painel_authz.db.init_db import init_db
from painel_authz.db.session import create_engine, create_sessionmaker
from painel_authz.settings import Settings


class FakeRoleStore:
    def __init__(self, roles: dict[str, list[str]] | None = None) -> None:
        self.roles = roles or {}
        self.calls: list[str] = []
        self.fail = False
        # Optional per-user gates to hold a fetch open.
        self.gates: dict[str, asyncio.Event] = {}

    async def roles_for(self, user_id: str) -> list[str]:
        self.calls.append(user_id)
        if user_id in self.gates:
            await self.gates[user_id].wait()
        if self.fail:
            raise RuntimeError("roles table unavailable")
        return list(self.roles.get(user_id, []))


class FakePermissionStore:
    def __init__(self, rows: dict[str, list[PermissionRow]] | None = None) -> None:
        self.rows = rows or {}
        self.calls: list[str] = []
        self.fail = False

    async def permissions_for(self, user_id: str) -> list[PermissionRow]:
        self.calls.append(user_id)
        if self.fail:
            raise RuntimeError("permissions table unavailable")
        return list(self.rows.get(user_id, []))


class FakeMembershipStore:
    def __init__(self, records: dict[str, MembershipRecord] | None = None) -> None:
        self.records = records or {}
        self.fail = False

    async def membership_for(self, user_id: str) -> MembershipRecord | None:
        if self.fail:
            raise RuntimeError("radar_members unavailable")
        return self.records.get(user_id)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'painel.db'}")


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_header(settings: Settings):
    def _header(user_id: str) -> dict[str, str]:
        token = issue_token(cfg=JwtConfig.from_settings(settings), subject=user_id)
        return {"Authorization": f"Bearer {token}"}

    return _header
