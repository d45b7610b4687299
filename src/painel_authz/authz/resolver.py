"""
painel_authz.authz.resolver

Permission resolution: global roles + per-feature grants for one user.

Responsibilities:
- Derive an immutable `CapabilitySet` from explicit inputs (`resolve_capabilities`).
- Load those inputs from the role and feature-permission stores concurrently,
  degrading each dataset to empty on failure (`PermissionResolver`).
- Answer `has_role` / `has_permission` with admin override and default deny.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from painel_authz.auth.models import UserIdentity
from painel_authz.authz.models import AppRole, PermissionRow
from painel_authz.authz.stores import FeaturePermissionStore, RoleStore
from painel_authz.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CapabilitySet:
    """
    Resolved role and permission facts for one user.

    Snapshots are republished, never mutated. `permissions` is a read-only view
    and is left out of the hash.
    """

    user_id: str | None = None
    roles: frozenset[str] = frozenset()
    permissions: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    loading: bool = False

    @property
    def is_admin(self) -> bool:
        return AppRole.admin in self.roles

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def has_permission(self, code: str) -> bool:
        # Admin bypasses every per-feature check.
        if self.is_admin:
            return True
        return self.permissions.get(code, False)


EMPTY_CAPABILITIES = CapabilitySet()


def resolve_capabilities(
    identity: UserIdentity | None,
    role_rows: Iterable[str],
    permission_rows: Iterable[PermissionRow],
) -> CapabilitySet:
    if identity is None:
        return EMPTY_CAPABILITIES

    permissions: dict[str, bool] = {}
    for row in permission_rows:
        # First row wins; stores return rows in a stable order.
        permissions.setdefault(row.feature_code, row.allowed)

    return CapabilitySet(
        user_id=identity.user_id,
        roles=frozenset(str(r) for r in role_rows),
        permissions=MappingProxyType(permissions),
    )


class PermissionResolver:
    def __init__(self, *, roles: RoleStore, permissions: FeaturePermissionStore) -> None:
        self._roles = roles
        self._permissions = permissions

        self._identity: UserIdentity | None = None
        self._generation = 0
        # Nothing has been loaded yet, so consumers must wait.
        self._snapshot = CapabilitySet(loading=True)

    @property
    def identity(self) -> UserIdentity | None:
        return self._identity

    @property
    def capabilities(self) -> CapabilitySet:
        return self._snapshot

    @property
    def is_admin(self) -> bool:
        return self._snapshot.is_admin

    @property
    def loading(self) -> bool:
        return self._snapshot.loading

    def has_role(self, role: str) -> bool:
        return self._snapshot.has_role(role)

    def has_permission(self, code: str) -> bool:
        return self._snapshot.has_permission(code)

    async def load(self, identity: UserIdentity | None) -> CapabilitySet:
        self._generation += 1
        generation = self._generation
        self._identity = identity

        if identity is None:
            self._snapshot = EMPTY_CAPABILITIES
            return self._snapshot

        if self._snapshot.user_id == identity.user_id:
            self._snapshot = replace(self._snapshot, loading=True)
        else:
            # Never answer for a new user from the previous user's facts.
            self._snapshot = CapabilitySet(user_id=identity.user_id, loading=True)

        try:
            role_rows, permission_rows = await asyncio.gather(
                self._fetch_roles(identity.user_id),
                self._fetch_permissions(identity.user_id),
            )
        except asyncio.CancelledError:
            # Only the current load may clear the loading flag.
            if generation == self._generation:
                self._snapshot = replace(self._snapshot, loading=False)
            log.info("load_cancelled", user_id=identity.user_id, generation=generation)
            raise

        if generation != self._generation:
            log.info(
                "stale_load_discarded",
                user_id=identity.user_id,
                generation=generation,
                current_generation=self._generation,
            )
            return self._snapshot

        self._snapshot = resolve_capabilities(identity, role_rows, permission_rows)
        log.debug(
            "capabilities_loaded",
            user_id=identity.user_id,
            is_admin=self._snapshot.is_admin,
            permission_count=len(self._snapshot.permissions),
        )
        return self._snapshot

    async def refetch(self) -> CapabilitySet:
        return await self.load(self._identity)

    async def _fetch_roles(self, user_id: str) -> list[str]:
        try:
            return list(await self._roles.roles_for(user_id))
        except Exception:
            log.exception("roles_fetch_failed", user_id=user_id)
            return []

    async def _fetch_permissions(self, user_id: str) -> list[PermissionRow]:
        try:
            return list(await self._permissions.permissions_for(user_id))
        except Exception:
            log.exception("permissions_fetch_failed", user_id=user_id)
            return []


# --- Module Notes -----------------------------------------------------------
# Each fetch owns its failure path: a broken permission table still lets an admin
# through via the role fetch, and vice versa. There is no retry; call `refetch()`.
