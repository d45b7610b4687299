"""
tests.test_radar

Radar membership derivation on top of the admin flag.
"""

from __future__ import annotations

import pytest
from conftest import FakeMembershipStore

from painel_authz.auth.models import UserIdentity
from painel_authz.authz.models import MembershipRecord, RadarRole
from painel_authz.authz.radar import (
    UNRESOLVED_MEMBERSHIP,
    RadarMembershipResolver,
    fetch_membership,
    resolve_radar_membership,
)
from painel_authz.authz.resolver import CapabilitySet

ADMIN = CapabilitySet(user_id="a", roles=frozenset({"admin"}))
PLAIN = CapabilitySet(user_id="p", roles=frozenset({"user"}))


def test_admin_with_colaborador_record_is_owner_and_manager() -> None:
    radar = resolve_radar_membership(ADMIN, MembershipRecord(role="Colaborador", area="Vendas"))

    assert radar.is_owner is True
    assert radar.is_manager is True
    # Computed independently of the override.
    assert radar.is_colaborador is True
    assert radar.organizational_role is RadarRole.collaborator
    assert radar.area == "Vendas"
    assert radar.can_manage_objectives is True
    assert radar.can_manage_team is True


def test_gestor_is_manager_but_not_owner() -> None:
    radar = resolve_radar_membership(PLAIN, MembershipRecord(role="Gestor", area="CS"))

    assert radar.is_owner is False
    assert radar.is_manager is True
    assert radar.is_colaborador is False
    assert radar.can_manage_objectives is True
    assert radar.can_manage_team is True


def test_proprietario_is_owner_and_manager() -> None:
    radar = resolve_radar_membership(PLAIN, MembershipRecord(role="Proprietário", area=None))

    assert radar.is_owner is True
    assert radar.is_manager is True
    assert radar.organizational_role is RadarRole.owner
    assert radar.area is None


def test_colaborador_cannot_manage() -> None:
    radar = resolve_radar_membership(PLAIN, MembershipRecord(role="Colaborador", area="Ops"))

    assert radar.is_owner is False
    assert radar.is_manager is False
    assert radar.is_colaborador is True
    assert radar.can_manage_objectives is False
    assert radar.can_manage_team is False


def test_unknown_stored_role_grants_nothing() -> None:
    radar = resolve_radar_membership(PLAIN, MembershipRecord(role="Estagiário", area="Ops"))

    assert radar.organizational_role is None
    assert radar.area == "Ops"
    assert not (radar.is_owner or radar.is_manager or radar.is_colaborador)


@pytest.mark.parametrize("caps", [ADMIN, PLAIN])
def test_absent_record_is_unresolved_even_for_admin(caps: CapabilitySet) -> None:
    radar = resolve_radar_membership(caps, None)

    assert radar == UNRESOLVED_MEMBERSHIP
    assert radar.organizational_role is None
    assert radar.area is None
    assert radar.is_owner is False
    assert radar.is_manager is False


def test_pending_load_is_unresolved() -> None:
    record = MembershipRecord(role="Proprietário", area="Diretoria")

    loading_caps = CapabilitySet(user_id="a", roles=frozenset({"admin"}), loading=True)
    assert resolve_radar_membership(loading_caps, record).is_owner is False
    assert resolve_radar_membership(loading_caps, record).loading is True

    pending = resolve_radar_membership(ADMIN, record, loading=True)
    assert pending.is_owner is False
    assert pending.area is None


def test_resolver_memoizes_on_equal_inputs() -> None:
    resolver = RadarMembershipResolver()
    record = MembershipRecord(role="Gestor", area="CS")

    first = resolver.resolve(PLAIN, record)
    # Equal by value, different objects.
    again = resolver.resolve(
        CapabilitySet(user_id="p", roles=frozenset({"user"})),
        MembershipRecord(role="Gestor", area="CS"),
    )
    assert again is first

    promoted = resolver.resolve(
        CapabilitySet(user_id="p", roles=frozenset({"user", "admin"})), record
    )
    assert promoted is not first
    assert promoted.is_owner is True


@pytest.mark.asyncio
async def test_fetch_membership_degrades_to_none() -> None:
    store = FakeMembershipStore({"u": MembershipRecord(role="Gestor", area="CS")})
    identity = UserIdentity(user_id="u")

    assert await fetch_membership(store, identity) == MembershipRecord(role="Gestor", area="CS")
    assert await fetch_membership(store, None) is None

    store.fail = True
    assert await fetch_membership(store, identity) is None
