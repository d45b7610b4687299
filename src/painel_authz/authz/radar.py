"""
painel_authz.authz.radar

Radar (team/OKR) membership view for the current user.

Responsibilities:
- Fold the global admin flag and the user's membership record into owner /
  manager / collaborator flags plus the member's area.
- Memoize the derivation against the last-seen inputs.
"""

from __future__ import annotations

from dataclasses import dataclass

from painel_authz.auth.models import UserIdentity
from painel_authz.authz.models import MembershipRecord, RadarRole
from painel_authz.authz.resolver import CapabilitySet
from painel_authz.authz.stores import MembershipStore
from painel_authz.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RadarMembership:
    """
    Derived radar flags.

    `is_colaborador` is computed on its own and can be true together with
    `is_owner` (an admin whose membership row says "Colaborador").
    """

    organizational_role: RadarRole | None = None
    area: str | None = None
    is_owner: bool = False
    is_manager: bool = False
    is_colaborador: bool = False
    loading: bool = False

    @property
    def can_manage_objectives(self) -> bool:
        return self.is_owner or self.is_manager

    @property
    def can_manage_team(self) -> bool:
        return self.is_owner or self.is_manager


UNRESOLVED_MEMBERSHIP = RadarMembership()


def _parse_role(raw: str | None) -> RadarRole | None:
    try:
        return RadarRole(raw) if raw is not None else None
    except ValueError:
        return None


def resolve_radar_membership(
    capabilities: CapabilitySet,
    record: MembershipRecord | None,
    *,
    loading: bool = False,
) -> RadarMembership:
    pending = loading or capabilities.loading
    if pending or record is None:
        return RadarMembership(loading=pending)

    role = record.role
    is_owner = capabilities.is_admin or role == RadarRole.owner
    is_manager = is_owner or role == RadarRole.manager
    return RadarMembership(
        organizational_role=_parse_role(role),
        area=record.area,
        is_owner=is_owner,
        is_manager=is_manager,
        is_colaborador=role == RadarRole.collaborator,
    )


class RadarMembershipResolver:
    def __init__(self) -> None:
        self._last_inputs: tuple[CapabilitySet, MembershipRecord | None, bool] | None = None
        self._last_result: RadarMembership = UNRESOLVED_MEMBERSHIP

    def resolve(
        self,
        capabilities: CapabilitySet,
        record: MembershipRecord | None,
        *,
        loading: bool = False,
    ) -> RadarMembership:
        inputs = (capabilities, record, loading)
        # Compared by value: a fresh but equal snapshot reuses the previous result.
        if self._last_inputs is not None and self._last_inputs == inputs:
            return self._last_result
        self._last_result = resolve_radar_membership(capabilities, record, loading=loading)
        self._last_inputs = inputs
        return self._last_result

    @property
    def last_result(self) -> RadarMembership:
        return self._last_result


async def fetch_membership(
    store: MembershipStore, identity: UserIdentity | None
) -> MembershipRecord | None:
    if identity is None:
        return None
    try:
        return await store.membership_for(identity.user_id)
    except Exception:
        # No membership is the fail-closed answer: every radar flag stays false.
        log.exception("membership_fetch_failed", user_id=identity.user_id)
        return None
