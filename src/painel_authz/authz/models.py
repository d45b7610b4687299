"""
painel_authz.authz.models

Value types shared by the authorization core, the stores and the API layer.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class AppRole(enum.StrEnum):
    # Closed set of global roles; stored in `user_roles.role`.
    admin = "admin"
    user = "user"


class RadarRole(enum.StrEnum):
    # Organizational role inside the radar (team/OKR) subsystem.
    owner = "Proprietário"
    manager = "Gestor"
    collaborator = "Colaborador"


@dataclass(frozen=True, slots=True)
class PermissionRow:
    """
    One feature grant as read from the store.

    `feature_code` is `""` when the feature join did not resolve.
    """

    feature_code: str
    allowed: bool


@dataclass(frozen=True, slots=True)
class MembershipRecord:
    # Raw stored radar role; compared as a string so unknown values degrade to "no role".
    role: str | None
    area: str | None
