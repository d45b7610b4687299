"""
painel_authz.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`UserIdentity`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """
    Opaque, stable identifier of the signed-in principal.

    Roles and feature grants are not carried here; they are resolved from the
    role and permission stores on every load.
    """

    user_id: str
