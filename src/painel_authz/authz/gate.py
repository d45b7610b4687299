"""
painel_authz.authz.gate

Permission gate: one decision for "may this block be shown / this action run".
"""

from __future__ import annotations

from collections.abc import Sequence

from painel_authz.authz.resolver import CapabilitySet


def gate_allows(
    capabilities: CapabilitySet,
    *,
    permission: str | None = None,
    permissions: Sequence[str] = (),
    require_all: bool = False,
    require_admin: bool = False,
) -> bool:
    """
    Evaluate a gate in order: loading denies, then the admin requirement, then
    the feature codes (any-of by default, all-of with `require_all`). A gate
    with no codes only checks the first two steps.
    """

    if capabilities.loading:
        return False
    if require_admin and not capabilities.is_admin:
        return False

    codes = [permission, *permissions] if permission else list(permissions)
    if not codes:
        return True

    check = all if require_all else any
    return check(capabilities.has_permission(code) for code in codes)
