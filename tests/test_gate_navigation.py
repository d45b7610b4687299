"""
tests.test_gate_navigation

Permission gate decisions and sidebar visibility filtering.
"""

from __future__ import annotations

from painel_authz.authz.gate import gate_allows
from painel_authz.authz.navigation import (
    DEFAULT_NAVIGATION,
    NavItem,
    NavSection,
    can_view_item,
    visible_navigation,
)
from painel_authz.authz.radar import RadarMembership
from painel_authz.authz.resolver import CapabilitySet

ADMIN = CapabilitySet(user_id="a", roles=frozenset({"admin"}))
LOADING = CapabilitySet(user_id="a", roles=frozenset({"admin"}), loading=True)
SELLER = CapabilitySet(
    user_id="s",
    roles=frozenset({"user"}),
    permissions={"comissoes.visualizar": True, "comissoes.criar": False},
)
NO_RADAR = RadarMembership()
MANAGER = RadarMembership(is_manager=True)


def test_gate_denies_while_loading() -> None:
    assert gate_allows(LOADING) is False
    assert gate_allows(LOADING, permission="comissoes.visualizar") is False


def test_gate_require_admin() -> None:
    assert gate_allows(SELLER, require_admin=True) is False
    assert gate_allows(ADMIN, require_admin=True) is True
    assert gate_allows(SELLER, permission="comissoes.visualizar", require_admin=True) is False


def test_gate_without_codes_allows() -> None:
    assert gate_allows(SELLER) is True


def test_gate_any_versus_all() -> None:
    codes = ["comissoes.criar", "comissoes.visualizar"]
    assert gate_allows(SELLER, permissions=codes) is True
    assert gate_allows(SELLER, permissions=codes, require_all=True) is False
    assert gate_allows(SELLER, permission="comissoes.criar", permissions=["extrato.visualizar"]) is False
    assert gate_allows(ADMIN, permissions=codes, require_all=True) is True


def test_item_radar_requirement() -> None:
    item = NavItem("Gestão de OKRs", "/gestao", require_radar="manage_objectives")
    assert can_view_item(item, SELLER, NO_RADAR) is False
    assert can_view_item(item, SELLER, MANAGER) is True


def test_navigation_hidden_while_loading() -> None:
    assert visible_navigation(DEFAULT_NAVIGATION, LOADING, NO_RADAR) == []
    assert visible_navigation(DEFAULT_NAVIGATION, ADMIN, RadarMembership(loading=True)) == []


def test_admin_sees_everything() -> None:
    assert visible_navigation(DEFAULT_NAVIGATION, ADMIN, NO_RADAR) == list(DEFAULT_NAVIGATION)


def test_seller_sees_only_granted_items() -> None:
    sections = {s.title: s for s in visible_navigation(DEFAULT_NAVIGATION, SELLER, NO_RADAR)}

    assert set(sections) == {"Radar OKR", "Métricas & Financeiro", "Comissões"}
    assert [i.href for i in sections["Métricas & Financeiro"].items] == ["/comissoes/simulador"]
    assert [i.href for i in sections["Comissões"].items] == [
        "/comissoes/historico",
        "/comissoes/relatorio-vendas",
    ]


def test_manager_sees_radar_management() -> None:
    sections = {s.title: s for s in visible_navigation(DEFAULT_NAVIGATION, SELLER, MANAGER)}
    assert [i.href for i in sections["Radar OKR"].items] == [
        "/meu-radar",
        "/area",
        "/lancamentos",
        "/gestao",
        "/equipe",
        "/apresentacao",
    ]


def test_admin_only_section_hidden_for_users() -> None:
    section = NavSection(
        title="Administração",
        require_admin=True,
        items=(NavItem("Aberto", "/aberto"),),
    )
    assert visible_navigation((section,), SELLER, NO_RADAR) == []


def test_user_without_grants_still_sees_open_radar_items() -> None:
    plain = CapabilitySet(user_id="p", roles=frozenset({"user"}))
    sections = visible_navigation(DEFAULT_NAVIGATION, plain, NO_RADAR)

    assert [s.title for s in sections] == ["Radar OKR"]
    assert [i.href for i in sections[0].items] == [
        "/meu-radar",
        "/area",
        "/lancamentos",
        "/apresentacao",
    ]
