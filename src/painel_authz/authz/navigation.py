"""
painel_authz.authz.navigation

Navigation visibility for the dashboard sidebar.

Responsibilities:
- Describe navigation sections/items and their access requirements.
- Filter them against a capability set and a radar membership.
- Ship the default dashboard catalogue.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from painel_authz.authz.radar import RadarMembership
from painel_authz.authz.resolver import CapabilitySet

RadarRequirement = Literal["manage_objectives", "manage_team"]


@dataclass(frozen=True, slots=True)
class NavItem:
    title: str
    href: str
    permission: str | None = None
    require_admin: bool = False
    require_radar: RadarRequirement | None = None


@dataclass(frozen=True, slots=True)
class NavSection:
    title: str
    items: tuple[NavItem, ...]
    require_admin: bool = False


def _pending(capabilities: CapabilitySet, radar: RadarMembership) -> bool:
    return capabilities.loading or radar.loading


def can_view_item(
    item: NavItem, capabilities: CapabilitySet, radar: RadarMembership
) -> bool:
    if _pending(capabilities, radar):
        return False
    if capabilities.is_admin:
        return True
    if item.require_admin:
        return False
    if item.permission and not capabilities.has_permission(item.permission):
        return False
    if item.require_radar == "manage_objectives" and not radar.can_manage_objectives:
        return False
    if item.require_radar == "manage_team" and not radar.can_manage_team:
        return False
    return True


def can_view_section(
    section: NavSection, capabilities: CapabilitySet, radar: RadarMembership
) -> bool:
    if _pending(capabilities, radar):
        return False
    if capabilities.is_admin:
        return True
    if section.require_admin:
        return False
    return any(can_view_item(item, capabilities, radar) for item in section.items)


def visible_navigation(
    sections: tuple[NavSection, ...],
    capabilities: CapabilitySet,
    radar: RadarMembership,
) -> list[NavSection]:
    visible: list[NavSection] = []
    for section in sections:
        if not can_view_section(section, capabilities, radar):
            continue
        items = tuple(i for i in section.items if can_view_item(i, capabilities, radar))
        visible.append(replace(section, items=items))
    return visible


DEFAULT_NAVIGATION: tuple[NavSection, ...] = (
    NavSection(
        title="Radar OKR",
        items=(
            NavItem("Dashboard", "/dashboard-okr", permission="levantamento.visualizar"),
            NavItem("Meu Radar", "/meu-radar"),
            NavItem("Por Área", "/area"),
            NavItem("Lançar Dados", "/lancamentos"),
            NavItem("Gestão de OKRs", "/gestao", require_radar="manage_objectives"),
            NavItem("Equipe", "/equipe", require_radar="manage_team"),
            NavItem("Apresentação", "/apresentacao"),
        ),
    ),
    NavSection(
        title="Métricas & Financeiro",
        items=(
            NavItem("Assinaturas & MRR", "/assinaturas", permission="extrato.visualizar"),
            NavItem("Cancelamentos", "/cancelamentos", permission="extrato.visualizar"),
            NavItem("Extrato Asaas", "/extrato-asaas", permission="extrato.visualizar"),
            NavItem("Extrato Eduzz", "/extrato-eduzz", permission="extrato.visualizar"),
            NavItem("Simulador Meta", "/comissoes/simulador", permission="comissoes.visualizar"),
        ),
    ),
    NavSection(
        title="Comissões",
        items=(
            NavItem("Novo Fechamento", "/comissoes", permission="comissoes.criar"),
            NavItem("Histórico", "/comissoes/historico", permission="comissoes.visualizar"),
            NavItem(
                "Relatório Vendas",
                "/comissoes/relatorio-vendas",
                permission="comissoes.visualizar",
            ),
            NavItem(
                "Configurações", "/comissoes/configuracoes", permission="comissoes.configurar"
            ),
        ),
    ),
    NavSection(
        title="Gestão de Pessoas",
        items=(
            NavItem("Colaboradores", "/equipe/colaboradores", permission="equipe.gerenciar"),
            NavItem("Vendas Serviços", "/equipe/vendas-servicos", permission="equipe.vendas"),
            NavItem("Metas Individuais", "/equipe/metas", permission="equipe.metas"),
            NavItem("Fechamento Equipe", "/equipe/fechamento", permission="equipe.fechamento"),
            NavItem(
                "Levantamento 10K", "/levantamento-10k", permission="levantamento.visualizar"
            ),
            NavItem("Resultados 10K", "/admin/levantamento-resultados", require_admin=True),
        ),
    ),
    NavSection(
        title="Administração",
        require_admin=True,
        items=(
            NavItem("Gerenciar Usuários", "/admin/usuarios", require_admin=True),
            NavItem("Permissões", "/admin/permissoes", require_admin=True),
        ),
    ),
)
