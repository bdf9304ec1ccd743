"""Selos de exibição de papéis.

Display badges for roles. Each mapping is total over its enum and is
checked when the module is imported, so adding a RoleScope member
without a badge fails at startup instead of rendering a blank badge.
"""

from enum import Enum
from typing import Mapping, TypeVar

from app.models.user import RoleScope
from app.schemas.role import Badge

K = TypeVar("K")


def _require_total(mapping: Mapping[K, Badge], members: list[K], name: str) -> Mapping[K, Badge]:
    missing = [m.value if isinstance(m, Enum) else m for m in members if m not in mapping]
    if missing:
        raise RuntimeError(f"{name} has no badge for: {missing}")
    return mapping


SCOPE_BADGES: Mapping[RoleScope, Badge] = _require_total(
    {
        RoleScope.GLOBAL: Badge(label="Global", color="indigo"),
        RoleScope.INSTITUTION: Badge(label="Instituição", color="blue"),
        RoleScope.POLO: Badge(label="Polo", color="purple"),
    },
    list(RoleScope),
    "SCOPE_BADGES",
)

# is_system → selo (System flag → badge)
KIND_BADGES: Mapping[bool, Badge] = _require_total(
    {
        True: Badge(label="Sistema", color="yellow"),
        False: Badge(label="Customizado", color="gray"),
    },
    [True, False],
    "KIND_BADGES",
)


def scope_badge(scope: RoleScope | str) -> Badge:
    """Selo da abrangência; ValueError para valores fora do enum."""
    return SCOPE_BADGES[RoleScope(scope)]


def kind_badge(is_system: bool) -> Badge:
    """Selo "Sistema" ou "Customizado"."""
    return KIND_BADGES[bool(is_system)]
