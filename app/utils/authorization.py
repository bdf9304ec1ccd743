"""Verificação de permissões (RBAC).

Role-based authorization helpers shared by the request layer and the
view-data builders.

A permission set is a collection of (resource, action) pairs. The
"manage" action on a resource grants every action on that resource.

Usage:
    guard = PermissionGuard({("roles", "read"), ("courses", "manage")})
    guard.allows("courses", "delete")                   # True
    guard.render("roles", "update", "edit", fallback=None)  # None
"""

from collections.abc import Iterable
from typing import TypeVar

# Ação que concede todas as outras ações do mesmo recurso
MANAGE_ACTION: str = "manage"

# Papel com acesso irrestrito (Role allowed every action)
SUPER_ADMIN_ROLE: str = "super_admin"

T = TypeVar("T")
F = TypeVar("F")

PermissionPair = tuple[str, str]


def permission_name(resource: str, action: str) -> str:
    """Nome derivado "action:resource" (e.g. "create:courses")."""
    return f"{action}:{resource}"


def has_permission(granted: Iterable[PermissionPair], resource: str, action: str) -> bool:
    """Predicado puro: o conjunto concede (resource, action)?

    Args:
        granted: Pares (resource, action) concedidos ao usuário
        resource: Recurso alvo (e.g. "roles")
        action: Ação desejada (e.g. "update")

    Returns:
        bool: True quando o par exato ou (resource, "manage") está no conjunto
    """
    pairs = granted if isinstance(granted, (set, frozenset)) else set(granted)
    return (resource, action) in pairs or (resource, MANAGE_ACTION) in pairs


class PermissionGuard:
    """Portão de permissão sobre o conjunto de um usuário.

    Wraps a user's permission set and decides which regions of a view
    are available. It does not protect any mutation by itself; endpoints
    enforce the same predicate through require_permission.

    An unrestricted guard (super_admin) allows every (resource, action),
    including pairs missing from the catalog. as_map still lists only
    the granted pairs.
    """

    def __init__(self, granted: Iterable[PermissionPair], unrestricted: bool = False) -> None:
        self._granted: frozenset[PermissionPair] = frozenset(granted)
        self._unrestricted: bool = unrestricted

    @property
    def granted(self) -> frozenset[PermissionPair]:
        return self._granted

    @property
    def unrestricted(self) -> bool:
        return self._unrestricted

    def allows(self, resource: str, action: str) -> bool:
        return self._unrestricted or has_permission(self._granted, resource, action)

    def render(self, resource: str, action: str, children: T, fallback: F | None = None) -> T | F | None:
        """Retorna children quando permitido, senão fallback (ou None)."""
        if self.allows(resource, action):
            return children
        return fallback

    def as_map(self) -> dict[str, bool]:
        """Mapa {"action:resource": True} consumido pelos clientes."""
        return {permission_name(resource, action): True for resource, action in sorted(self._granted)}

    def __repr__(self) -> str:
        if self._unrestricted:
            return "PermissionGuard(unrestricted)"
        return f"PermissionGuard({len(self._granted)} permissions)"


def guard_from_names(names: Iterable[str]) -> PermissionGuard:
    """Monta um guard a partir de nomes "action:resource"."""
    pairs: list[PermissionPair] = []
    for name in names:
        action, _, resource = name.partition(":")
        if not resource:
            raise ValueError(f"Invalid permission name: {name!r}")
        pairs.append((resource, action))
    return PermissionGuard(pairs)
