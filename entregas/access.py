"""
Role Hierarchy.

Single source of truth for comparing roles.  Both the access guard and
the navigation menu go through :func:`has_access`.

Unknown labels rank as ``visitante`` so a typo in a page's required
role, or a corrupt role value, fails closed instead of raising.
"""

from __future__ import annotations

from typing import Final, Optional

from entregas.models.enums import Role

ROLE_HIERARCHY: Final[dict[str, int]] = {
    Role.VISITANTE: 0,
    Role.ENTREGADOR: 1,
    Role.GERENTE: 2,
    Role.ADMIN: 3,
}


def role_order(label: Optional[object]) -> int:
    """Return the rank of *label*, or ``0`` for anything unknown."""
    if not isinstance(label, str):
        return 0
    return ROLE_HIERARCHY.get(label, 0)


def coerce_role(label: Optional[object]) -> Role:
    """Map *label* onto :class:`Role`, defaulting to ``visitante``."""
    if isinstance(label, str) and label in ROLE_HIERARCHY:
        return Role(label)
    return Role.VISITANTE


def has_access(current: Optional[object], required: Optional[object]) -> bool:
    """``True`` when *current* ranks at or above *required*."""
    return role_order(current) >= role_order(required)
