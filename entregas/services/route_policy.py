"""
Route Policy.

Session-level redirects applied before a page is shown: unauthenticated
users are sent to the login page, signed-in users skip it, and couriers
are kept out of the all-orders page.  Role thresholds per page are the
``AccessGuard``'s job, not this module's.
"""

from __future__ import annotations

from typing import Final, Optional

from entregas.models.enums import Role
from entregas.models.profile import ResolvedProfile

PROTECTED_ROUTES: Final[frozenset[str]] = frozenset({
    "/pedidos-pendentes",
    "/pedidos-aceitos",
    "/pedidos-entregues",
    "/todos-pedidos",
    "/admin",
    "/gestao-entregadores",
})

ALL_ORDERS_ROUTE: Final[str] = "/todos-pedidos"


def resolve_redirect(
    path: str,
    profile: ResolvedProfile,
    *,
    login_route: str = "/login",
    default_route: str = "/pedidos-pendentes",
) -> Optional[str]:
    """Return where *path* should redirect to for *profile*, or ``None``.

    Nothing is decided while the profile is loading; the page's guard
    shows its placeholder meanwhile.
    """
    if profile.loading:
        return None

    if not profile.is_authenticated:
        return login_route if path in PROTECTED_ROUTES else None

    if path == login_route:
        return default_route

    if path == ALL_ORDERS_ROUTE and profile.user_role == Role.ENTREGADOR:
        return default_route

    return None
