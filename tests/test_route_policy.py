# =============================================================================
# tests/test_route_policy.py - Session redirects
# =============================================================================

import pytest

from entregas.models.enums import Role
from entregas.models.profile import ResolvedProfile
from entregas.models.user import UserSession
from entregas.services.route_policy import PROTECTED_ROUTES, resolve_redirect

USER = UserSession(id="user-1")


def _signed_in(role):
    return ResolvedProfile(user=USER, user_role=role, loading=False)


@pytest.mark.parametrize("path", sorted(PROTECTED_ROUTES))
def test_protected_without_session_goes_to_login(path):
    assert resolve_redirect(path, ResolvedProfile.visitor()) == "/login"


@pytest.mark.parametrize("path", ["/", "/vendaswoo", "/login"])
def test_public_without_session_stays(path):
    assert resolve_redirect(path, ResolvedProfile.visitor()) is None


def test_nothing_decided_while_loading():
    assert resolve_redirect("/admin", ResolvedProfile()) is None


def test_login_with_session_goes_to_default():
    assert resolve_redirect("/login", _signed_in(Role.VISITANTE)) == "/pedidos-pendentes"


def test_entregador_kept_out_of_all_orders():
    assert resolve_redirect("/todos-pedidos", _signed_in(Role.ENTREGADOR)) == "/pedidos-pendentes"


@pytest.mark.parametrize("role", [Role.GERENTE, Role.ADMIN])
def test_management_may_open_all_orders(role):
    assert resolve_redirect("/todos-pedidos", _signed_in(role)) is None


def test_custom_routes():
    result = resolve_redirect(
        "/login",
        _signed_in(Role.ADMIN),
        login_route="/login",
        default_route="/admin",
    )

    assert result == "/admin"
