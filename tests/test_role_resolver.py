# =============================================================================
# tests/test_role_resolver.py - Role resolution
# =============================================================================

import pytest

from entregas.models.enums import (
    AuthEvent,
    ResolutionErrorCode,
    ResolverState,
    Role,
)
from entregas.models.membership import StoreMembership
from entregas.models.profile import ProfileUpdate
from entregas.models.user import UserSession
from entregas.services.role_resolver import role_from_memberships


def _membership(funcao, status="ativo", id_loja="L1"):
    return StoreMembership(
        uid_usuario="user-1", id_loja=id_loja, funcao=funcao, status_vinculacao=status,
    )


# =============================================================================
# role_from_memberships
# =============================================================================

class TestRoleFromMemberships:
    """Role derivation from membership rows."""

    def test_empty_is_visitante(self):
        assert role_from_memberships([]) == Role.VISITANTE

    @pytest.mark.parametrize("order", [
        ["entregador", "gerente"],
        ["gerente", "entregador"],
        ["entregador", "entregador", "gerente"],
    ])
    def test_gerente_wins_regardless_of_order(self, order):
        memberships = [_membership(f, id_loja=f"L{i}") for i, f in enumerate(order)]
        assert role_from_memberships(memberships) == Role.GERENTE

    def test_only_entregador(self):
        memberships = [_membership("entregador", id_loja="L1"), _membership("entregador", id_loja="L2")]
        assert role_from_memberships(memberships) == Role.ENTREGADOR

    def test_inactive_gerente_is_ignored(self):
        memberships = [_membership("gerente", status="inativo"), _membership("entregador")]
        assert role_from_memberships(memberships) == Role.ENTREGADOR

    def test_unknown_funcao_grants_nothing(self):
        assert role_from_memberships([_membership("supervisor")]) == Role.VISITANTE

    def test_null_funcao_grants_nothing(self):
        memberships = [_membership(None, id_loja=None), _membership("entregador", id_loja="L2")]
        assert role_from_memberships(memberships) == Role.ENTREGADOR


# =============================================================================
# Resolution paths
# =============================================================================

class TestResolve:
    """One resolution per path of the decision order."""

    def test_initial_profile_is_loading(self, resolver):
        assert resolver.state == ResolverState.INIT
        assert resolver.profile.loading is True
        assert resolver.profile.user_role == Role.VISITANTE

    def test_no_session_is_visitante(self, resolver):
        profile = resolver.start()

        assert resolver.state == ResolverState.RESOLVED
        assert profile.user is None
        assert profile.user_profile is None
        assert profile.user_role == Role.VISITANTE
        assert profile.user_lojas == ()
        assert profile.loading is False
        assert profile.error is None

    def test_admin_skips_membership_lookup(self, resolver, auth, session, user_repo, membership_repo):
        auth.user = session
        user_repo.add(session.id, nome_completo="Ana", is_admin=True)
        membership_repo.add(session.id, "L1", "entregador")

        profile = resolver.start()

        assert profile.user_role == Role.ADMIN
        assert profile.user_lojas == ()
        assert membership_repo.lookups == 0

    def test_null_is_admin_is_not_admin(self, resolver, auth, session, user_repo):
        auth.user = session
        user_repo.add(session.id, is_admin=None)

        assert resolver.start().user_role == Role.VISITANTE

    def test_gerente_from_memberships(self, resolver, auth, session, user_repo, membership_repo):
        auth.user = session
        user_repo.add(session.id)
        membership_repo.add(session.id, "L1", "entregador")
        membership_repo.add(session.id, "L2", "gerente")

        profile = resolver.start()

        assert profile.user_role == Role.GERENTE
        assert [m.id_loja for m in profile.user_lojas] == ["L1", "L2"]

    def test_inactive_memberships_never_reach_the_profile(
        self, resolver, auth, session, user_repo, membership_repo,
    ):
        auth.user = session
        user_repo.add(session.id)
        membership_repo.add(session.id, "L1", "gerente", status="inativo")

        profile = resolver.start()

        assert profile.user_role == Role.VISITANTE
        assert profile.user_lojas == ()

    def test_auth_lookup_failure_degrades(self, resolver, auth):
        auth.error = "timeout"

        profile = resolver.start()

        assert resolver.state == ResolverState.DEGRADED
        assert profile.user_role == Role.VISITANTE
        assert profile.user is None
        assert profile.loading is False
        assert "timeout" in profile.error
        assert profile.error_code == ResolutionErrorCode.AUTH_LOOKUP_FAILURE

    def test_profile_not_found_degrades_and_keeps_session(self, resolver, auth, session):
        auth.user = session

        profile = resolver.start()

        assert resolver.state == ResolverState.DEGRADED
        assert profile.user_role == Role.VISITANTE
        assert profile.user == session
        assert profile.user_profile is None
        assert profile.error is not None
        assert profile.error_code == ResolutionErrorCode.PROFILE_NOT_FOUND

    def test_user_lookup_failure_is_not_reported_as_missing_profile(
        self, resolver, auth, session, user_repo,
    ):
        auth.user = session
        user_repo.add(session.id, nome_completo="Ana")
        user_repo.error = "connection reset"

        profile = resolver.start()

        assert resolver.state == ResolverState.DEGRADED
        assert profile.user_role == Role.VISITANTE
        assert profile.user == session
        assert profile.user_profile is None
        assert "connection reset" in profile.error
        assert profile.error_code == ResolutionErrorCode.USER_LOOKUP_FAILURE
        assert profile.error_code != ResolutionErrorCode.PROFILE_NOT_FOUND

    def test_membership_row_without_funcao_does_not_cancel_gerente(
        self, resolver, auth, session, user_repo, membership_repo,
    ):
        auth.user = session
        user_repo.add(session.id, nome_completo="Ana")
        membership_repo.add(session.id, "L1", "gerente")
        membership_repo.add(session.id, "L2", None)

        profile = resolver.start()

        assert resolver.state == ResolverState.RESOLVED
        assert profile.user_role == Role.GERENTE
        assert [m.id_loja for m in profile.user_lojas] == ["L1", "L2"]

    def test_unexpected_exception_degrades(self, resolver, auth, session, user_repo):
        auth.user = session

        def _boom(uid):
            raise ValueError("bad row")

        user_repo.get_by_uid = _boom

        profile = resolver.start()

        assert resolver.state == ResolverState.DEGRADED
        assert profile.error_code == ResolutionErrorCode.UNKNOWN
        assert profile.user_role == Role.VISITANTE

    def test_start_is_idempotent(self, resolver, auth):
        resolver.start()
        resolver.start()

        assert auth.listener_count == 1


# =============================================================================
# Publishing
# =============================================================================

class TestPublish:
    """Subscribers see every publish, in order."""

    def test_subscriber_sees_resolving_then_resolved(self, resolver):
        seen = []
        resolver.subscribe(lambda p: seen.append(p.loading))

        resolver.start()

        assert seen == [True, False]

    def test_unsubscribe_stops_delivery(self, resolver):
        seen = []
        sub = resolver.subscribe(seen.append)
        assert sub.unsubscribe() is True
        assert sub.unsubscribe() is False

        resolver.start()

        assert seen == []

    def test_failing_listener_does_not_break_others(self, resolver):
        seen = []

        def _broken(profile):
            raise RuntimeError("listener bug")

        resolver.subscribe(_broken)
        resolver.subscribe(seen.append)

        resolver.start()

        assert len(seen) == 2

    def test_reload_clears_previous_error_while_loading(self, resolver, auth):
        auth.error = "timeout"
        resolver.start()
        auth.error = None
        seen = []
        resolver.subscribe(seen.append)

        resolver.reload()

        assert seen[0].loading is True
        assert seen[0].error is None
        assert seen[-1].error is None


# =============================================================================
# Session events
# =============================================================================

class TestSessionEvents:
    """Reactions to auth-provider events."""

    def test_signed_in_resolves_from_event_session(
        self, resolver, auth, session, user_repo, membership_repo,
    ):
        user_repo.add(session.id)
        membership_repo.add(session.id, "L1", "entregador")
        resolver.start()

        auth.emit(AuthEvent.SIGNED_IN, session)

        assert resolver.profile.user == session
        assert resolver.profile.user_role == Role.ENTREGADOR

    def test_signed_out_resets_to_visitor(self, resolver, auth, session, user_repo):
        auth.user = session
        user_repo.add(session.id, is_admin=True)
        resolver.start()

        auth.emit(AuthEvent.SIGNED_OUT, None)

        assert resolver.state == ResolverState.RESOLVED
        assert resolver.profile.user is None
        assert resolver.profile.user_role == Role.VISITANTE
        assert resolver.profile.loading is False

    def test_token_refresh_for_same_user_is_skipped(self, resolver, auth, session, user_repo):
        auth.user = session
        user_repo.add(session.id)
        resolver.start()
        lookups = user_repo.lookups

        auth.emit(AuthEvent.TOKEN_REFRESHED, session)

        assert user_repo.lookups == lookups

    def test_token_refresh_for_other_user_resolves(self, resolver, auth, session, user_repo):
        other = UserSession(id="user-2", email="bia@example.com")
        auth.user = session
        user_repo.add(session.id)
        user_repo.add(other.id, is_admin=True)
        resolver.start()

        auth.emit(AuthEvent.TOKEN_REFRESHED, other)

        assert resolver.profile.user == other
        assert resolver.profile.user_role == Role.ADMIN

    def test_event_during_lookup_wins_over_stale_resolution(
        self, resolver, auth, session, user_repo, membership_repo,
    ):
        # The resolution started by start() is overtaken by SIGNED_OUT
        # while its membership lookup is still running.
        auth.user = session
        user_repo.add(session.id)
        membership_repo.add(session.id, "L1", "gerente")
        membership_repo.on_lookup = lambda: auth.emit(AuthEvent.SIGNED_OUT, None)

        resolver.start()

        assert resolver.profile.user is None
        assert resolver.profile.user_role == Role.VISITANTE

    def test_stop_discards_in_flight_resolution(
        self, resolver, auth, session, user_repo, membership_repo,
    ):
        auth.user = session
        user_repo.add(session.id)
        membership_repo.add(session.id, "L1", "gerente")
        membership_repo.on_lookup = resolver.stop

        resolver.start()

        assert resolver.state == ResolverState.RESOLVING
        assert resolver.profile.loading is True
        assert auth.listener_count == 0

    def test_start_after_stop_is_ignored(self, resolver, auth):
        resolver.stop()

        resolver.start()

        assert auth.listener_count == 0
        assert resolver.state == ResolverState.INIT


# =============================================================================
# Sign-out and profile edit
# =============================================================================

class TestSignOut:

    def test_sign_out_publishes_visitor(self, resolver, auth, session, user_repo):
        auth.user = session
        user_repo.add(session.id, is_admin=True)
        resolver.start()

        resolver.sign_out()

        assert auth.sign_out_calls == 1
        assert resolver.profile.user is None
        assert resolver.profile.user_role == Role.VISITANTE
        assert resolver.state == ResolverState.RESOLVED


class TestUpdateUserProfile:

    @pytest.fixture
    def signed_in(self, resolver, auth, session, user_repo, membership_repo):
        auth.user = session
        user_repo.add(
            session.id,
            nome_completo="Ana Souza",
            nome_usuario="ana",
            telefone="11999990000",
            foto="ana.png",
        )
        membership_repo.add(session.id, "L1", "entregador")
        resolver.start()
        return resolver

    def test_update_merges_and_publishes(self, signed_in, user_repo):
        seen = []
        signed_in.subscribe(seen.append)

        result = signed_in.update_user_profile(
            ProfileUpdate(nome_completo="Ana S.", telefone="11888880000"),
        )

        assert result.success is True
        uid, changes = user_repo.updates[-1]
        assert changes == {
            "nome_completo": "Ana S.",
            "nome_usuario": "ana",
            "telefone": "11888880000",
            "foto": "ana.png",
        }
        assert signed_in.profile.user_profile.nome_completo == "Ana S."
        assert signed_in.profile.user_role == Role.ENTREGADOR
        assert [p.updating for p in seen] == [True, False]

    def test_update_never_writes_is_admin(self, signed_in, user_repo):
        signed_in.update_user_profile(
            {"nome_completo": "Ana", "telefone": "1", "is_admin": True},
        )

        _, changes = user_repo.updates[-1]
        assert "is_admin" not in changes
        assert signed_in.profile.user_profile.is_admin is False

    def test_missing_required_fields(self, signed_in, user_repo):
        result = signed_in.update_user_profile(ProfileUpdate(nome_completo="Ana"))

        assert result.success is False
        assert user_repo.updates == []

    def test_write_failure_is_reported(self, signed_in, user_repo):
        user_repo.write_error = "permission denied"

        result = signed_in.update_user_profile(
            ProfileUpdate(nome_completo="Ana", telefone="1"),
        )

        assert result.success is False
        assert "permission denied" in result.message
        assert signed_in.profile.updating is False
        assert signed_in.profile.user_profile.nome_completo == "Ana Souza"

    def test_without_profile(self, resolver):
        resolver.start()

        result = resolver.update_user_profile(ProfileUpdate(nome_completo="x", telefone="1"))

        assert result.success is False
