"""
Role Resolver.

Turns the current Supabase session into a ``ResolvedProfile``: who is
signed in, their ``usuarios`` row, their active ``loja_associada`` rows
and the effective role derived from them.

Decision order for a signed-in user:

1. ``usuarios.is_admin`` is true  -> ``admin`` (memberships not read).
2. any active membership with ``funcao = 'gerente'``    -> ``gerente``.
3. any active membership with ``funcao = 'entregador'`` -> ``entregador``.
4. anything else                                        -> ``visitante``.

Lookup failures never escape: each one resolves to a well-defined,
degraded profile (see ``_compute``).  There are no automatic retries;
``reload()`` re-runs resolution on demand.

State machine::

    INIT ──► RESOLVING ──► RESOLVED
                 ▲   └───► DEGRADED
                 └──────────────┘   (session event / reload)

Every trigger (start, session event, reload, sign-out) takes a new
generation number.  A resolution only publishes if its generation is
still the newest and the resolver has not been stopped, so a slow lookup
started for an old session can never overwrite a newer result.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable
from typing import Callable, Final, Optional, Union

from entregas.auth import AuthProvider
from entregas.exceptions import (
    AuthLookupFailure,
    MembershipLookupFailure,
    ProfileNotFound,
    RepositoryError,
    UserLookupFailure,
)
from entregas.logger import StructuredLogger
from entregas.models.enums import (
    AuthEvent,
    MembershipFunction,
    MembershipStatus,
    ResolutionErrorCode,
    ResolverState,
    Role,
)
from entregas.models.membership import StoreMembership
from entregas.models.profile import ProfileUpdate, ProfileUpdateResult, ResolvedProfile
from entregas.models.user import UserSession
from entregas.repositories.membership_repository import StoreMembershipRepository
from entregas.repositories.user_repository import UserRepository
from entregas.services.base_service import BaseService
from entregas.utils.subscription import Subscription

ProfileListener = Callable[[ResolvedProfile], None]

_ALLOWED_TRANSITIONS: Final[dict[ResolverState, frozenset[ResolverState]]] = {
    ResolverState.INIT: frozenset({ResolverState.RESOLVING, ResolverState.RESOLVED}),
    ResolverState.RESOLVING: frozenset({
        ResolverState.RESOLVING,
        ResolverState.RESOLVED,
        ResolverState.DEGRADED,
    }),
    ResolverState.RESOLVED: frozenset({ResolverState.RESOLVING, ResolverState.RESOLVED}),
    ResolverState.DEGRADED: frozenset({
        ResolverState.RESOLVING,
        ResolverState.RESOLVED,
        ResolverState.DEGRADED,
    }),
}

# Events that carry the same identity as before; nothing to re-resolve.
_IDENTITY_PRESERVING_EVENTS: Final[frozenset[AuthEvent]] = frozenset({
    AuthEvent.TOKEN_REFRESHED,
})


def role_from_memberships(
    memberships: Iterable[StoreMembership],
    active_status: str = MembershipStatus.ATIVO,
) -> Role:
    """Derive the role granted by *memberships*.

    Only rows whose ``status_vinculacao`` equals *active_status* count.
    ``gerente`` wins over ``entregador`` regardless of row order.
    """
    functions = {
        membership.funcao
        for membership in memberships
        if membership.status_vinculacao == active_status
    }
    if MembershipFunction.GERENTE in functions:
        return Role.GERENTE
    if MembershipFunction.ENTREGADOR in functions:
        return Role.ENTREGADOR
    return Role.VISITANTE


class RoleResolver(BaseService):
    """Owns the ``ResolvedProfile`` for one application session.

    The resolver is the single writer of the profile; everything else
    reads :attr:`profile` or subscribes through :meth:`subscribe`.
    Listeners are called, in publish order, on the thread that produced
    the profile and must not block.

    Parameters
    ----------
    auth:
        Session source (``SupabaseAuthProvider`` in production).
    user_repo:
        Reads ``usuarios``.
    membership_repo:
        Reads ``loja_associada``.
    logger:
        Structured logger instance.
    active_status:
        ``status_vinculacao`` value that marks a membership as active.
    """

    def __init__(
        self,
        auth: AuthProvider,
        user_repo: UserRepository,
        membership_repo: StoreMembershipRepository,
        logger: StructuredLogger,
        active_status: str = MembershipStatus.ATIVO,
    ) -> None:
        super().__init__(logger)
        self._auth = auth
        self._user_repo = user_repo
        self._membership_repo = membership_repo
        self._active_status = active_status

        self._lock: threading.RLock = threading.RLock()
        self._state: ResolverState = ResolverState.INIT
        self._profile: ResolvedProfile = ResolvedProfile()
        self._generation: int = 0
        self._closed: bool = False
        self._listeners: dict[int, ProfileListener] = {}
        self._listener_ids = itertools.count(1)
        self._auth_subscription: Optional[Subscription] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def profile(self) -> ResolvedProfile:
        with self._lock:
            return self._profile

    @property
    def state(self) -> ResolverState:
        with self._lock:
            return self._state

    def subscribe(self, listener: ProfileListener) -> Subscription:
        """Call *listener* with every profile published from now on."""
        with self._lock:
            listener_id = next(self._listener_ids)
            self._listeners[listener_id] = listener
        return Subscription(
            lambda: self._remove_listener(listener_id),
            name=f"profile-listener-{listener_id}",
        )

    def _remove_listener(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> ResolvedProfile:
        """Subscribe to session events and run the initial resolution.

        Calling ``start()`` twice is a no-op returning the current profile.
        """
        with self._lock:
            if self._closed:
                self._logger.warning("start() called on a stopped resolver; ignored.")
                return self._profile
            if self._auth_subscription is not None:
                return self._profile
            self._auth_subscription = self._auth.on_auth_state_change(self._on_auth_event)
        self._logger.info("Role resolver started.")
        return self.reload()

    def stop(self) -> None:
        """Release the auth subscription and drop every listener.

        Any resolution still in flight is discarded when it finishes.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._generation += 1
            subscription, self._auth_subscription = self._auth_subscription, None
            self._listeners.clear()
        if subscription is not None:
            subscription.unsubscribe()
        self._logger.info("Role resolver stopped.")

    def reload(self) -> ResolvedProfile:
        """Re-run resolution from the provider's current session.

        Blocks for the duration of the lookups; UI code calls it from a
        worker thread.  Returns the profile published afterwards.
        """
        generation = self._next_generation()
        self._resolve(generation, self._auth.get_current_user)
        return self.profile

    def sign_out(self) -> None:
        """Sign out with the provider and publish the visitor profile."""
        generation = self._next_generation()
        self._auth.sign_out()
        self._transition(generation, ResolverState.RESOLVED, ResolvedProfile.visitor())
        self._logger.info("Signed out; profile reset to visitante.")

    # ------------------------------------------------------------------
    # Profile edit
    # ------------------------------------------------------------------

    def update_user_profile(
        self, form: Union[ProfileUpdate, dict[str, object]],
    ) -> ProfileUpdateResult:
        """Persist the editable ``usuarios`` columns and publish them.

        ``nome_completo`` and ``telefone`` are mandatory; ``nome_usuario``
        and ``foto`` keep their current value when left blank.  Never
        raises.
        """
        update = form if isinstance(form, ProfileUpdate) else ProfileUpdate(**form)

        record = self.profile.user_profile
        if record is None:
            return ProfileUpdateResult(success=False, message="Perfil não carregado.")
        if not update.nome_completo.strip() or not update.telefone.strip():
            return ProfileUpdateResult(
                success=False,
                message="Nome completo e telefone são obrigatórios.",
            )

        changes: dict[str, Optional[str]] = {
            "nome_completo": update.nome_completo.strip(),
            "nome_usuario": update.nome_usuario or record.nome_usuario,
            "telefone": update.telefone.strip(),
            "foto": update.foto or record.foto,
        }

        self._patch(record.uid, updating=True, error=None)
        try:
            self._user_repo.update_profile(record.uid, changes)
        except RepositoryError as exc:
            message = f"Erro ao atualizar: {exc}"
            self._patch(record.uid, updating=False, error=message)
            return ProfileUpdateResult(success=False, message=message)

        updated = record.model_copy(update=changes)
        self._patch(record.uid, updating=False, user_profile=updated)
        return ProfileUpdateResult(
            success=True, message="Perfil atualizado com sucesso!", profile=updated,
        )

    # ------------------------------------------------------------------
    # Session events
    # ------------------------------------------------------------------

    def _on_auth_event(self, event: AuthEvent, session: Optional[UserSession]) -> None:
        self._logger.info("Auth event: %s", event, extra={"event": str(event)})

        if event == AuthEvent.SIGNED_OUT or session is None:
            generation = self._next_generation()
            self._transition(generation, ResolverState.RESOLVED, ResolvedProfile.visitor())
            return

        with self._lock:
            current = self._profile.user
            unchanged = (
                event in _IDENTITY_PRESERVING_EVENTS
                and self._state == ResolverState.RESOLVED
                and current is not None
                and current.id == session.id
            )
        if unchanged:
            self._logger.debug("Identity unchanged after %s; skipping.", event)
            return

        generation = self._next_generation()
        self._resolve(generation, lambda: session)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _resolve(
        self,
        generation: int,
        fetch_user: Callable[[], Optional[UserSession]],
    ) -> None:
        with self._lock:
            pending = self._profile.model_copy(
                update={"loading": True, "error": None, "error_code": None},
            )
        if not self._transition(generation, ResolverState.RESOLVING, pending):
            return

        state, profile = self._compute(fetch_user)
        if self._transition(generation, state, profile):
            self._logger.info(
                "Role resolved: %s",
                profile.user_role,
                extra={
                    "state": str(state),
                    "user_id": profile.user.id if profile.user else "",
                    "stores": len(profile.user_lojas),
                },
            )

    def _compute(
        self,
        fetch_user: Callable[[], Optional[UserSession]],
    ) -> tuple[ResolverState, ResolvedProfile]:
        """Run the lookups and build the resulting profile.  Pure apart
        from the reads; publishes nothing."""
        try:
            return self._compute_unchecked(fetch_user)
        except Exception as exc:
            self._logger.exception("Unexpected failure while resolving role: %s", exc)
            return ResolverState.DEGRADED, ResolvedProfile.visitor(
                error=f"Erro inesperado: {exc}",
                error_code=ResolutionErrorCode.UNKNOWN,
            )

    def _compute_unchecked(
        self,
        fetch_user: Callable[[], Optional[UserSession]],
    ) -> tuple[ResolverState, ResolvedProfile]:
        try:
            user = fetch_user()
        except AuthLookupFailure as exc:
            return ResolverState.DEGRADED, ResolvedProfile.visitor(
                error=f"Falha na autenticação: {exc.reason}",
                error_code=exc.code,
            )

        if user is None:
            return ResolverState.RESOLVED, ResolvedProfile.visitor()

        try:
            record = self._user_repo.get_by_uid(user.id)
        except (ProfileNotFound, UserLookupFailure) as exc:
            self._logger.warning(
                "User lookup degraded for %s (%s): %s", user.id, exc.code, exc.reason,
            )
            prefix = (
                "Perfil não encontrado"
                if isinstance(exc, ProfileNotFound)
                else "Falha ao carregar perfil"
            )
            return ResolverState.DEGRADED, ResolvedProfile(
                user=user,
                loading=False,
                error=f"{prefix}: {exc.reason}",
                error_code=exc.code,
            )

        if record.is_admin is True:
            return ResolverState.RESOLVED, ResolvedProfile(
                user=user,
                user_profile=record,
                user_role=Role.ADMIN,
                loading=False,
            )

        try:
            memberships = self._membership_repo.list_active_for_user(
                user.id, self._active_status,
            )
        except MembershipLookupFailure as exc:
            # Known user, unknown role.
            self._logger.warning(
                "Membership lookup failed for %s: %s", user.id, exc.reason,
            )
            return ResolverState.DEGRADED, ResolvedProfile(
                user=user,
                user_profile=record,
                user_role=Role.VISITANTE,
                loading=False,
            )

        active = tuple(
            membership
            for membership in memberships
            if membership.status_vinculacao == self._active_status
        )
        return ResolverState.RESOLVED, ResolvedProfile(
            user=user,
            user_profile=record,
            user_role=role_from_memberships(active, self._active_status),
            user_lojas=active,
            loading=False,
        )

    # ------------------------------------------------------------------
    # Single writer
    # ------------------------------------------------------------------

    def _transition(
        self,
        generation: int,
        new_state: ResolverState,
        profile: ResolvedProfile,
    ) -> bool:
        """Publish *profile* in *new_state* if *generation* is current.

        Returns ``False`` when the write was discarded as stale.
        """
        with self._lock:
            if self._closed or generation != self._generation:
                self._logger.debug(
                    "Discarding stale resolution (generation %d, current %d).",
                    generation,
                    self._generation,
                )
                return False
            if new_state not in _ALLOWED_TRANSITIONS[self._state]:
                raise RuntimeError(
                    f"Illegal resolver transition {self._state} -> {new_state}"
                )
            self._state = new_state
            self._profile = profile
            for listener in list(self._listeners.values()):
                try:
                    listener(profile)
                except Exception as exc:
                    self._logger.warning("Profile listener failed: %s", exc, exc_info=True)
        return True

    def _patch(self, uid: str, **changes: object) -> None:
        """Apply *changes* to the current profile if it still belongs to *uid*."""
        with self._lock:
            current = self._profile.user_profile
            if current is None or current.uid != uid:
                return
            self._transition(
                self._generation,
                self._state,
                self._profile.model_copy(update=changes),
            )
