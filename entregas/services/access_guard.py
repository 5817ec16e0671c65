"""
Access Guard.

Gates one protected page behind a minimum ``Role``.  The guard is a
small state machine independent of any widget toolkit; the
CustomTkinter ``RouteGuardFrame`` renders its states.

States::

    PENDING ──► AUTHORIZED ──► DENIED ──► DENIED_AND_REDIRECTING
       └──────────────────────────┘

- ``PENDING``: the profile is still loading.  Only a placeholder may be
  shown; the protected content is not even built.
- ``AUTHORIZED``: ``order(role) >= order(required_role)``.
- ``DENIED``: the unauthorized view is shown and an automatic redirect
  to the safe route is scheduled; the guard then sits in
  ``DENIED_AND_REDIRECTING`` until it fires or the guard is unmounted.

Once ``PENDING`` is left the guard never returns to it; later
``loading`` publishes (a reload) keep the current view.  A later
resolved profile that no longer meets the threshold (sign-out on a
protected page) moves ``AUTHORIZED`` to ``DENIED``.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from entregas.access import has_access
from entregas.logger import StructuredLogger
from entregas.models.enums import GuardState
from entregas.models.profile import ResolvedProfile
from entregas.utils.subscription import Subscription

DEFAULT_REDIRECT_DELAY_MS: int = 1500


class Scheduler(Protocol):
    """Timer API with Tk's shape (``widget.after`` / ``after_cancel``)."""

    def after(self, ms: int, func: Callable[[], None]) -> str: ...  # noqa: E704

    def after_cancel(self, id: str) -> None: ...  # noqa: E704


class ProfileSource(Protocol):
    """Read-only view of a ``RoleResolver``."""

    @property
    def profile(self) -> ResolvedProfile: ...  # noqa: E704

    def subscribe(self, listener: Callable[[ResolvedProfile], None]) -> Subscription: ...  # noqa: E704


class AccessGuard:
    """Role threshold check for a single mounted page.

    Parameters
    ----------
    required_role:
        Minimum role label.  Unknown labels rank as ``visitante``.
    source:
        Where profiles come from; usually the ``RoleResolver``.
    scheduler:
        Timer used for the delayed redirect.
    on_navigate:
        Called with the safe route, by the manual action or the timer.
    logger:
        Structured logger instance.
    on_state_change:
        Called with every new ``GuardState``; the renderer hooks in here.
    safe_route:
        Where denied users are sent.
    redirect_delay_ms:
        Delay before the automatic redirect.
    """

    def __init__(
        self,
        required_role: str,
        source: ProfileSource,
        scheduler: Scheduler,
        on_navigate: Callable[[str], None],
        logger: StructuredLogger,
        *,
        on_state_change: Optional[Callable[[GuardState], None]] = None,
        safe_route: str = "/",
        redirect_delay_ms: int = DEFAULT_REDIRECT_DELAY_MS,
    ) -> None:
        self._required_role = required_role
        self._source = source
        self._scheduler = scheduler
        self._on_navigate = on_navigate
        self._logger = logger
        self._on_state_change = on_state_change
        self._safe_route = safe_route
        self._redirect_delay_ms = redirect_delay_ms

        self._state: GuardState = GuardState.PENDING
        self._subscription: Optional[Subscription] = None
        self._redirect_job: Optional[str] = None
        self._mounted: bool = False

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def required_role(self) -> str:
        return self._required_role

    @property
    def redirect_pending(self) -> bool:
        return self._redirect_job is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> GuardState:
        """Start observing profiles and evaluate the current one."""
        if self._mounted:
            return self._state
        self._mounted = True
        self._subscription = self._source.subscribe(self.evaluate)
        self.evaluate(self._source.profile)
        return self._state

    def unmount(self) -> None:
        """Cancel the pending redirect and stop observing.  Idempotent."""
        self._mounted = False
        self._cancel_redirect()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def navigate_home(self) -> None:
        """Manual "back" action offered by the unauthorized view."""
        self._cancel_redirect()
        self._on_navigate(self._safe_route)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, profile: ResolvedProfile) -> GuardState:
        """Feed one published profile into the state machine."""
        if not self._mounted or profile.loading:
            return self._state

        allowed = has_access(profile.user_role, self._required_role)

        if self._state == GuardState.PENDING:
            self._set_state(GuardState.AUTHORIZED if allowed else GuardState.DENIED)
        elif self._state == GuardState.AUTHORIZED and not allowed:
            self._set_state(GuardState.DENIED)

        if self._state == GuardState.DENIED:
            self._logger.info(
                "Access denied: role '%s' below required '%s'.",
                profile.user_role,
                self._required_role,
            )
            self._redirect_job = self._scheduler.after(
                self._redirect_delay_ms, self._fire_redirect,
            )
            self._set_state(GuardState.DENIED_AND_REDIRECTING)

        return self._state

    def _set_state(self, state: GuardState) -> None:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)

    def _fire_redirect(self) -> None:
        self._redirect_job = None
        if self._mounted:
            self._on_navigate(self._safe_route)

    def _cancel_redirect(self) -> None:
        job, self._redirect_job = self._redirect_job, None
        if job is not None:
            self._scheduler.after_cancel(job)
