"""
Authentication Provider.

Defines the ``AuthProvider`` contract the role resolver depends on and
its Supabase Auth implementation.  The resolver only ever *observes*
sessions; issuing and expiring them is Supabase's job.

Usage::

    from entregas.auth import SupabaseAuthProvider

    auth = SupabaseAuthProvider(db=db, logger=get_logger("auth"))
    sub = auth.on_auth_state_change(lambda event, session: ...)
    ...
    sub.unsubscribe()
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Protocol, runtime_checkable

from entregas.database import DatabaseManager
from entregas.exceptions import AuthLookupFailure
from entregas.logger import StructuredLogger
from entregas.models.auth_models import SUPABASE_ERROR_MAP, AuthErrorCode, AuthResult
from entregas.models.enums import AuthEvent
from entregas.models.user import UserSession
from entregas.utils.subscription import Subscription

AuthListener = Callable[[AuthEvent, Optional[UserSession]], None]

_EMAIL_RE: re.Pattern[str] = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@runtime_checkable
class AuthProvider(Protocol):
    """What the role resolver needs from an auth backend."""

    def get_current_user(self) -> Optional[UserSession]:
        """Return the signed-in identity, or ``None``.

        Raises
        ------
        AuthLookupFailure
            If the provider could not be queried.
        """
        ...

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Deliver every session-change event, in order, to *listener*."""
        ...

    def sign_out(self) -> None:
        ...


def _to_session(user: object) -> Optional[UserSession]:
    """Project a Supabase ``User`` onto ``UserSession``."""
    if user is None or not getattr(user, "id", None):
        return None
    return UserSession(id=str(user.id), email=getattr(user, "email", None))


def _to_event(raw_event: object) -> Optional[AuthEvent]:
    try:
        return AuthEvent(str(raw_event))
    except ValueError:
        return None


class SupabaseAuthProvider:
    """``AuthProvider`` backed by ``supabase.auth`` (GoTrue).

    Parameters
    ----------
    db:
        Connection holder; ``db.supabase`` raises ``RuntimeError`` when
        offline, which surfaces as ``AuthLookupFailure``.
    logger:
        Structured logger instance.
    """

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    def get_current_user(self) -> Optional[UserSession]:
        try:
            response = self._db.supabase.auth.get_user()
        except Exception as exc:
            self._logger.warning("Session lookup failed: %s", exc)
            raise AuthLookupFailure(str(exc)) from exc

        if response is None:
            return None
        return _to_session(response.user)

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Subscribe *listener* to GoTrue session events.

        Events GoTrue adds in future releases are logged and skipped.
        """

        def _forward(raw_event: object, session: object) -> None:
            event = _to_event(raw_event)
            if event is None:
                self._logger.debug("Ignoring unknown auth event: %s", raw_event)
                return
            user = _to_session(getattr(session, "user", None)) if session else None
            listener(event, user)

        try:
            gotrue_sub = self._db.supabase.auth.on_auth_state_change(_forward)
        except RuntimeError:
            # Offline: no events will ever arrive.
            self._logger.debug("Offline; auth state subscription is a no-op.")
            return Subscription(lambda: None, name="auth-offline")

        return Subscription(gotrue_sub.unsubscribe, name="auth-state")

    def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """Authenticate with email + password.

        On success GoTrue emits ``SIGNED_IN``, which the resolver picks
        up on its own; the caller only needs the ``AuthResult``.
        """
        email = email.strip().lower()
        if not _EMAIL_RE.match(email) or not password:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message="Informe um email válido e a senha.",
            )

        try:
            response = self._db.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except RuntimeError:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.OFFLINE,
                error_message="Servidor não configurado. Tente novamente mais tarde.",
            )
        except (ConnectionError, TimeoutError) as exc:
            self._logger.warning("Network error during sign-in: %s", exc)
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message="Não foi possível contactar o servidor.",
            )
        except Exception as exc:
            return self._classify_sign_in_error(exc)

        session = _to_session(response.user)
        self._logger.info(
            "User signed in: %s",
            email,
            extra={"event": "SIGNED_IN", "user_id": session.id if session else ""},
        )
        return AuthResult(
            success=True,
            user_id=session.id if session else None,
            email=session.email if session else email,
        )

    def sign_out(self) -> None:
        """Revoke the server session.  Offline sign-out is a local no-op."""
        try:
            self._db.supabase.auth.sign_out()
        except RuntimeError:
            self._logger.debug("Offline; skipping server-side sign_out.")
        except Exception as exc:
            self._logger.warning("Server-side sign_out failed: %s", exc)

    def _classify_sign_in_error(self, exc: Exception) -> AuthResult:
        error_str = str(exc).lower()
        for code_key, (error_code, human_message) in SUPABASE_ERROR_MAP.items():
            if code_key in error_str:
                self._logger.warning(
                    "Sign-in rejected (%s): %s", code_key, exc,
                    extra={"event": "SIGN_IN_FAILED", "error_code": code_key},
                )
                return AuthResult(
                    success=False,
                    error_code=error_code,
                    error_message=human_message,
                )

        self._logger.warning(
            "Unknown sign-in error: %s", exc,
            extra={"event": "SIGN_IN_FAILED", "error_code": "unknown"},
        )
        return AuthResult(
            success=False,
            error_code=AuthErrorCode.UNKNOWN_ERROR,
            error_message="Erro inesperado. Tente novamente.",
        )
