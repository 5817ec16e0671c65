"""
Resolved Profile Models.

``ResolvedProfile`` is the projection published by ``RoleResolver``: who
is signed in, their ``usuarios`` row, effective role and active store
memberships.  It is frozen; the resolver publishes a new instance on
every change and consumers only ever read it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from entregas.models.enums import ResolutionErrorCode, Role
from entregas.models.membership import StoreMembership
from entregas.models.user import UserRecord, UserSession


class ResolvedProfile(BaseModel):
    """Derived authorization view of the current session.

    Attributes
    ----------
    user:
        The auth-provider session, or ``None`` when signed out.
    user_profile:
        The ``usuarios`` row, or ``None`` when absent / not loaded.
    user_role:
        Effective role.  Defaults to ``visitante``.
    user_lojas:
        Active memberships in the order the store returned them.  Always
        empty for admins.
    loading:
        ``True`` until the first resolution finishes, and again while a
        reload is in flight.
    updating:
        ``True`` while a profile edit is being written.
    error:
        Human-readable failure message, if the last resolution failed.
    error_code:
        Machine-readable counterpart of ``error``.
    """

    user: Optional[UserSession] = None
    user_profile: Optional[UserRecord] = None
    user_role: Role = Role.VISITANTE
    user_lojas: tuple[StoreMembership, ...] = ()
    loading: bool = True
    updating: bool = False
    error: Optional[str] = None
    error_code: Optional[ResolutionErrorCode] = None

    model_config = {"frozen": True}

    @classmethod
    def visitor(
        cls,
        error: Optional[str] = None,
        error_code: Optional[ResolutionErrorCode] = None,
    ) -> "ResolvedProfile":
        """Signed-out (or failed) profile with loading finished."""
        return cls(loading=False, error=error, error_code=error_code)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def store_ids(self) -> list[object]:
        return [membership.id_loja for membership in self.user_lojas]


class ProfileUpdate(BaseModel):
    """Editable ``usuarios`` columns submitted from the profile form.

    ``is_admin`` is deliberately absent: it cannot be changed here.
    """

    nome_completo: str = ""
    telefone: str = ""
    nome_usuario: Optional[str] = None
    foto: Optional[str] = None


class ProfileUpdateResult(BaseModel):
    """Outcome of ``RoleResolver.update_user_profile``."""

    success: bool
    message: str
    profile: Optional[UserRecord] = Field(default=None)
