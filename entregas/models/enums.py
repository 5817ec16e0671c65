"""
Shared Enumerations for EntregasWoo Models.

StrEnum values compare equal to their string equivalents, so rows read
straight from Supabase (``funcao == "gerente"``) compare cleanly against
the enum members.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Effective authorization role, ordered by access level.

    The total order lives in :data:`entregas.access.ROLE_HIERARCHY`:
    ``visitante < entregador < gerente < admin``.
    """

    VISITANTE = "visitante"
    ENTREGADOR = "entregador"
    GERENTE = "gerente"
    ADMIN = "admin"


class MembershipFunction(StrEnum):
    """``loja_associada.funcao`` values that grant a role."""

    GERENTE = "gerente"
    ENTREGADOR = "entregador"


class MembershipStatus(StrEnum):
    """``loja_associada.status_vinculacao`` values.

    Only ``ATIVO`` rows take part in role resolution; any other value is
    treated as inactive.
    """

    ATIVO = "ativo"
    INATIVO = "inativo"


class AuthEvent(StrEnum):
    """Session-change events delivered by the auth provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"


class ResolverState(StrEnum):
    """Lifecycle of a ``RoleResolver``."""

    INIT = "INIT"
    RESOLVING = "RESOLVING"
    RESOLVED = "RESOLVED"
    DEGRADED = "DEGRADED"


class GuardState(StrEnum):
    """Lifecycle of an ``AccessGuard``."""

    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"
    DENIED = "DENIED"
    DENIED_AND_REDIRECTING = "DENIED_AND_REDIRECTING"


class ResolutionErrorCode(StrEnum):
    """Why a resolution ended in ``DEGRADED``."""

    AUTH_LOOKUP_FAILURE = "auth_lookup_failure"
    USER_LOOKUP_FAILURE = "user_lookup_failure"
    PROFILE_NOT_FOUND = "profile_not_found"
    MEMBERSHIP_LOOKUP_FAILURE = "membership_lookup_failure"
    UNKNOWN = "unknown"


class OrderStatus(StrEnum):
    """``pedidos.status_transporte`` values."""

    PENDENTE = "pendente"
    ACEITO = "aceito"
    EM_ROTA = "em rota"
    ENTREGUE = "entregue"
    CANCELADO = "cancelado"
