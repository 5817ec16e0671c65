"""
Lookup Failures.

Raised by the auth provider and the repositories.  The four
``ResolutionError`` subclasses never cross the ``RoleResolver`` public
boundary: the resolver catches them and publishes a degraded profile.
"""

from __future__ import annotations

from entregas.models.enums import ResolutionErrorCode


class ResolutionError(Exception):
    """Base class for failures met while resolving a user's role."""

    code: ResolutionErrorCode = ResolutionErrorCode.UNKNOWN

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class AuthLookupFailure(ResolutionError):
    """The auth provider could not report the current session."""

    code = ResolutionErrorCode.AUTH_LOOKUP_FAILURE


class UserLookupFailure(ResolutionError):
    """The ``usuarios`` query itself failed (network, offline, bad row)."""

    code = ResolutionErrorCode.USER_LOOKUP_FAILURE


class ProfileNotFound(ResolutionError):
    """The ``usuarios`` query succeeded but returned no row for the subject."""

    code = ResolutionErrorCode.PROFILE_NOT_FOUND


class MembershipLookupFailure(ResolutionError):
    """The ``loja_associada`` query failed."""

    code = ResolutionErrorCode.MEMBERSHIP_LOOKUP_FAILURE


class RepositoryError(Exception):
    """A write, or a read outside role resolution, failed."""
