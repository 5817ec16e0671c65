"""
Sign-in Models.

Typed result of ``AuthProvider.sign_in_with_password`` so the login view
never inspects raw Supabase exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel


class AuthErrorCode(StrEnum):
    """Categories of sign-in failure shown by the login view."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    NETWORK_ERROR = "network_error"
    VALIDATION_ERROR = "validation_error"
    OFFLINE = "offline"
    UNKNOWN_ERROR = "unknown_error"


# Substrings of Supabase error messages mapped to user-facing text.
SUPABASE_ERROR_MAP: dict[str, tuple[AuthErrorCode, str]] = {
    "invalid login credentials": (
        AuthErrorCode.INVALID_CREDENTIALS,
        "Email ou senha incorretos.",
    ),
    "invalid_credentials": (
        AuthErrorCode.INVALID_CREDENTIALS,
        "Email ou senha incorretos.",
    ),
    "email not confirmed": (
        AuthErrorCode.EMAIL_NOT_CONFIRMED,
        "Confirme seu email antes de entrar.",
    ),
}


class AuthResult(BaseModel):
    """Unified response for a sign-in attempt.

    Attributes
    ----------
    success:
        ``True`` when the provider accepted the credentials.
    error_code:
        Structured error category (``None`` on success).
    error_message:
        Human-readable error description (``None`` on success).
    user_id:
        Supabase UUID of the signed-in user.
    email:
        Email reported by the provider.
    """

    success: bool
    error_code: Optional[AuthErrorCode] = None
    error_message: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None

    model_config = {"from_attributes": True}
