from __future__ import annotations

"""
Data Models Package.

Re-exports the pydantic models for short imports:
    from entregas.models import Role, ResolvedProfile, StoreMembership, Order
"""

from entregas.models.auth_models import AuthErrorCode, AuthResult
from entregas.models.enums import (
    AuthEvent,
    GuardState,
    MembershipFunction,
    MembershipStatus,
    OrderStatus,
    ResolutionErrorCode,
    ResolverState,
    Role,
)
from entregas.models.membership import StoreMembership
from entregas.models.order import Order
from entregas.models.profile import ProfileUpdate, ProfileUpdateResult, ResolvedProfile
from entregas.models.user import UserRecord, UserSession

__all__ = [
    "AuthErrorCode",
    "AuthResult",
    "AuthEvent",
    "GuardState",
    "MembershipFunction",
    "MembershipStatus",
    "OrderStatus",
    "ResolutionErrorCode",
    "ResolverState",
    "Role",
    "StoreMembership",
    "Order",
    "ProfileUpdate",
    "ProfileUpdateResult",
    "ResolvedProfile",
    "UserRecord",
    "UserSession",
]
