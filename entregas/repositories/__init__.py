"""
Repository Layer Package.

Data-access abstractions over Supabase.  Services never touch
``db.supabase`` directly.

Usage:
    from entregas.repositories import UserRepository, StoreMembershipRepository
"""

from entregas.repositories.base_repository import BaseRepository
from entregas.repositories.membership_repository import StoreMembershipRepository
from entregas.repositories.order_repository import OrderRepository
from entregas.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "OrderRepository",
    "StoreMembershipRepository",
    "UserRepository",
]
