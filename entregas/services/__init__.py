"""
Business Logic Services Package.

The ``create_services()`` factory wires every repository and service
together and returns a typed dict the UI layer consumes without knowing
the dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from entregas.auth import SupabaseAuthProvider
from entregas.config import AppConfig
from entregas.database import DatabaseManager
from entregas.logger import get_logger
from entregas.repositories.membership_repository import StoreMembershipRepository
from entregas.repositories.order_repository import OrderRepository
from entregas.repositories.user_repository import UserRepository
from entregas.services.role_resolver import RoleResolver


class ServiceContainer(TypedDict):
    """Typed container for the application services."""

    auth_provider: SupabaseAuthProvider
    role_resolver: RoleResolver
    order_repository: OrderRepository


def create_services(db: DatabaseManager, config: AppConfig) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    resolver is returned unstarted; the shell starts it once its
    listeners are attached.

    Args:
        db: Initialised DatabaseManager.
        config: Application configuration.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = get_logger("services")

    user_repo = UserRepository(db=db, logger=logger)
    membership_repo = StoreMembershipRepository(db=db, logger=logger)
    order_repo = OrderRepository(db=db, logger=logger)

    auth_provider = SupabaseAuthProvider(db=db, logger=get_logger("auth"))
    role_resolver = RoleResolver(
        auth=auth_provider,
        user_repo=user_repo,
        membership_repo=membership_repo,
        logger=get_logger("resolver"),
        active_status=config.ACTIVE_MEMBERSHIP_STATUS,
    )

    return ServiceContainer(
        auth_provider=auth_provider,
        role_resolver=role_resolver,
        order_repository=order_repo,
    )
