"""
Order Repository.

Reads and transitions ``pedidos`` rows for the order pages.  Visibility
per role is *not* enforced here; pages run the result through
``filter_orders_for_user``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Union

from entregas.exceptions import RepositoryError
from entregas.models.enums import OrderStatus
from entregas.models.order import Order
from entregas.repositories.base_repository import BaseRepository


class OrderRepository(BaseRepository):
    """Data access layer for ``Order`` entities."""

    TABLE = "pedidos"

    def list_by_status(self, statuses: Iterable[str]) -> list[Order]:
        """Return every order whose ``status_transporte`` is in *statuses*,
        newest first.

        Raises
        ------
        RepositoryError
            If the query fails.
        """
        wanted = [str(status) for status in statuses]

        def _query() -> list[Order]:
            response = (
                self.supabase.table(self.TABLE)
                .select("*")
                .in_("status_transporte", wanted)
                .order("data", desc=True)
                .execute()
            )
            return [Order(**row) for row in (response.data or [])]

        return self._run_query(
            _query, RepositoryError, operation_name="list_by_status (pedidos)",
        )

    def update_status(self, order_id: Union[int, str], status: OrderStatus) -> None:
        """Move order *order_id* to *status*.

        Raises
        ------
        RepositoryError
            If the update fails.
        """

        def _query() -> None:
            (
                self.supabase.table(self.TABLE)
                .update({"status_transporte": str(status)})
                .eq("id", order_id)
                .execute()
            )

        self._run_query(
            _query, RepositoryError, operation_name="update_status (pedidos)",
        )
        self._logger.info(
            "Order %s moved to '%s'", order_id, status,
            extra={"event": "ORDER_STATUS", "order_id": str(order_id)},
        )
