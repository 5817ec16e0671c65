"""
Order Visibility Filter.

Narrows a list of orders to the ones the current role may see.  Pure:
no I/O, no state, same inputs give the same output, and input order is
preserved.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from entregas.models.enums import Role
from entregas.utils.rows import field_of

T = TypeVar("T")


def filter_orders_for_user(
    orders: Sequence[T],
    role: str,
    memberships: Sequence[object],
) -> Sequence[T]:
    """Return the orders visible to *role* with *memberships*.

    Rules, first match wins:

    1. ``admin`` sees everything; *orders* is returned as is.
    2. ``gerente`` with exactly one membership sees that store's orders.
       A manager of two or more stores sees nothing (kept as-is until the
       product decides how multi-store managers should work).
    3. ``entregador`` with at least one membership sees the orders of
       all of their stores.
    4. Everybody else sees nothing.

    Orders and memberships may be models or raw row dicts; both are read
    through their ``id_loja`` field.
    """
    if role == Role.ADMIN:
        return orders

    if role == Role.GERENTE and len(memberships) == 1:
        store_id = field_of(memberships[0], "id_loja")
        return [order for order in orders if field_of(order, "id_loja") == store_id]

    if role == Role.ENTREGADOR and len(memberships) > 0:
        store_ids = [field_of(membership, "id_loja") for membership in memberships]
        return [order for order in orders if field_of(order, "id_loja") in store_ids]

    return []
