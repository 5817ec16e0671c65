"""
Order Model.

A ``pedidos`` row.  Only the columns the dashboard reasons about are
typed; the remaining WooCommerce columns are kept as extras.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel


class Order(BaseModel):
    """A delivery order belonging to one store."""

    id: Union[int, str]
    id_loja: Union[int, str]
    status_transporte: Optional[str] = None
    nome_cliente: Optional[str] = None
    loja_nome: Optional[str] = None
    data: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "allow"}
