"""
Store Membership Model.

One ``loja_associada`` row: a user serving a store as ``gerente`` or
``entregador``.  A courier may hold several memberships.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel

from entregas.models.enums import MembershipStatus


class StoreMembership(BaseModel):
    """Association between a user (``uid_usuario``) and a store (``id_loja``).

    ``funcao`` and ``status_vinculacao`` are plain strings because the
    table accepts values outside the known enums; those never grant a role.
    ``funcao`` and ``id_loja`` are nullable columns: a row missing either
    still loads, grants nothing, and leaves the other rows untouched.
    """

    id: Optional[Union[int, str]] = None
    uid_usuario: str
    id_loja: Optional[Union[int, str]] = None
    funcao: Optional[str] = None
    status_vinculacao: str = MembershipStatus.ATIVO
    loja_nome: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True, "extra": "ignore"}

    @property
    def is_active(self) -> bool:
        return self.status_vinculacao == MembershipStatus.ATIVO
