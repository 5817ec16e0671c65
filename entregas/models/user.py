"""
User Models.

``UserSession`` is the identity reported by Supabase Auth; it is observed,
never owned.  ``UserRecord`` mirrors one row of the ``usuarios`` table.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator


class UserSession(BaseModel):
    """Authenticated identity issued by the auth provider."""

    id: str  # Supabase UUID (subject)
    email: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True}


class UserRecord(BaseModel):
    """A registered user (``usuarios`` row), keyed by ``uid``."""

    uid: str
    nome_completo: Optional[str] = None
    nome_usuario: Optional[str] = None
    telefone: Optional[str] = None
    foto: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False

    model_config = {"from_attributes": True, "frozen": True, "extra": "ignore"}

    @field_validator("is_admin", mode="before")
    @classmethod
    def _null_is_not_admin(cls, value: object) -> object:
        # Legacy rows carry NULL here.
        return False if value is None else value

    @property
    def display_name(self) -> str:
        return self.nome_completo or self.nome_usuario or self.email or self.uid
