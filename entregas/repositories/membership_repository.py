"""
Store Membership Repository.

Reads ``loja_associada``: which stores a user serves, and as what.
"""

from __future__ import annotations

from entregas.exceptions import MembershipLookupFailure
from entregas.models.enums import MembershipStatus
from entregas.models.membership import StoreMembership
from entregas.repositories.base_repository import BaseRepository


class StoreMembershipRepository(BaseRepository):
    """Data access layer for ``StoreMembership`` entities."""

    TABLE = "loja_associada"

    def list_active_for_user(
        self,
        uid: str,
        status: str = MembershipStatus.ATIVO,
    ) -> list[StoreMembership]:
        """Return the memberships of *uid* whose status is *status*.

        Rows come back in the store's order; callers rely on it for the
        single-store ``gerente`` case.

        Raises
        ------
        MembershipLookupFailure
            If the query fails.
        """

        def _query() -> list[StoreMembership]:
            response = (
                self.supabase.table(self.TABLE)
                .select("*")
                .eq("uid_usuario", uid)
                .eq("status_vinculacao", str(status))
                .execute()
            )
            return [StoreMembership(**row) for row in (response.data or [])]

        memberships = self._run_query(
            _query,
            MembershipLookupFailure,
            operation_name="list_active_for_user (loja_associada)",
        )
        self._logger.debug(
            "Active memberships for %s: %d", uid, len(memberships),
        )
        return memberships
