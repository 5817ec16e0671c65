"""
User Repository.

Reads and edits ``usuarios`` rows.  Users are created by the sign-up
flow and never deleted here.
"""

from __future__ import annotations

from typing import Optional

from entregas.exceptions import ProfileNotFound, RepositoryError, UserLookupFailure
from entregas.models.user import UserRecord
from entregas.repositories.base_repository import BaseRepository
from entregas.utils.rows import JsonValue


class UserRepository(BaseRepository):
    """Data access layer for ``UserRecord`` entities."""

    TABLE = "usuarios"

    def get_by_uid(self, uid: str) -> UserRecord:
        """Fetch the ``usuarios`` row for subject *uid*.

        Raises
        ------
        ProfileNotFound
            If the query succeeds but no row exists.
        UserLookupFailure
            If the query fails.
        """

        def _query() -> Optional[UserRecord]:
            response = (
                self.supabase.table(self.TABLE)
                .select("*")
                .eq("uid", uid)
                .maybe_single()
                .execute()
            )
            data = response.data if response is not None else None
            return UserRecord(**data) if data else None

        record = self._run_query(
            _query, UserLookupFailure, operation_name="get_by_uid (usuarios)",
        )
        if record is None:
            raise ProfileNotFound(f"no usuarios row for uid {uid}")
        return record

    def update_profile(self, uid: str, changes: dict[str, JsonValue]) -> None:
        """Write the editable columns in *changes* for *uid*.

        ``is_admin`` is stripped defensively; it is only granted through
        the Supabase dashboard.
        """
        payload = {key: value for key, value in changes.items() if key != "is_admin"}

        def _query() -> None:
            (
                self.supabase.table(self.TABLE)
                .update(payload)
                .eq("uid", uid)
                .execute()
            )

        self._run_query(
            _query, RepositoryError, operation_name="update_profile (usuarios)",
        )
        self._logger.info("Profile updated: %s", uid, extra={"fields": ",".join(payload)})
