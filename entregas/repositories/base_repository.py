"""
Base Repository.

Shared infrastructure for all repositories:
- DatabaseManager reference
- Logger reference
- ``_run_query``: executes a Supabase call and converts any failure
  into the repository's typed error
"""

from __future__ import annotations

from typing import Callable, TypeVar

from supabase import Client as SupabaseClient

from entregas.database import DatabaseManager
from entregas.logger import StructuredLogger

T = TypeVar("T")


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    TABLE: str = ""

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    @property
    def supabase(self) -> SupabaseClient:
        """Returns the Supabase client (raises ``RuntimeError`` offline)."""
        return self._db.supabase

    def _run_query(
        self,
        query: Callable[[], T],
        error_factory: Callable[[str], Exception],
        *,
        operation_name: str,
    ) -> T:
        """Run *query*, re-raising any failure via *error_factory*.

        Parameters
        ----------
        query:
            Zero-argument callable performing the Supabase round-trip.
        error_factory:
            Builds the typed exception from a reason string.
        operation_name:
            Label for log messages, e.g. ``"get_by_uid (usuarios)"``.
        """
        try:
            return query()
        except Exception as exc:
            self._logger.warning(
                "Supabase query failed for %s: %s", operation_name, exc,
            )
            raise error_factory(str(exc)) from exc
