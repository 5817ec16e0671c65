# =============================================================================
# tests/test_repositories.py - Supabase repositories against a mocked client
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from entregas.database import DatabaseManager
from entregas.exceptions import (
    MembershipLookupFailure,
    ProfileNotFound,
    RepositoryError,
    UserLookupFailure,
)
from entregas.models.enums import OrderStatus
from entregas.repositories.membership_repository import StoreMembershipRepository
from entregas.repositories.order_repository import OrderRepository
from entregas.repositories.user_repository import UserRepository


@pytest.fixture
def db():
    """DatabaseManager stand-in whose ``supabase`` is a chainable mock."""
    return MagicMock()


@pytest.fixture
def offline_db(logger):
    return DatabaseManager(supabase_url="", supabase_key="", logger=logger)


class TestDatabaseManager:

    def test_offline_without_credentials(self, offline_db):
        assert offline_db.is_online is False
        with pytest.raises(RuntimeError):
            offline_db.supabase

    def test_close_is_idempotent(self, offline_db):
        offline_db.close()
        offline_db.close()


class TestUserRepository:

    def _lookup(self, db):
        return db.supabase.table.return_value.select.return_value.eq.return_value \
            .maybe_single.return_value.execute

    def test_get_by_uid(self, db, logger):
        self._lookup(db).return_value = SimpleNamespace(
            data={"uid": "u1", "nome_completo": "Ana", "is_admin": None, "criado_em": "x"},
        )

        record = UserRepository(db=db, logger=logger).get_by_uid("u1")

        assert record.uid == "u1"
        assert record.is_admin is False
        db.supabase.table.assert_called_with("usuarios")
        db.supabase.table.return_value.select.return_value.eq.assert_called_with("uid", "u1")

    def test_missing_row(self, db, logger):
        self._lookup(db).return_value = None

        with pytest.raises(ProfileNotFound):
            UserRepository(db=db, logger=logger).get_by_uid("u1")

    def test_query_failure(self, db, logger):
        self._lookup(db).side_effect = ConnectionError("reset")

        with pytest.raises(UserLookupFailure) as excinfo:
            UserRepository(db=db, logger=logger).get_by_uid("u1")

        assert "reset" in excinfo.value.reason

    def test_offline(self, offline_db, logger):
        with pytest.raises(UserLookupFailure):
            UserRepository(db=offline_db, logger=logger).get_by_uid("u1")

    def test_update_profile_strips_is_admin(self, db, logger):
        UserRepository(db=db, logger=logger).update_profile(
            "u1", {"nome_completo": "Ana", "is_admin": True},
        )

        db.supabase.table.return_value.update.assert_called_once_with({"nome_completo": "Ana"})

    def test_update_failure(self, offline_db, logger):
        with pytest.raises(RepositoryError):
            UserRepository(db=offline_db, logger=logger).update_profile("u1", {"telefone": "1"})


class TestStoreMembershipRepository:

    def test_list_active_for_user(self, db, logger):
        query = db.supabase.table.return_value.select.return_value
        query.eq.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[
            {"id": 1, "uid_usuario": "u1", "id_loja": 7, "funcao": "entregador",
             "status_vinculacao": "ativo"},
        ])

        memberships = StoreMembershipRepository(db=db, logger=logger).list_active_for_user("u1")

        assert [m.id_loja for m in memberships] == [7]
        query.eq.assert_called_with("uid_usuario", "u1")
        query.eq.return_value.eq.assert_called_with("status_vinculacao", "ativo")

    def test_rows_with_null_columns_still_load(self, db, logger):
        query = db.supabase.table.return_value.select.return_value
        query.eq.return_value.eq.return_value.execute.return_value = SimpleNamespace(data=[
            {"id": 1, "uid_usuario": "u1", "id_loja": "L1", "funcao": "gerente",
             "status_vinculacao": "ativo"},
            {"id": 2, "uid_usuario": "u1", "id_loja": None, "funcao": None,
             "status_vinculacao": "ativo"},
        ])

        memberships = StoreMembershipRepository(db=db, logger=logger).list_active_for_user("u1")

        assert [m.funcao for m in memberships] == ["gerente", None]
        assert memberships[1].id_loja is None

    def test_failure(self, offline_db, logger):
        with pytest.raises(MembershipLookupFailure):
            StoreMembershipRepository(db=offline_db, logger=logger).list_active_for_user("u1")


class TestOrderRepository:

    def test_list_by_status_newest_first(self, db, logger):
        query = db.supabase.table.return_value.select.return_value.in_.return_value
        query.order.return_value.execute.return_value = SimpleNamespace(data=[
            {"id": 2, "id_loja": 1, "status_transporte": "aceito", "total": "10.00"},
        ])

        orders = OrderRepository(db=db, logger=logger).list_by_status(
            [OrderStatus.ACEITO, OrderStatus.EM_ROTA],
        )

        assert orders[0].id == 2
        db.supabase.table.return_value.select.return_value.in_.assert_called_with(
            "status_transporte", ["aceito", "em rota"],
        )
        query.order.assert_called_with("data", desc=True)

    def test_update_status(self, db, logger):
        OrderRepository(db=db, logger=logger).update_status(5, OrderStatus.ENTREGUE)

        db.supabase.table.return_value.update.assert_called_once_with(
            {"status_transporte": "entregue"},
        )
        db.supabase.table.return_value.update.return_value.eq.assert_called_with("id", 5)

    def test_failure(self, offline_db, logger):
        with pytest.raises(RepositoryError):
            OrderRepository(db=offline_db, logger=logger).list_by_status([OrderStatus.PENDENTE])
