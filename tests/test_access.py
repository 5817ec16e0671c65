# =============================================================================
# tests/test_access.py - Role ordering
# =============================================================================

import pytest

from entregas.access import coerce_role, has_access, role_order
from entregas.models.enums import Role


def test_total_order():
    ranks = [role_order(role) for role in (Role.VISITANTE, Role.ENTREGADOR, Role.GERENTE, Role.ADMIN)]

    assert ranks == [0, 1, 2, 3]


@pytest.mark.parametrize("label", ["", "erro", "ADMIN", None, 3])
def test_unknown_labels_rank_lowest(label):
    assert role_order(label) == 0
    assert coerce_role(label) == Role.VISITANTE


def test_plain_strings_compare_like_roles():
    assert has_access("gerente", Role.ENTREGADOR)
    assert has_access("entregador", "entregador")
    assert not has_access("entregador", "gerente")


def test_unknown_required_role_ranks_as_visitante():
    assert has_access(Role.VISITANTE, "typo")
