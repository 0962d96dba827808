import math

import pytest

from common.errors import DomainError
from harmonics import ScalingTables, checked_packed_index, packed_index, packed_length


def test_scaling_tables_cover_twice_degree_plus_one(scaling_tables):
    assert scaling_tables.max_degree == 360
    assert scaling_tables.size == 721
    assert scaling_tables.sqrt[0] == 0.0
    assert scaling_tables.inv_sqrt[0] == 0.0


def test_scaling_tables_are_reciprocal(scaling_tables):
    for n in range(1, scaling_tables.size + 1):
        assert scaling_tables.sqrt[n] * scaling_tables.inv_sqrt[n] == pytest.approx(1.0, rel=1e-12)
        assert scaling_tables.sqrt[n] == math.sqrt(n)


def test_scaling_tables_for_small_degree():
    tables = ScalingTables.build(4)
    assert tables.size == 9
    assert len(tables.inv_sqrt) == 10


def test_packed_index_first_slots():
    assert packed_index(0, 0) == 1
    assert packed_index(1, 0) == 2
    assert packed_index(1, 1) == 3
    assert packed_index(2, 0) == 4
    assert packed_index(360, 360) == 65341
    assert packed_length() == 65342


def test_packed_index_matches_buffer_position_formula():
    # i is the 1-based Legendre buffer position of degree n
    for n in range(0, 361, 7):
        i = n + 1
        for m in range(n + 1):
            assert packed_index(n, m) == ((i - 1) * i) // 2 + m + 1


def test_packed_index_is_a_bijection():
    indices = [packed_index(n, m) for n in range(361) for m in range(n + 1)]
    assert sorted(indices) == list(range(1, 65342))


def test_orders_of_one_degree_are_contiguous():
    for n in (2, 57, 360):
        assert packed_index(n, 0) == packed_index(n - 1, n - 1) + 1


@pytest.mark.parametrize("n, m", [(2, 3), (-1, 0), (361, 0), (5, -1)])
def test_checked_packed_index_rejects_invalid_pairs(n, m):
    with pytest.raises(DomainError):
        checked_packed_index(n, m)


def test_checked_packed_index_honours_max_degree():
    assert checked_packed_index(12, 12, max_degree=12) == packed_length(12) - 1
    with pytest.raises(DomainError):
        checked_packed_index(13, 0, max_degree=12)
