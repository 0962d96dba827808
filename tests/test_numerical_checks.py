import dataclasses

import pytest

from common.errors import GeoidError
from harmonics import ScalingTables
from validation import NumericalConsistencyChecker


def test_all_checks_pass_for_built_tables(scaling_tables):
    checker = NumericalConsistencyChecker(scaling_tables)
    results = checker.check_all()
    assert len(results) == 5
    assert all(result.passed for result in results), [r.message for r in results if not r.passed]


def test_index_bijection_details():
    result = NumericalConsistencyChecker(ScalingTables.build(20)).check_index_bijection()
    assert result.passed
    assert result.details["max_index"] == 231


def test_corrupted_scaling_table_fails():
    tables = ScalingTables.build(10)
    inv_sqrt = list(tables.inv_sqrt)
    inv_sqrt[7] *= 1.001
    corrupted = dataclasses.replace(tables, inv_sqrt=tuple(inv_sqrt))

    result = NumericalConsistencyChecker(corrupted, log_violations=False).check_scaling_tables()
    assert not result.passed
    assert result.details["max_deviation"] == pytest.approx(1e-3, rel=1e-6)


def test_strict_mode_raises():
    tables = ScalingTables.build(10)
    sqrt = list(tables.sqrt)
    sqrt[3] += 0.5
    corrupted = dataclasses.replace(tables, sqrt=tuple(sqrt))
    checker = NumericalConsistencyChecker(corrupted, strict_mode=True, log_violations=False)
    with pytest.raises(GeoidError):
        checker.check_scaling_tables()
