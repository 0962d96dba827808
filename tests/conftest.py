import math
import os
from pathlib import Path

import pytest

from coefficients import CoefficientSourceConfig, CoefficientTable, load_coefficient_table
from geoid import EGM96GeoidModel
from harmonics import ScalingTables

SMALL_DEGREE = 12


def closed_form_legendre(n: int, m: int, theta: float) -> float:
    """Fully normalized P̄(n, m)(cos θ) for the low degrees used in tests."""
    c = math.cos(theta)
    s = math.sin(theta)
    table = {
        (0, 0): 1.0,
        (1, 0): math.sqrt(3) * c,
        (1, 1): math.sqrt(3) * s,
        (2, 0): math.sqrt(5) / 2 * (3 * c * c - 1),
        (2, 1): math.sqrt(15) * s * c,
        (2, 2): math.sqrt(15) / 2 * s * s,
        (3, 0): math.sqrt(7) / 2 * (5 * c ** 3 - 3 * c),
        (3, 2): math.sqrt(105) / 2 * s * s * c,
        (3, 3): math.sqrt(35 / 8) * s ** 3,
    }
    return table[(n, m)]


@pytest.fixture(scope="session")
def scaling_tables():
    return ScalingTables.build()


@pytest.fixture(scope="session")
def zero_model():
    return EGM96GeoidModel(CoefficientTable.zeros())


@pytest.fixture(scope="session")
def small_model():
    """Degree-12 model with a handful of low-degree terms, fast to query."""
    table = CoefficientTable.from_terms(
        harmonic={
            (2, 0): (2.4e-7, 0.0),
            (2, 2): (2.4e-6, -1.4e-6),
            (3, 1): (2.0e-6, 2.5e-7),
            (4, 3): (9.9e-7, -2.0e-7),
            (8, 5): (-2.2e-8, 3.0e-8),
        },
        correction={
            (0, 0): (-52.0, 0.0),
            (2, 1): (3.0, -1.0),
        },
        max_degree=SMALL_DEGREE,
    )
    return EGM96GeoidModel(table, max_degree=SMALL_DEGREE)


def _reference_config():
    data_root = os.environ.get("EGM96_DATA_DIR")
    if not data_root:
        return None
    config = CoefficientSourceConfig(data_root=Path(data_root))
    if not (config.harmonic_path.exists() and config.correction_path.exists()):
        return None
    return config


@pytest.fixture(scope="session")
def reference_model():
    config = _reference_config()
    if config is None:
        pytest.skip("EGM96_DATA_DIR does not point at the EGM96 and CORCOEF files")
    return EGM96GeoidModel(load_coefficient_table(config))
