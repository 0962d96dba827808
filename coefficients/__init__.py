"""
EGM96 coefficient data.

The coefficient table is an external, read-only resource injected into the
geoid model. This package provides the in-memory table and the loaders for
the published NGA files.
"""

from coefficients.table import CoefficientTable
from coefficients.loaders import (
    CoefficientSourceConfig,
    CoefficientProvenance,
    NGACoefficientLoader,
    load_coefficient_table,
    load_nga_coefficients,
    read_coefficient_records,
    remove_normal_field,
)

__all__ = [
    "CoefficientTable",
    "CoefficientSourceConfig",
    "CoefficientProvenance",
    "NGACoefficientLoader",
    "load_coefficient_table",
    "load_nga_coefficients",
    "read_coefficient_records",
    "remove_normal_field",
]
