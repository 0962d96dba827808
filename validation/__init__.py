"""
Validation Framework for the EGM96 Geoid Synthesis.

This module provides numerical consistency checks.
"""

from validation.numerical_checks import (
    ValidationResult,
    NumericalConsistencyChecker,
)

__all__ = [
    "ValidationResult",
    "NumericalConsistencyChecker",
]
