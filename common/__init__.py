"""
Common utilities and infrastructure for the EGM96 geoid synthesis.

This package provides foundational components used across all modules:
- Physical and model constants with uncertainty bounds
- Exception hierarchy
- Angle unit handling
- Value types passed between pipeline stages
- Logging infrastructure
"""

from common.constants import Constant, PhysicalConstants
from common.errors import (
    GeoidError,
    DomainError,
    SingularityError,
    NumericOverflowError,
    CoefficientTableError,
)
from common.units import ureg, Q_, angle_in_degrees, angles_in_degrees
from common.types import GeodeticPoint, GeocentricMetrics
from common.logging_config import get_logger

__all__ = [
    "Constant",
    "PhysicalConstants",
    "GeoidError",
    "DomainError",
    "SingularityError",
    "NumericOverflowError",
    "CoefficientTableError",
    "ureg",
    "Q_",
    "angle_in_degrees",
    "angles_in_degrees",
    "GeodeticPoint",
    "GeocentricMetrics",
    "get_logger",
]
