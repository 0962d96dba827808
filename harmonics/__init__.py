"""
Spherical-harmonic machinery for the EGM96 synthesis.

- Square-root scaling tables
- Packed (degree, order) indexing
- Longitude multiple-angle series
- Normalized associated Legendre recursion
- Undulation synthesis
"""

from harmonics.scaling import ScalingTables
from harmonics.indexing import packed_index, checked_packed_index, packed_length
from harmonics.trig_series import TrigSeries, longitude_trig_series
from harmonics.legendre import normalized_legendre, triangular_legendre_buffer
from harmonics.synthesis import CoefficientSource, synthesize_undulation

__all__ = [
    "ScalingTables",
    "packed_index",
    "checked_packed_index",
    "packed_length",
    "TrigSeries",
    "longitude_trig_series",
    "normalized_legendre",
    "triangular_legendre_buffer",
    "CoefficientSource",
    "synthesize_undulation",
]
