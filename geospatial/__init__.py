"""
Geospatial Module for the EGM96 Geoid Synthesis.

All ellipsoid calculations used by the synthesis originate here:
- WGS84(G873) ellipsoid and normal gravity parameters
- Geodetic to ECEF conversion on the ellipsoid surface
- Geocentric radius, colatitude and normal gravity at a point
"""

from geospatial.ellipsoid_metrics import (
    EllipsoidParameters,
    WGS84Ellipsoid,
    radius_of_curvature_prime_vertical,
    geodetic_to_ecef,
    normal_gravity,
    geocentric_metrics,
)

__all__ = [
    "EllipsoidParameters",
    "WGS84Ellipsoid",
    "radius_of_curvature_prime_vertical",
    "geodetic_to_ecef",
    "normal_gravity",
    "geocentric_metrics",
]
