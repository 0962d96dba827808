"""
EGM96 geoid undulation model.

This is the public surface of the project:
- `EGM96GeoidModel`: undulation at a point, for arrays, and on grids
- Height conversion between the WGS84 ellipsoid and the geoid
"""

from geoid.model import EGM96GeoidModel
from geoid.heights import (
    HeightSystem,
    orthometric_height,
    ellipsoidal_height,
    convert_height,
)

__all__ = [
    "EGM96GeoidModel",
    "HeightSystem",
    "orthometric_height",
    "ellipsoidal_height",
    "convert_height",
]
