"""
Conversion Between Ellipsoidal and Orthometric Heights.

Ellipsoidal height (h): height above the WGS84 ellipsoid (GNSS height)
Orthometric height (H): height above the geoid (mean sea level)
Geoid undulation (N): height of the geoid above the ellipsoid

Relationship: h = H + N
"""

from enum import Enum

from common.units import AngleLike
from geoid.model import EGM96GeoidModel


class HeightSystem(Enum):
    """Supported height reference systems.

    Attributes
    ----------
    ELLIPSOIDAL : str
        Height above the WGS84 ellipsoid.
    ORTHOMETRIC : str
        Height above the EGM96 geoid.
    """
    ELLIPSOIDAL = "ellipsoidal"
    ORTHOMETRIC = "orthometric"


def orthometric_height(
    model: EGM96GeoidModel,
    latitude: AngleLike,
    longitude: AngleLike,
    ellipsoidal_height_m: float
) -> float:
    """Convert an ellipsoidal height to an orthometric height, H = h - N."""
    return ellipsoidal_height_m - model.compute_altitude_offset(latitude, longitude)


def ellipsoidal_height(
    model: EGM96GeoidModel,
    latitude: AngleLike,
    longitude: AngleLike,
    orthometric_height_m: float
) -> float:
    """Convert an orthometric height to an ellipsoidal height, h = H + N."""
    return orthometric_height_m + model.compute_altitude_offset(latitude, longitude)


def convert_height(
    model: EGM96GeoidModel,
    latitude: AngleLike,
    longitude: AngleLike,
    height_m: float,
    source: HeightSystem,
    target: HeightSystem
) -> float:
    """Convert a height between reference systems.

    Parameters
    ----------
    model : EGM96GeoidModel
        Geoid model supplying N.
    latitude, longitude : float or pint.Quantity
        Position, in degrees when bare numbers.
    height_m : float
        Height in meters in the `source` system.
    source, target : HeightSystem
        Reference systems to convert from and to.

    Returns
    -------
    float
        Height in meters in the `target` system.
    """
    if source == target:
        return height_m
    if target == HeightSystem.ORTHOMETRIC:
        return orthometric_height(model, latitude, longitude, height_m)
    return ellipsoidal_height(model, latitude, longitude, height_m)
