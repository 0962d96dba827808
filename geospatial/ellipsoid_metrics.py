"""
Geocentric Metrics on the WGS84 Ellipsoid.

This module converts a geodetic position into the three quantities the
harmonic synthesis needs: the geocentric radius, the geocentric colatitude
and the normal gravity on the ellipsoid surface.

Scientific Context
------------------
Domain: Geodesy, physical geodesy
Model: WGS84(G873) reference ellipsoid and Somigliana normal gravity

The spherical-harmonic expansion is defined on a sphere centred on the
Earth's centre of mass, so the Legendre functions take the geocentric
colatitude and the radial attenuation uses the geocentric radius. The
normal gravity, on the other hand, is evaluated with the geodetic latitude.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Heiskanen, W.A. & Moritz, H. (1967). Physical Geodesy. Freeman.
"""

from dataclasses import dataclass
import math
from typing import Tuple

from common.constants import PhysicalConstants
from common.errors import SingularityError
from common.types import GeocentricMetrics


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid and its normal gravity.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    e2 : float
        First eccentricity squared.
    gamma_e : float
        Normal gravity at the equator in m/s².
    k : float
        Somigliana normal gravity constant.
    name : str
        Identifier for the ellipsoid.
    """
    a: float
    e2: float
    gamma_e: float
    k: float
    name: str


# WGS84(G873), with the constants of the published synthesis program
WGS84Ellipsoid = EllipsoidParameters(
    a=PhysicalConstants.EARTH_SEMI_MAJOR_AXIS.value,
    e2=PhysicalConstants.EARTH_ECCENTRICITY_SQUARED.value,
    gamma_e=PhysicalConstants.EQUATORIAL_NORMAL_GRAVITY.value,
    k=PhysicalConstants.NORMAL_GRAVITY_FORMULA_CONSTANT.value,
    name="WGS84"
)


def radius_of_curvature_prime_vertical(
    latitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Compute the radius of curvature in the prime vertical.

    Parameters
    ----------
    latitude_rad : float
        Geodetic latitude in radians.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature N in meters.

    Notes
    -----
    N = a / (1 - e² sin²φ)^(1/2)
    """
    t1 = math.sin(latitude_rad) * math.sin(latitude_rad)
    return ellipsoid.a / math.sqrt(1.0 - (ellipsoid.e2 * t1))


def geodetic_to_ecef(
    latitude_rad: float,
    longitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> Tuple[float, float, float]:
    """Convert a point on the ellipsoid surface to ECEF coordinates.

    Parameters
    ----------
    latitude_rad : float
        Geodetic latitude in radians.
    longitude_rad : float
        Geodetic longitude in radians.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    Tuple[float, float, float]
        (X, Y, Z) coordinates in meters in ECEF frame.
    """
    n = radius_of_curvature_prime_vertical(latitude_rad, ellipsoid)
    t2 = n * math.cos(latitude_rad)
    x = t2 * math.cos(longitude_rad)
    y = t2 * math.sin(longitude_rad)
    z = (n * (1 - ellipsoid.e2)) * math.sin(latitude_rad)
    return x, y, z


def normal_gravity(
    latitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Somigliana normal gravity on the ellipsoid surface, in m/s².

    γ = γe (1 + k sin²φ) / (1 - e² sin²φ)^(1/2)
    """
    t1 = math.sin(latitude_rad) * math.sin(latitude_rad)
    return ellipsoid.gamma_e * (1 + (ellipsoid.k * t1)) / math.sqrt(1 - (ellipsoid.e2 * t1))


def geocentric_metrics(
    latitude_rad: float,
    longitude_rad: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> GeocentricMetrics:
    """Compute geocentric radius, colatitude and normal gravity at a point.

    Parameters
    ----------
    latitude_rad : float
        Geodetic latitude in radians.
    longitude_rad : float
        Geodetic longitude in radians.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    GeocentricMetrics
        Geocentric latitude and colatitude (radians), radius (meters) and
        normal gravity (m/s²).

    Raises
    ------
    SingularityError
        If the point lies on the rotation axis, where the geocentric
        latitude atan(z / p) is undefined.
    """
    x, y, z = geodetic_to_ecef(latitude_rad, longitude_rad, ellipsoid)

    # Distance from the rotation axis
    p = math.sqrt((x * x) + (y * y))
    if p < PhysicalConstants.POLAR_AXIS_TOLERANCE.value:
        raise SingularityError(
            f"Geocentric latitude undefined at the pole "
            f"(latitude {math.degrees(latitude_rad):.12f}°, "
            f"{p:.3e} m from the rotation axis)"
        )

    radius = math.sqrt((x * x) + (y * y) + (z * z))
    geocentric_latitude = math.atan(z / p)

    return GeocentricMetrics(
        geocentric_latitude=geocentric_latitude,
        colatitude=(math.pi / 2) - geocentric_latitude,
        radius=radius,
        normal_gravity=normal_gravity(latitude_rad, ellipsoid),
    )
