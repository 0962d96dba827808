"""
Type Definitions for the Geoid Synthesis.

These dataclasses are the values passed between the public entry point,
the ellipsoid conversion and the harmonic synthesis.
"""

from dataclasses import dataclass
import math

from common.errors import DomainError


@dataclass(frozen=True)
class GeodeticPoint:
    """A query position on the WGS84 ellipsoid, in degrees.

    Attributes
    ----------
    latitude : float
        Geodetic latitude in DEGREES. Range: [-90, 90].
    longitude : float
        Geodetic longitude in DEGREES, normalized to [0, 360).

    Notes
    -----
    Latitudes outside the range are rejected; longitudes are wrapped
    instead, so -10° and 350° name the same point. Longitudes already in
    [0, 360) are kept bit-for-bit.

    Examples
    --------
    >>> GeodeticPoint.create(38.5, -90.0).longitude
    270.0
    """
    latitude: float
    longitude: float

    @classmethod
    def create(cls, latitude: float, longitude: float) -> 'GeodeticPoint':
        """Validate and normalize a latitude/longitude pair.

        Raises
        ------
        DomainError
            If either value is not finite, or the latitude lies outside
            [-90, 90].
        """
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise DomainError(
                f"Coordinates must be finite, got ({latitude}, {longitude})"
            )
        if not -90.0 <= latitude <= 90.0:
            raise DomainError(
                f"Latitude {latitude}° out of range [-90°, 90°]"
            )
        if not 0.0 <= longitude < 360.0:
            longitude = longitude % 360.0
            # A tiny negative input can round up to exactly 360.0
            if longitude == 360.0:
                longitude = 0.0
        return cls(latitude=latitude, longitude=longitude)

    def to_radians(self):
        """Convert to radians the way the synthesis program does.

        Returns
        -------
        Tuple[float, float]
            (latitude_rad, longitude_rad)
        """
        rad = 180.0 / math.pi
        return self.latitude / rad, self.longitude / rad


@dataclass(frozen=True)
class GeocentricMetrics:
    """Geocentric quantities at a point on the ellipsoid.

    Attributes
    ----------
    geocentric_latitude : float
        Geocentric latitude in RADIANS.
    colatitude : float
        Geocentric colatitude π/2 - geocentric latitude, in RADIANS.
    radius : float
        Geocentric radius in METERS.
    normal_gravity : float
        Normal gravity on the ellipsoid in M/S².
    """
    geocentric_latitude: float
    colatitude: float
    radius: float
    normal_gravity: float
