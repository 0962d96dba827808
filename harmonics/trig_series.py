"""
Longitude Trigonometric Series.

Generates sin(mλ) and cos(mλ) for m = 1..nmax from a single evaluation of
sin λ and cos λ, using the Chebyshev recurrence

    sin(mλ) = 2 cos λ · sin((m-1)λ) - sin((m-2)λ)
    cos(mλ) = 2 cos λ · cos((m-1)λ) - cos((m-2)λ)

The longitude is the same in the geodetic and geocentric frames, so the
query longitude is used directly.
"""

from dataclasses import dataclass
import math
from typing import List

from common.constants import PhysicalConstants


@dataclass
class TrigSeries:
    """sin(mλ) and cos(mλ) at index m, m = 1..max_degree.

    Both lists have length max_degree + 2; index 0 and the trailing slot
    are unused.
    """
    sin: List[float]
    cos: List[float]


def longitude_trig_series(
    longitude_rad: float,
    max_degree: int = PhysicalConstants.MAX_DEGREE
) -> TrigSeries:
    """Compute the multiple-angle series for a longitude.

    Parameters
    ----------
    longitude_rad : float
        Longitude in radians.
    max_degree : int
        Highest multiple m to generate (at least 2).

    Returns
    -------
    TrigSeries
        Freshly allocated sine and cosine series.
    """
    sinml = [0.0] * (max_degree + 2)
    cosml = [0.0] * (max_degree + 2)

    a = math.sin(longitude_rad)
    b = math.cos(longitude_rad)

    sinml[1] = a
    cosml[1] = b
    sinml[2] = 2 * b * a
    cosml[2] = 2 * b * b - 1

    for m in range(3, max_degree + 1):
        sinml[m] = 2 * b * sinml[m - 1] - sinml[m - 2]
        cosml[m] = 2 * b * cosml[m - 1] - cosml[m - 2]

    return TrigSeries(sin=sinml, cos=cosml)
