"""
Spherical-Harmonic Synthesis of the Geoid Undulation.

Two series are summed over the packed Legendre buffer:

- the disturbing-potential series, built from the harmonic coefficients
  (with the WGS84 normal field removed) and attenuated by (a/r)^n, which
  Bruns' formula turns into a height anomaly ζ = T / γ;
- the correction series, built from the correction coefficients, which
  gives the height-anomaly-to-undulation difference in centimeters.

    N = GM/(γ r) Σ (a/r)^n Σ P̄nm (C̄nm cos mλ + S̄nm sin mλ)
        + Σ P̄nm (ĉnm cos mλ + ŝnm sin mλ) / 100
        - 0.53 m

The harmonic series starts at degree 2; the degree 0 and 1 correction
terms are added as constants after the loop.

References
----------
- Rapp, R.H. (1997). J. Geodesy 71, 282-289.
- Lemoine, F.G. et al. (1998). NASA/TP-1998-206861, Section 11.
"""

from abc import ABC, abstractmethod
import math
from typing import Sequence, Tuple

from common.constants import PhysicalConstants
from common.errors import NumericOverflowError
from harmonics.trig_series import TrigSeries


class CoefficientSource(ABC):
    """Read-only provider of packed model coefficients.

    The synthesis only ever performs indexed reads through this interface,
    so any table that maps packed indices to coefficient quadruples can be
    injected, including small synthetic ones in tests.
    """

    @abstractmethod
    def coefficient(self, index: int) -> Tuple[float, float, float, float]:
        """Coefficients at a packed index.

        Returns
        -------
        Tuple[float, float, float, float]
            (correction_cos, correction_sin, harmonic_cos, harmonic_sin)
        """
        pass


def synthesize_undulation(
    p: Sequence[float],
    trig: TrigSeries,
    coefficients: CoefficientSource,
    normal_gravity: float,
    radius: float,
    max_degree: int = PhysicalConstants.MAX_DEGREE
) -> float:
    """Sum the harmonic and correction series into an undulation.

    Parameters
    ----------
    p : Sequence[float]
        Packed Legendre buffer for the point's colatitude.
    trig : TrigSeries
        sin(mλ), cos(mλ) for the point's longitude.
    coefficients : CoefficientSource
        Table returning (correction_cos, correction_sin, harmonic_cos,
        harmonic_sin) per packed index.
    normal_gravity : float
        Normal gravity at the point in m/s².
    radius : float
        Geocentric radius of the point in meters.
    max_degree : int
        Truncation degree (default 360).

    Returns
    -------
    float
        Geoid undulation above the WGS84 ellipsoid in meters.

    Raises
    ------
    NumericOverflowError
        If the sums do not produce a finite value.
    """
    sinml = trig.sin
    cosml = trig.cos
    coefficient = coefficients.coefficient

    ar = PhysicalConstants.EARTH_SEMI_MAJOR_AXIS.value / radius
    arn = ar
    ac = 0.0
    a = 0.0

    k = 3
    for n in range(2, max_degree + 1):
        arn *= ar
        k += 1
        cc, _, hc, _ = coefficient(k)
        total = p[k] * hc
        totalc = p[k] * cc

        for m in range(1, n + 1):
            k += 1
            cc, cs, hc, hs = coefficient(k)
            tempc = cc * cosml[m] + cs * sinml[m]
            temp = hc * cosml[m] + hs * sinml[m]
            totalc += p[k] * tempc
            total += p[k] * temp

        ac += totalc
        a += total * arn

    c00 = coefficient(1)
    c10 = coefficient(2)
    c11 = coefficient(3)
    ac += c00[0] + (p[2] * c10[0]) + (p[3] * (c11[0] * cosml[1] + c11[1] * sinml[1]))

    undulation = (
        ((a * PhysicalConstants.GRAVITATIONAL_CONSTANT.value) / (normal_gravity * radius))
        + (ac / PhysicalConstants.CORRECTION_SCALE)
        + PhysicalConstants.ZERO_DEGREE_UNDULATION.value
    )

    if not math.isfinite(undulation):
        raise NumericOverflowError(
            f"Synthesis produced a non-finite undulation ({undulation}) "
            f"at radius {radius} m"
        )
    return undulation
