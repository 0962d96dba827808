"""
Physical and Model Constants for EGM96 Geoid Synthesis.

This module provides the constants of the WGS84(G873) reference system and
of the EGM96 spherical-harmonic model, with their uncertainty bounds and
sources. All constants are defined in SI units.

The numeric values below are reproduced exactly as used by the published
NGA synthesis program. Changing any of them, even in the last digit,
changes the synthesized undulations.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- EGM96: Lemoine et al. (1998), NASA/TP-1998-206861
- Rapp, R.H. (1997). Use of potential coefficient models for geoid
  undulation determinations using a spherical harmonic representation
  of the height anomaly/geoid undulation difference. J. Geodesy 71, 282-289.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Constant:
    """A physical constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class PhysicalConstants:
    """Registry of constants used by the geoid synthesis.

    WGS84 Ellipsoid
    ---------------
    Geometry and normal gravity of the reference ellipsoid, used to turn
    geodetic coordinates into geocentric radius, colatitude and gravity.

    EGM96 Model
    -----------
    Size of the expansion and the reference terms that tie the synthesized
    potential back to the WGS84 ellipsoid.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_ECCENTRICITY_SQUARED: Final[Constant] = Constant(
        value=0.00669437999013,
        uncertainty=1e-14,
        unit="dimensionless",
        source="WGS84(G873), NGA F477 synthesis program",
        description="First eccentricity squared: e² = (a² - b²) / a²"
    )

    EQUATORIAL_NORMAL_GRAVITY: Final[Constant] = Constant(
        value=9.7803253359,
        uncertainty=0.0,
        unit="m/s²",
        source="WGS84, NIMA TR8350.2",
        description="Normal gravity on the ellipsoid at the equator"
    )

    NORMAL_GRAVITY_FORMULA_CONSTANT: Final[Constant] = Constant(
        value=0.00193185265246,
        uncertainty=0.0,
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2 (Somigliana formula)",
        description="Normal gravity formula constant k = (b γp) / (a γe) - 1"
    )

    GRAVITATIONAL_CONSTANT: Final[Constant] = Constant(
        value=0.3986004418e15,
        uncertainty=8e5,
        unit="m³/s²",
        source="WGS84, NIMA TR8350.2",
        description="Earth's gravitational constant GM, mass of atmosphere included"
    )

    # =========================================================================
    # EGM96 Model Parameters
    # =========================================================================

    MAX_DEGREE: Final[int] = 360

    # Length of the packed coefficient arrays: n(n+1)/2 + m + 1 for
    # n = m = 360 is 65341, plus the unused slot 0.
    COEFFICIENT_COUNT: Final[int] = 65342

    ZERO_DEGREE_UNDULATION: Final[Constant] = Constant(
        value=-0.53,
        uncertainty=0.0,
        unit="m",
        source="Rapp (1997); NGA F477 synthesis program",
        description="Zero-degree term referring EGM96 undulations to the WGS84 ellipsoid"
    )

    # The correction coefficients give height anomaly to undulation in cm.
    CORRECTION_SCALE: Final[float] = 100.0

    # Even zonal harmonics of the WGS84 normal field, subtracted from the
    # EGM96 C(n, 0) coefficients before synthesis.
    EVEN_ZONAL_HARMONICS: Final[dict] = {
        2: 0.108262982131e-2,
        4: -0.237091120053e-05,
        6: 0.608346498882e-8,
        8: -0.142681087920e-10,
        10: 0.121439275882e-13,
    }

    # Points within this distance of the rotation axis have no defined
    # geocentric latitude.
    POLAR_AXIS_TOLERANCE: Final[Constant] = Constant(
        value=1e-6,
        uncertainty=0.0,
        unit="m",
        source="numerical tolerance",
        description="Distance from the rotation axis treated as the pole"
    )
