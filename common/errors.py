"""
Exception Types for the Geoid Synthesis.

Every failure the synthesis can report derives from `GeoidError`, and each
concrete type also derives from the built-in exception a caller would
naturally catch (``ValueError`` for bad input, ``ArithmeticError`` for a
singular point, ``OverflowError`` for a blown-up result).
"""


class GeoidError(Exception):
    """Base class for all geoid synthesis errors."""


class DomainError(GeoidError, ValueError):
    """Input outside the domain of the model.

    Raised for latitudes outside [-90°, 90°], non-finite coordinates, and
    (degree, order) pairs outside 0 <= m <= n <= 360.
    """


class SingularityError(GeoidError, ArithmeticError):
    """Geocentric latitude is undefined at the requested point.

    Occurs at the poles, where the distance from the rotation axis
    vanishes and atan(z / p) has no defined value.
    """


class NumericOverflowError(GeoidError, OverflowError):
    """The synthesis produced a non-finite value."""


class CoefficientTableError(GeoidError, ValueError):
    """Coefficient data is missing, malformed or has the wrong shape."""
