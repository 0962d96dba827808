"""
Unit Handling for Angular Inputs.

Coordinates enter the model in degrees. Callers may pass bare floats, which
are taken as degrees, or `pint` quantities carrying any angular unit, which
are converted to degrees before validation.

Example Usage
-------------
>>> from common.units import Q_, angle_in_degrees
>>> angle_in_degrees(Q_(90, 'arcminute'))
1.5
>>> angle_in_degrees(45.0)
45.0
"""

from typing import Union

import numpy as np
import pint
from pint import UnitRegistry as PintUnitRegistry

from common.errors import DomainError

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity

AngleLike = Union[float, int, pint.Quantity]


def angle_in_degrees(value: AngleLike) -> float:
    """Return an angle in degrees as a plain float.

    Parameters
    ----------
    value : float or pint.Quantity
        A bare number (degrees) or an angular quantity.

    Returns
    -------
    float
        The angle in degrees.

    Raises
    ------
    DomainError
        If a quantity does not have angular (dimensionless) units.
    """
    if isinstance(value, pint.Quantity):
        try:
            return float(value.to(ureg.degree).magnitude)
        except pint.DimensionalityError as e:
            raise DomainError(
                f"Expected an angle, got a quantity in {value.units}"
            ) from e
    return float(value)


def angles_in_degrees(values) -> np.ndarray:
    """Array counterpart of `angle_in_degrees`.

    Parameters
    ----------
    values : array_like or pint.Quantity
        Bare numbers (degrees) or an angular quantity array.

    Returns
    -------
    np.ndarray
        float64 array of angles in degrees.
    """
    if isinstance(values, pint.Quantity):
        try:
            values = values.to(ureg.degree).magnitude
        except pint.DimensionalityError as e:
            raise DomainError(
                f"Expected angles, got a quantity in {values.units}"
            ) from e
    return np.asarray(values, dtype=np.float64)
