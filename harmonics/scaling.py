"""
Square-Root Scaling Tables for the Legendre Recursion.

The normalized Legendre recurrence multiplies and divides by square roots
of small integers up to 2·nmax + 1. Computing them once per model keeps
the per-query work to table lookups.
"""

from dataclasses import dataclass
import math
from typing import Tuple

from common.constants import PhysicalConstants


@dataclass(frozen=True)
class ScalingTables:
    """Immutable tables of √n and 1/√n.

    Attributes
    ----------
    max_degree : int
        Maximum harmonic degree the tables serve.
    sqrt : Tuple[float, ...]
        √n at index n, for n = 1..2·max_degree + 1. Index 0 holds 0.0.
    inv_sqrt : Tuple[float, ...]
        1/√n at index n, same layout.
    """
    max_degree: int
    sqrt: Tuple[float, ...]
    inv_sqrt: Tuple[float, ...]

    @classmethod
    def build(cls, max_degree: int = PhysicalConstants.MAX_DEGREE) -> 'ScalingTables':
        """Build the tables for a given maximum degree.

        Parameters
        ----------
        max_degree : int
            Maximum harmonic degree (default 360).

        Returns
        -------
        ScalingTables
            Tables populated for n = 1..2·max_degree + 1.
        """
        nmax2p = (2 * max_degree) + 1

        drts = [0.0] * (nmax2p + 1)
        dirt = [0.0] * (nmax2p + 1)
        for n in range(1, nmax2p + 1):
            drts[n] = math.sqrt(n)
            dirt[n] = 1 / drts[n]

        return cls(max_degree=max_degree, sqrt=tuple(drts), inv_sqrt=tuple(dirt))

    @property
    def size(self) -> int:
        """Largest populated index, 2·max_degree + 1."""
        return len(self.sqrt) - 1
