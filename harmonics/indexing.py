"""
Packed Indexing of Spherical-Harmonic Terms.

Coefficients and Legendre values for all (n, m) with 0 <= m <= n <= nmax
are stored in one triangular array, degree by degree:

    (0,0) (1,0) (1,1) (2,0) (2,1) (2,2) (3,0) ...
      1     2     3     4     5     6     7

Slot 0 is unused, so the array for nmax = 360 has 65342 entries.
"""

from common.constants import PhysicalConstants
from common.errors import DomainError


def packed_index(n: int, m: int) -> int:
    """Packed slot of degree n, order m.

    Equivalent to ((i - 1) i)/2 + m + 1 with the 1-based Legendre buffer
    position i = n + 1. The caller guarantees 0 <= m <= n <= nmax.
    """
    return ((n * (n + 1)) // 2) + m + 1


def checked_packed_index(
    n: int,
    m: int,
    max_degree: int = PhysicalConstants.MAX_DEGREE
) -> int:
    """Packed slot of (n, m), validating the pair first.

    Raises
    ------
    DomainError
        If the pair is not 0 <= m <= n <= max_degree.
    """
    if not 0 <= m <= n <= max_degree:
        raise DomainError(
            f"No harmonic term of degree {n}, order {m} "
            f"(need 0 <= m <= n <= {max_degree})"
        )
    return packed_index(n, m)


def packed_length(max_degree: int = PhysicalConstants.MAX_DEGREE) -> int:
    """Array length needed to hold every slot up to max_degree."""
    return packed_index(max_degree, max_degree) + 1
