"""
Fully Normalized Associated Legendre Functions.

For a fixed order m the functions P̄(n, m)(cos θ), n = m..nmax, are built
from the sectoral value P̄(m, m) with the three-term recurrence in degree

    P̄(n, m) = √(2n+1) / (√(n+m) √(n-m))
              · ( √(2n-1) cos θ P̄(n-1, m)
                  - √(n+m-1) √(n-m-1) / √(2n-3) · P̄(n-2, m) )

which avoids factorials and stays stable to degree 360 in double
precision. All square roots come from the model's `ScalingTables`.

Buffer layout
-------------
The per-order buffer stores P̄(n, m) at position n + 1, so position 1 is
degree 0. Length is nmax + 2; position 0 is unused.

References
----------
- Rapp, R.H. (1982). A FORTRAN program for the computation of gravimetric
  quantities from high degree spherical harmonic expansions. OSU Report 334.
- Holmes, S.A. & Featherstone, W.E. (2002). A unified approach to the
  Clenshaw summation and the recursive computation of very high degree and
  order normalised associated Legendre functions. J. Geodesy 76, 279-299.
"""

import math
from typing import List

from common.errors import DomainError
from harmonics.indexing import packed_index, packed_length
from harmonics.scaling import ScalingTables


def normalized_legendre(
    m: int,
    theta: float,
    tables: ScalingTables
) -> List[float]:
    """Compute P̄(n, m)(cos θ) for all degrees n = m..nmax of one order.

    Parameters
    ----------
    m : int
        Harmonic order, 0 <= m <= nmax.
    theta : float
        Geocentric colatitude in radians.
    tables : ScalingTables
        Precomputed √n and 1/√n for n up to 2·nmax + 1.

    Returns
    -------
    List[float]
        Buffer with P̄(n, m) at position n + 1.

    Raises
    ------
    DomainError
        If m is outside 0..nmax.

    Notes
    -----
    A NaN or infinite theta propagates into the buffer unchanged; callers
    reject such inputs before reaching this function.
    """
    max_degree = tables.max_degree
    if not 0 <= m <= max_degree:
        raise DomainError(f"Order {m} outside 0..{max_degree}")

    drts = tables.sqrt
    dirt = tables.inv_sqrt

    nmax1 = max_degree + 1
    m1 = m + 1
    m2 = m + 2
    m3 = m + 3

    rleg = [0.0] * (max_degree + 2)
    rlnn = [0.0] * (max_degree + 2)

    cothet = math.cos(theta)
    sithet = math.sin(theta)

    # Sectoral values P̄(k, k) at position k + 1
    rlnn[1] = 1.0
    rlnn[2] = sithet * drts[3]
    for n1 in range(3, m1 + 1):
        n = n1 - 1
        n2 = 2 * n
        rlnn[n1] = drts[n2 + 1] * dirt[n2] * sithet * rlnn[n]

    if m == 1:
        rleg[2] = rlnn[2]
        rleg[3] = drts[5] * cothet * rleg[2]
    elif m == 0:
        rleg[1] = 1.0
        rleg[2] = cothet * drts[3]
    rleg[m1] = rlnn[m1]

    if m2 <= nmax1:
        rleg[m2] = drts[m1 * 2 + 1] * cothet * rleg[m1]
        for n1 in range(m3, nmax1 + 1):
            n = n1 - 1
            # Degree too low for the three-term form; the square roots
            # below would take negative arguments.
            if (m == 0 and n < 2) or (m == 1 and n < 3):
                continue
            n2 = 2 * n
            rleg[n1] = drts[n2 + 1] * dirt[n + m] * dirt[n - m] * (
                drts[n2 - 1] * cothet * rleg[n1 - 1]
                - drts[n + m - 1] * drts[n - m - 1] * dirt[n2 - 3] * rleg[n1 - 2]
            )

    return rleg


def triangular_legendre_buffer(theta: float, tables: ScalingTables) -> List[float]:
    """Compute P̄(n, m)(cos θ) for every term, in packed order.

    Runs the per-order recursion for m = 0..nmax and scatters each order's
    values into a freshly allocated triangular buffer.

    Parameters
    ----------
    theta : float
        Geocentric colatitude in radians.
    tables : ScalingTables
        Precomputed square-root tables.

    Returns
    -------
    List[float]
        Buffer P with P̄(n, m) at `packed_index(n, m)`.
    """
    max_degree = tables.max_degree
    p = [0.0] * packed_length(max_degree)

    for m in range(max_degree + 1):
        rleg = normalized_legendre(m, theta, tables)
        for n in range(m, max_degree + 1):
            p[packed_index(n, m)] = rleg[n + 1]

    return p
