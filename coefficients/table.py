"""
Packed EGM96 Coefficient Table.

The table holds, for every packed index 1..65341, four coefficients:

    column 0  correction cosine   ĉnm  (height anomaly to undulation, cm)
    column 1  correction sine     ŝnm
    column 2  harmonic cosine     C̄nm  (normal field removed)
    column 3  harmonic sine       S̄nm

The synthesis reads it only through `coefficient(index)`. The backing
array is made read-only so a table can be shared between threads and
between model instances.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants
from common.errors import CoefficientTableError
from common.logging_config import get_logger
from harmonics.indexing import checked_packed_index, packed_index, packed_length
from harmonics.synthesis import CoefficientSource

logger = get_logger(__name__)

CORRECTION_COS = 0
CORRECTION_SIN = 1
HARMONIC_COS = 2
HARMONIC_SIN = 3

TermMap = Dict[Tuple[int, int], Tuple[float, float]]


class CoefficientTable(CoefficientSource):
    """In-memory packed coefficient table.

    Parameters
    ----------
    values : array_like
        Array of shape (packed_length(max_degree), 4). Copied on input.
    max_degree : int
        Maximum degree of the expansion (default 360).
    source : str
        Free-form description of where the values came from.
    metadata : dict, optional
        JSON-serializable details stored alongside the values by `save`.

    Raises
    ------
    CoefficientTableError
        If the array does not have the expected shape or holds non-finite
        values.

    Examples
    --------
    >>> table = CoefficientTable.from_terms(correction={(0, 0): (100.0, 0.0)})
    >>> table.term(0, 0)
    (100.0, 0.0, 0.0, 0.0)
    """

    COLUMNS = ("correction_cos", "correction_sin", "harmonic_cos", "harmonic_sin")

    def __init__(
        self,
        values,
        max_degree: int = PhysicalConstants.MAX_DEGREE,
        source: str = "in-memory",
        metadata: Optional[Dict[str, Any]] = None
    ):
        array = np.array(values, dtype=np.float64)
        expected = (packed_length(max_degree), len(self.COLUMNS))
        if array.shape != expected:
            raise CoefficientTableError(
                f"Coefficient array has shape {array.shape}, expected {expected}"
            )
        if not np.all(np.isfinite(array)):
            raise CoefficientTableError("Coefficient array contains non-finite values")

        array.setflags(write=False)
        self._values = array
        # Plain-float rows keep the synthesis loop off numpy scalars
        self._rows = [tuple(row) for row in array.tolist()]
        self.max_degree = max_degree
        self.source = source
        self.metadata = dict(metadata or {})

    def coefficient(self, index: int) -> Tuple[float, float, float, float]:
        """Coefficients at a packed index (slot 0 is all zeros)."""
        return self._rows[index]

    def term(self, n: int, m: int) -> Tuple[float, float, float, float]:
        """Coefficients of degree n, order m."""
        return self._rows[checked_packed_index(n, m, self.max_degree)]

    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only view of the packed (N, 4) array."""
        return self._values

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(max_degree={self.max_degree}, "
            f"source={self.source!r})"
        )

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls, max_degree: int = PhysicalConstants.MAX_DEGREE) -> 'CoefficientTable':
        """A table with every coefficient set to zero."""
        return cls(
            np.zeros((packed_length(max_degree), len(cls.COLUMNS))),
            max_degree=max_degree,
            source="zeros"
        )

    @classmethod
    def from_terms(
        cls,
        harmonic: Optional[TermMap] = None,
        correction: Optional[TermMap] = None,
        max_degree: int = PhysicalConstants.MAX_DEGREE,
        source: str = "terms"
    ) -> 'CoefficientTable':
        """Build a sparse table from {(n, m): (cos, sin)} mappings.

        Unlisted terms are zero.
        """
        values = np.zeros((packed_length(max_degree), len(cls.COLUMNS)))
        for (n, m), (c, s) in (correction or {}).items():
            k = checked_packed_index(n, m, max_degree)
            values[k, CORRECTION_COS] = c
            values[k, CORRECTION_SIN] = s
        for (n, m), (c, s) in (harmonic or {}).items():
            k = checked_packed_index(n, m, max_degree)
            values[k, HARMONIC_COS] = c
            values[k, HARMONIC_SIN] = s
        return cls(values, max_degree=max_degree, source=source)

    @classmethod
    def from_records(
        cls,
        harmonic: Optional[NDArray[np.float64]] = None,
        correction: Optional[NDArray[np.float64]] = None,
        max_degree: int = PhysicalConstants.MAX_DEGREE,
        source: str = "records"
    ) -> 'CoefficientTable':
        """Build a table from (n, m, C, S) record arrays.

        Parameters
        ----------
        harmonic, correction : ndarray, optional
            Arrays of shape (N, >=4) whose first four columns are degree,
            order, cosine and sine coefficient. Extra columns (such as
            standard deviations) are ignored.
        max_degree : int
            Records above this degree are skipped with a warning.
        source : str
            Description stored on the table.

        Raises
        ------
        CoefficientTableError
            If a record has a non-integral or invalid (n, m) pair.
        """
        values = np.zeros((packed_length(max_degree), len(cls.COLUMNS)))
        for records, cos_col, sin_col, label in (
            (correction, CORRECTION_COS, CORRECTION_SIN, "correction"),
            (harmonic, HARMONIC_COS, HARMONIC_SIN, "harmonic"),
        ):
            if records is None:
                continue
            skipped = _scatter_records(records, values, cos_col, sin_col, max_degree)
            if skipped:
                logger.warning(
                    f"Skipped {skipped} {label} records above degree {max_degree}"
                )
        return cls(values, max_degree=max_degree, source=source)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, path: Union[str, Path]) -> None:
        """Save the packed array to a compressed ``.npz`` file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'wb') as f:
            np.savez_compressed(
                f,
                values=self._values,
                max_degree=np.int64(self.max_degree),
                metadata=np.array(json.dumps(self.metadata)),
            )
        logger.info(f"Saved coefficient table to {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'CoefficientTable':
        """Load a table written by `save`.

        Raises
        ------
        CoefficientTableError
            If the file is missing or lacks the expected arrays.
        """
        path = Path(path)
        try:
            with np.load(path) as data:
                values = data["values"]
                max_degree = int(data["max_degree"])
                metadata = json.loads(str(data["metadata"])) if "metadata" in data.files else {}
        except (OSError, KeyError, ValueError) as e:
            raise CoefficientTableError(
                f"Cannot read coefficient table from {path}: {e}"
            ) from e
        logger.info(f"Loaded coefficient table from {path}")
        return cls(values, max_degree=max_degree, source=str(path), metadata=metadata)


def _scatter_records(
    records: Iterable,
    values: NDArray[np.float64],
    cos_col: int,
    sin_col: int,
    max_degree: int
) -> int:
    """Write (n, m, C, S) records into a packed array; return skip count."""
    records = np.asarray(records, dtype=np.float64)
    if records.ndim != 2 or records.shape[1] < 4:
        raise CoefficientTableError(
            f"Coefficient records must have at least 4 columns, got shape {records.shape}"
        )

    degrees = records[:, 0]
    orders = records[:, 1]
    if np.any(degrees != np.round(degrees)) or np.any(orders != np.round(orders)):
        raise CoefficientTableError("Degree and order columns must hold integers")

    skipped = 0
    for n, m, c, s in records[:, :4].tolist():
        n, m = int(n), int(m)
        if not 0 <= m <= n:
            raise CoefficientTableError(f"Invalid degree/order pair ({n}, {m})")
        if n > max_degree:
            skipped += 1
            continue
        k = packed_index(n, m)
        values[k, cos_col] = c
        values[k, sin_col] = s
    return skipped
