"""
Numerical Consistency Checks for the Geoid Synthesis.

These checks verify the invariants the synthesis relies on rather than any
particular output value.

Check Categories
----------------
1. Scaling tables: √n · (1/√n) == 1 for every tabulated n
2. Packed indexing: (n, m) -> index is a bijection onto 1..L-1
3. Legendre bounds: every P̄(n, m)(cos θ) is finite and bounded by
   √(2(2n+1)), so a blow-up in the recursion is caught
"""

from dataclasses import dataclass
import math
from typing import Any, Dict, Iterable, List

import numpy as np

from common.errors import GeoidError, NumericOverflowError
from common.logging_config import get_logger
from harmonics.indexing import packed_index, packed_length
from harmonics.legendre import normalized_legendre
from harmonics.scaling import ScalingTables

# Colatitudes (radians) used by check_all: near-polar, mid-latitude, equator
DEFAULT_COLATITUDES = (1e-3, math.radians(45.0), math.pi / 2)


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


class NumericalConsistencyChecker:
    """Checker for the numerical invariants of the synthesis."""

    def __init__(
        self,
        tables: ScalingTables,
        strict_mode: bool = False,
        log_violations: bool = True
    ):
        """Initialize the checker.

        Parameters
        ----------
        tables : ScalingTables
            Tables under test; their max_degree sets the expansion size.
        strict_mode : bool
            If True, raise on the first failed check.
        log_violations : bool
            Whether to log failed checks.
        """
        self.tables = tables
        self.strict_mode = strict_mode
        self.log_violations = log_violations
        self._logger = get_logger("NumericalConsistencyChecker")

    def check_all(
        self,
        colatitudes: Iterable[float] = DEFAULT_COLATITUDES
    ) -> List[ValidationResult]:
        """Run every check.

        Parameters
        ----------
        colatitudes : iterable of float
            Colatitudes in radians at which to check Legendre bounds.

        Returns
        -------
        List[ValidationResult]
            Results of all checks.
        """
        results = [
            self.check_scaling_tables(),
            self.check_index_bijection(),
        ]
        for theta in colatitudes:
            results.append(self.check_legendre_bounds(theta))
        return results

    def check_scaling_tables(self, rtol: float = 1e-12) -> ValidationResult:
        """Check that √n · (1/√n) == 1 within a relative tolerance."""
        drts = np.asarray(self.tables.sqrt[1:])
        dirt = np.asarray(self.tables.inv_sqrt[1:])
        product = drts * dirt
        deviation = np.abs(product - 1.0)
        num_violations = int(np.sum(deviation > rtol))

        return self._report(ValidationResult(
            test_name="scaling_tables",
            passed=num_violations == 0 and len(drts) == 2 * self.tables.max_degree + 1,
            message=f"Scaling table check: {num_violations} violations",
            details={
                'entries': len(drts),
                'max_deviation': float(np.max(deviation)),
                'rtol': rtol,
            }
        ))

    def check_index_bijection(self) -> ValidationResult:
        """Check that packed indices of all (n, m) are distinct and contiguous."""
        max_degree = self.tables.max_degree
        length = packed_length(max_degree)

        seen = np.zeros(length, dtype=np.int64)
        out_of_range = 0
        for n in range(max_degree + 1):
            for m in range(n + 1):
                k = packed_index(n, m)
                if 1 <= k < length:
                    seen[k] += 1
                else:
                    out_of_range += 1

        duplicates = int(np.sum(seen[1:] > 1))
        gaps = int(np.sum(seen[1:] == 0))

        return self._report(ValidationResult(
            test_name="index_bijection",
            passed=out_of_range == 0 and duplicates == 0 and gaps == 0,
            message=(
                f"Index bijection check: {duplicates} duplicates, "
                f"{gaps} gaps, {out_of_range} out of range"
            ),
            details={
                'max_index': length - 1,
                'duplicates': duplicates,
                'gaps': gaps,
                'out_of_range': out_of_range,
            }
        ))

    def check_legendre_bounds(self, theta: float) -> ValidationResult:
        """Check all P̄(n, m)(cos θ) for finiteness and the √(2(2n+1)) bound."""
        max_degree = self.tables.max_degree
        degrees = np.arange(max_degree + 1)
        bound = np.sqrt(2.0 * (2 * degrees + 1))

        non_finite = 0
        over_bound = 0
        max_ratio = 0.0
        for m in range(max_degree + 1):
            rleg = np.asarray(normalized_legendre(m, theta, self.tables)[m + 1:max_degree + 2])
            limit = bound[m:]
            finite = np.isfinite(rleg)
            non_finite += int(np.sum(~finite))
            ratio = np.abs(rleg[finite]) / limit[finite]
            over_bound += int(np.sum(ratio > 1.0 + 1e-12))
            if ratio.size:
                max_ratio = max(max_ratio, float(np.max(ratio)))

        result = ValidationResult(
            test_name="legendre_bounds",
            passed=non_finite == 0 and over_bound == 0,
            message=(
                f"Legendre bounds check at θ={theta:.6f} rad: "
                f"{non_finite} non-finite, {over_bound} above bound"
            ),
            details={
                'theta': theta,
                'non_finite': non_finite,
                'over_bound': over_bound,
                'max_ratio_to_bound': max_ratio,
            }
        )
        return self._report(result, NumericOverflowError)

    def _report(self, result: ValidationResult, error=GeoidError) -> ValidationResult:
        if not result.passed:
            if self.log_violations:
                self._logger.warning(f"CHECK FAILED | {result.test_name} | {result.message}")
            if self.strict_mode:
                raise error(result.message)
        else:
            self._logger.debug(f"CHECK PASSED | {result.test_name}")
        return result
