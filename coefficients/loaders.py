"""
Loaders for the Published EGM96 Coefficient Files.

NGA distributes the model as two ASCII files:

- ``EGM96``: fully normalized potential coefficients, one record per line
  as ``n m C S sigmaC sigmaS`` for n = 2..360;
- ``CORCOEF``: coefficients of the height-anomaly-to-undulation correction,
  ``n m C S`` for n = 0..360.

The loader packs both into a `CoefficientTable`, removing the even zonal
harmonics of the WGS84 normal field from the potential coefficients so the
synthesis yields the disturbing potential directly.

Design Principles
-----------------
- Parse once, then reuse a binary ``.npz`` cache
- Keep provenance of the files a table was built from
- Fail with `CoefficientTableError` on missing or malformed data

References
----------
- NGA: "EGM96 - Geoid Undulation Calculator", README for F477.F
- Rapp, R.H. (1997). J. Geodesy 71, 282-289.
"""

from dataclasses import dataclass, field
from datetime import datetime
import hashlib
import math
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
from numpy.typing import NDArray

from common.constants import PhysicalConstants
from common.errors import CoefficientTableError
from common.logging_config import get_logger
from coefficients.table import HARMONIC_COS, CoefficientTable
from harmonics.indexing import packed_index

logger = get_logger(__name__)

DATA_DIR_ENV_VAR = "EGM96_DATA_DIR"


@dataclass
class CoefficientSourceConfig:
    """Configuration for locating the coefficient files.

    Attributes
    ----------
    data_root : Path
        Directory holding the coefficient files.
    harmonic_file : str
        Name of the potential coefficient file.
    correction_file : str
        Name of the correction coefficient file.
    cache_file : str
        Name of the packed ``.npz`` cache written next to the inputs.
    cache_enabled : bool
        Whether to read and write the cache.
    remove_normal_field : bool
        Whether to subtract the WGS84 even zonal harmonics.
    """
    data_root: Path
    harmonic_file: str = "EGM96"
    correction_file: str = "CORCOEF"
    cache_file: str = "egm96_packed.npz"
    cache_enabled: bool = True
    remove_normal_field: bool = True

    def __post_init__(self):
        self.data_root = Path(self.data_root)

    @classmethod
    def from_environment(cls, env_var: str = DATA_DIR_ENV_VAR) -> 'CoefficientSourceConfig':
        """Build a configuration from a data directory environment variable.

        Raises
        ------
        CoefficientTableError
            If the variable is not set.
        """
        data_root = os.environ.get(env_var)
        if not data_root:
            raise CoefficientTableError(
                f"Set {env_var} to the directory holding the EGM96 coefficient files"
            )
        return cls(data_root=Path(data_root))

    @property
    def harmonic_path(self) -> Path:
        return self.data_root / self.harmonic_file

    @property
    def correction_path(self) -> Path:
        return self.data_root / self.correction_file

    @property
    def cache_path(self) -> Path:
        return self.data_root / self.cache_file


@dataclass
class CoefficientProvenance:
    """Metadata tracking where a coefficient table came from.

    Attributes
    ----------
    source : str
        Data source identifier.
    load_time : datetime
        When the table was built or read.
    files : list
        Files the table was read from.
    from_cache : bool
        Whether the packed cache was used.
    processing_steps : list
        Processing applied after parsing.
    """
    source: str
    load_time: datetime
    files: list = field(default_factory=list)
    from_cache: bool = False
    processing_steps: list = field(default_factory=list)


def read_coefficient_records(path: Union[str, Path]) -> NDArray[np.float64]:
    """Parse an ASCII coefficient file into an (N, 4) record array.

    Each line holds at least ``n m C S``; further columns are ignored.
    Fortran ``D`` exponents are accepted.

    Raises
    ------
    CoefficientTableError
        If the file cannot be read or parsed, or holds no records.
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            lines = (line.replace('D', 'E').replace('d', 'e') for line in f)
            records = np.loadtxt(lines, usecols=(0, 1, 2, 3), ndmin=2)
    except OSError as e:
        raise CoefficientTableError(f"Cannot read coefficient file {path}: {e}") from e
    except ValueError as e:
        raise CoefficientTableError(f"Malformed coefficient file {path}: {e}") from e

    if records.size == 0:
        raise CoefficientTableError(f"No coefficient records in {path}")
    return records


def file_digest(path: Union[str, Path]) -> str:
    """SHA-256 hex digest of a file's contents."""
    sha256 = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(1 << 20), b''):
            sha256.update(chunk)
    return sha256.hexdigest()


def remove_normal_field(values: NDArray[np.float64]) -> None:
    """Subtract the WGS84 even zonal harmonics from C̄(n, 0), in place.

    The normal field has C̄(n, 0) = -Jn / √(2n+1) for n = 2, 4, ..., 10,
    so removing it adds Jn / √(2n+1).
    """
    for n, jn in PhysicalConstants.EVEN_ZONAL_HARMONICS.items():
        values[packed_index(n, 0), HARMONIC_COS] += jn / math.sqrt(2 * n + 1)


def load_nga_coefficients(
    harmonic_path: Union[str, Path],
    correction_path: Union[str, Path],
    reduce_normal_field: bool = True
) -> CoefficientTable:
    """Parse the NGA ASCII files into a packed table.

    Parameters
    ----------
    harmonic_path : str or Path
        Potential coefficient file (``EGM96``).
    correction_path : str or Path
        Correction coefficient file (``CORCOEF``).
    reduce_normal_field : bool
        Whether to subtract the WGS84 even zonal harmonics.

    Returns
    -------
    CoefficientTable
        Packed table ready for synthesis.

    Raises
    ------
    CoefficientTableError
        If either file is missing or malformed.
    """
    harmonic = read_coefficient_records(harmonic_path)
    correction = read_coefficient_records(correction_path)
    logger.info(
        f"Read {len(harmonic)} harmonic and {len(correction)} correction records"
    )

    source = f"{harmonic_path}, {correction_path}"
    table = CoefficientTable.from_records(
        harmonic=harmonic,
        correction=correction,
        source=source,
    )
    if not reduce_normal_field:
        return table

    values = np.array(table.values)
    remove_normal_field(values)
    return CoefficientTable(values, source=source)


class NGACoefficientLoader:
    """Builds a `CoefficientTable` from the NGA distribution files.

    Examples
    --------
    >>> loader = NGACoefficientLoader(CoefficientSourceConfig("/data/egm96"))
    >>> table = loader.load()  # doctest: +SKIP
    """

    def __init__(self, config: CoefficientSourceConfig):
        """Initialize the loader.

        Parameters
        ----------
        config : CoefficientSourceConfig
            Locations of the coefficient files.
        """
        self.config = config
        self._provenance: Optional[CoefficientProvenance] = None
        self._logger = get_logger(self.__class__.__name__)

    def load(self) -> CoefficientTable:
        """Load the table, from the cache when it is current.

        The cache is reused only if it was built with the same
        normal-field setting from source files with the same contents.
        If the source files are gone, a cache with a matching setting is
        the only copy and is used as is.

        Returns
        -------
        CoefficientTable
            Packed table ready for synthesis.
        """
        cache_path = self.config.cache_path
        if self.config.cache_enabled and cache_path.exists():
            table = CoefficientTable.load(cache_path)
            if self._cache_is_current(table.metadata):
                self._provenance = CoefficientProvenance(
                    source="EGM96",
                    load_time=datetime.now(),
                    files=[str(cache_path)],
                    from_cache=True,
                    processing_steps=list(table.metadata.get("processing_steps", [])),
                )
                return table
            self._logger.info(f"Coefficient cache {cache_path} is stale, re-parsing")

        table = self.parse()

        if self.config.cache_enabled:
            try:
                table.save(cache_path)
            except OSError as e:
                self._logger.warning(f"Could not write coefficient cache {cache_path}: {e}")
        return table

    def parse(self) -> CoefficientTable:
        """Parse the ASCII files, ignoring any cache."""
        harmonic_path = self.config.harmonic_path
        correction_path = self.config.correction_path

        self._logger.info(f"Parsing coefficient files in {self.config.data_root}")
        table = load_nga_coefficients(
            harmonic_path,
            correction_path,
            reduce_normal_field=self.config.remove_normal_field,
        )

        steps = []
        if self.config.remove_normal_field:
            steps.append("removed WGS84 even zonal harmonics J2..J10")

        table.metadata = {
            "remove_normal_field": self.config.remove_normal_field,
            "sources": self._source_digests(),
            "processing_steps": steps,
        }
        self._provenance = CoefficientProvenance(
            source="EGM96",
            load_time=datetime.now(),
            files=[str(harmonic_path), str(correction_path)],
            processing_steps=steps,
        )
        return table

    def _source_digests(self) -> Dict[str, str]:
        return {
            self.config.harmonic_file: file_digest(self.config.harmonic_path),
            self.config.correction_file: file_digest(self.config.correction_path),
        }

    def _cache_is_current(self, metadata: Dict[str, Any]) -> bool:
        if metadata.get("remove_normal_field") != self.config.remove_normal_field:
            return False
        try:
            digests = self._source_digests()
        except OSError:
            self._logger.warning(
                f"Coefficient files missing in {self.config.data_root}, using cache as is"
            )
            return True
        return metadata.get("sources") == digests

    def get_provenance(self) -> Optional[CoefficientProvenance]:
        """Provenance of the most recently loaded table."""
        return self._provenance


def load_coefficient_table(
    config: Optional[CoefficientSourceConfig] = None
) -> CoefficientTable:
    """Load the EGM96 table described by a configuration.

    Parameters
    ----------
    config : CoefficientSourceConfig, optional
        File locations. Defaults to `CoefficientSourceConfig.from_environment`.

    Returns
    -------
    CoefficientTable
        Packed table ready for synthesis.
    """
    if config is None:
        config = CoefficientSourceConfig.from_environment()
    return NGACoefficientLoader(config).load()
