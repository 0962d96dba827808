"""
EGM96 Geoid Model.

The model handle ties the pipeline together:

    degrees -> radians -> geocentric metrics (θ, r, γ)
            -> Legendre buffer P(θ)  +  trig series (λ)
            -> harmonic synthesis -> N [m]

It owns the square-root scaling tables, built once at construction, and a
reference to the injected coefficient table. Both are immutable, so one
model can serve concurrent callers; every buffer a query touches is
allocated inside that query.

Example Usage
-------------
>>> from coefficients import load_coefficient_table
>>> model = EGM96GeoidModel(load_coefficient_table())  # doctest: +SKIP
>>> model.compute_altitude_offset(0.0, 0.0)  # doctest: +SKIP
17.16...
"""

from typing import List, Optional

import numpy as np
from numpy.typing import NDArray
import xarray as xr

from common.constants import PhysicalConstants
from common.errors import CoefficientTableError
from common.logging_config import get_logger
from common.types import GeodeticPoint, GeocentricMetrics
from common.units import AngleLike, angle_in_degrees, angles_in_degrees
from coefficients.loaders import CoefficientSourceConfig, load_coefficient_table
from geospatial.ellipsoid_metrics import geocentric_metrics
from harmonics.legendre import triangular_legendre_buffer
from harmonics.scaling import ScalingTables
from harmonics.synthesis import CoefficientSource, synthesize_undulation
from harmonics.trig_series import longitude_trig_series


class EGM96GeoidModel:
    """Geoid undulations from the EGM96 model to degree and order 360.

    Parameters
    ----------
    coefficients : CoefficientSource
        Packed coefficient table (see `coefficients.CoefficientTable`).
    max_degree : int
        Truncation degree. Must match the table (default 360).

    Attributes
    ----------
    scaling_tables : ScalingTables
        √n and 1/√n tables shared by every query.
    """

    def __init__(
        self,
        coefficients: CoefficientSource,
        max_degree: int = PhysicalConstants.MAX_DEGREE
    ):
        table_degree = getattr(coefficients, "max_degree", max_degree)
        if table_degree != max_degree:
            raise CoefficientTableError(
                f"Coefficient table is for degree {table_degree}, model expects {max_degree}"
            )

        self._coefficients = coefficients
        self._max_degree = max_degree
        self._tables = ScalingTables.build(max_degree)
        self._logger = get_logger(self.__class__.__name__)
        self._logger.debug(
            f"Built scaling tables to n={self._tables.size} for degree {max_degree}"
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[CoefficientSourceConfig] = None
    ) -> 'EGM96GeoidModel':
        """Load the published coefficient files and build a model.

        Parameters
        ----------
        config : CoefficientSourceConfig, optional
            File locations; defaults to the ``EGM96_DATA_DIR`` environment
            variable.
        """
        return cls(load_coefficient_table(config))

    @property
    def scaling_tables(self) -> ScalingTables:
        return self._tables

    @property
    def coefficients(self) -> CoefficientSource:
        return self._coefficients

    @property
    def max_degree(self) -> int:
        return self._max_degree

    # -------------------------------------------------------------------------
    # Single-point queries
    # -------------------------------------------------------------------------

    def compute_altitude_offset(self, latitude: AngleLike, longitude: AngleLike) -> float:
        """Compute the geoid undulation at a point.

        Parameters
        ----------
        latitude : float or pint.Quantity
            Geodetic latitude, in degrees when a bare number.
        longitude : float or pint.Quantity
            Geodetic longitude, in degrees when a bare number. Any value is
            accepted and wrapped to [0, 360).

        Returns
        -------
        float
            Geoid undulation (height of the geoid above the WGS84
            ellipsoid) in meters.

        Raises
        ------
        DomainError
            If the latitude is outside [-90, 90] or either value is not
            finite.
        SingularityError
            At the poles, where the geocentric latitude is undefined.
        NumericOverflowError
            If the synthesis does not produce a finite value.
        """
        point = GeodeticPoint.create(angle_in_degrees(latitude), angle_in_degrees(longitude))
        return self.undulation_at(point)

    def undulation_at(self, point: GeodeticPoint) -> float:
        """Run the synthesis pipeline for a validated point."""
        _, longitude_rad = point.to_radians()
        metrics = self.geocentric_metrics(point)
        p = triangular_legendre_buffer(metrics.colatitude, self._tables)
        return self._synthesize(p, longitude_rad, metrics)

    def geocentric_metrics(self, point: GeodeticPoint) -> GeocentricMetrics:
        """Geocentric colatitude, radius and normal gravity at a point."""
        latitude_rad, longitude_rad = point.to_radians()
        return geocentric_metrics(latitude_rad, longitude_rad)

    def _synthesize(
        self,
        p: List[float],
        longitude_rad: float,
        metrics: GeocentricMetrics
    ) -> float:
        trig = longitude_trig_series(longitude_rad, self._max_degree)
        return synthesize_undulation(
            p,
            trig,
            self._coefficients,
            metrics.normal_gravity,
            metrics.radius,
            self._max_degree,
        )

    # -------------------------------------------------------------------------
    # Batch queries
    # -------------------------------------------------------------------------

    def compute_altitude_offsets(self, latitudes, longitudes) -> NDArray[np.float64]:
        """Compute undulations for arrays of points.

        The inputs are broadcast against each other. The Legendre buffer
        depends only on the colatitude, so it is reused across consecutive
        points on the same parallel. Only the latest buffer is held, so
        memory stays flat for grids with many rows.

        Parameters
        ----------
        latitudes, longitudes : array_like or pint.Quantity
            Geodetic coordinates, in degrees when bare numbers.

        Returns
        -------
        ndarray
            Undulations in meters, with the broadcast shape of the inputs.

        Raises
        ------
        DomainError, SingularityError, NumericOverflowError
            As for `compute_altitude_offset`, on the first offending point.
        """
        lat_deg, lon_deg = np.broadcast_arrays(
            angles_in_degrees(latitudes), angles_in_degrees(longitudes)
        )
        result = np.empty(lat_deg.shape, dtype=np.float64)

        cached_colatitude: Optional[float] = None
        p: List[float] = []
        for index in np.ndindex(lat_deg.shape):
            point = GeodeticPoint.create(float(lat_deg[index]), float(lon_deg[index]))
            _, longitude_rad = point.to_radians()
            metrics = self.geocentric_metrics(point)

            if metrics.colatitude != cached_colatitude:
                p = triangular_legendre_buffer(metrics.colatitude, self._tables)
                cached_colatitude = metrics.colatitude

            result[index] = self._synthesize(p, longitude_rad, metrics)

        return result

    def undulation_grid(self, latitudes, longitudes) -> xr.DataArray:
        """Compute undulations on a latitude/longitude grid.

        Parameters
        ----------
        latitudes : array_like
            1-D geodetic latitudes in degrees. Must exclude the poles.
        longitudes : array_like
            1-D geodetic longitudes in degrees.

        Returns
        -------
        xr.DataArray
            Undulations in meters with dimensions (latitude, longitude).
        """
        lat = angles_in_degrees(latitudes).ravel()
        lon = angles_in_degrees(longitudes).ravel()
        self._logger.info(f"Synthesizing {lat.size} x {lon.size} undulation grid")

        lon_grid, lat_grid = np.meshgrid(lon, lat)
        values = self.compute_altitude_offsets(lat_grid, lon_grid)

        return xr.DataArray(
            values,
            dims=("latitude", "longitude"),
            coords={
                "latitude": ("latitude", lat, {"units": "degrees_north"}),
                "longitude": ("longitude", lon, {"units": "degrees_east"}),
            },
            name="geoid_undulation",
            attrs={
                "units": "m",
                "long_name": "Geoid undulation above the WGS84 ellipsoid",
                "model": "EGM96",
                "max_degree": self._max_degree,
            },
        )
