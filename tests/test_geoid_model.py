import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from common.constants import PhysicalConstants
from common.errors import CoefficientTableError, DomainError, SingularityError
from common.types import GeodeticPoint
from common.units import Q_
from coefficients import CoefficientTable
from conftest import SMALL_DEGREE, closed_form_legendre
import geoid.model
from geoid import EGM96GeoidModel
from harmonics import CoefficientSource, packed_index

GM = PhysicalConstants.GRAVITATIONAL_CONSTANT.value
A = PhysicalConstants.EARTH_SEMI_MAJOR_AXIS.value


def potential_scale(model, lat, lon):
    """GM/(γ r), a/r and θ at a point."""
    metrics = model.geocentric_metrics(GeodeticPoint.create(lat, lon))
    return (
        GM / (metrics.normal_gravity * metrics.radius),
        A / metrics.radius,
        metrics.colatitude,
    )


class SingleCorrectionSource(CoefficientSource):
    """Source with only the degree-0 correction term set."""

    def __init__(self, value):
        self.value = value

    def coefficient(self, index):
        if index == 1:
            return (self.value, 0.0, 0.0, 0.0)
        return (0.0, 0.0, 0.0, 0.0)


@pytest.mark.parametrize("lat, lon", [(0.0, 0.0), (45.0, 123.0), (-89.5, 359.0)])
def test_zero_table_gives_constant_offset(zero_model, lat, lon):
    assert zero_model.compute_altitude_offset(lat, lon) == -0.53


def test_degree_zero_correction_is_scaled_from_centimeters():
    table = CoefficientTable.from_terms(correction={(0, 0): (100.0, 0.0)})
    model = EGM96GeoidModel(table)
    assert model.compute_altitude_offset(12.0, 34.0) == pytest.approx(0.47, abs=1e-12)


def test_injected_coefficient_source():
    model = EGM96GeoidModel(SingleCorrectionSource(-53.0), max_degree=SMALL_DEGREE)
    assert model.compute_altitude_offset(-10.0, 200.0) == pytest.approx(-1.06, abs=1e-12)


def test_degree_one_correction_terms():
    c, s = 40.0, -25.0
    table = CoefficientTable.from_terms(
        correction={(1, 1): (c, s)}, max_degree=SMALL_DEGREE
    )
    model = EGM96GeoidModel(table, max_degree=SMALL_DEGREE)
    lat, lon = 33.0, 71.0
    _, _, theta = potential_scale(model, lat, lon)
    lam = math.radians(lon)

    expected = closed_form_legendre(1, 1, theta) * (c * math.cos(lam) + s * math.sin(lam)) / 100 - 0.53
    assert model.compute_altitude_offset(lat, lon) == pytest.approx(expected, abs=1e-12)


def test_single_zonal_harmonic_at_full_degree():
    c20 = 1e-6
    model = EGM96GeoidModel(CoefficientTable.from_terms(harmonic={(2, 0): (c20, 0.0)}))
    lat, lon = 38.628155, 269.779155
    scale, ar, theta = potential_scale(model, lat, lon)

    expected = scale * ar ** 2 * c20 * closed_form_legendre(2, 0, theta) - 0.53
    assert model.compute_altitude_offset(lat, lon) == pytest.approx(expected, rel=1e-12)


def test_single_tesseral_sine_harmonic():
    s32 = -3e-7
    table = CoefficientTable.from_terms(harmonic={(3, 2): (0.0, s32)}, max_degree=SMALL_DEGREE)
    model = EGM96GeoidModel(table, max_degree=SMALL_DEGREE)
    lat, lon = -23.617446, 133.874712
    scale, ar, theta = potential_scale(model, lat, lon)

    expected = scale * ar ** 3 * s32 * math.sin(2 * math.radians(lon)) * closed_form_legendre(3, 2, theta) - 0.53
    assert model.compute_altitude_offset(lat, lon) == pytest.approx(expected, rel=1e-12)


def test_degree_one_harmonics_do_not_contribute():
    table = CoefficientTable.from_terms(harmonic={(1, 0): (1.0, 0.0), (1, 1): (1.0, 1.0)})
    model = EGM96GeoidModel(table)
    assert model.compute_altitude_offset(20.0, 20.0) == -0.53


def test_repeated_queries_are_identical(small_model):
    first = small_model.compute_altitude_offset(46.874319, 102.448729)
    second = small_model.compute_altitude_offset(46.874319, 102.448729)
    assert first == second


def test_longitude_is_periodic(small_model):
    reference = small_model.compute_altitude_offset(20.0, 10.5)
    assert small_model.compute_altitude_offset(20.0, 370.5) == reference
    assert small_model.compute_altitude_offset(20.0, -349.5) == reference
    assert small_model.compute_altitude_offset(20.0, 360.0) == small_model.compute_altitude_offset(20.0, 0.0)


def test_negative_longitude_matches_eastern_equivalent(small_model):
    assert small_model.compute_altitude_offset(-14.621217, -54.978886) == pytest.approx(
        small_model.compute_altitude_offset(-14.621217, 305.021114), abs=1e-9
    )


def test_undulation_is_continuous(small_model):
    lat, lon = 30.0, 40.0
    base = small_model.compute_altitude_offset(lat, lon)
    d1 = small_model.compute_altitude_offset(lat + 1e-4, lon) - base
    d2 = small_model.compute_altitude_offset(lat + 2e-4, lon) - base
    assert abs(d1) < 1e-2
    assert d2 / d1 == pytest.approx(2.0, rel=1e-2)


@pytest.mark.parametrize(
    "lat, lon",
    [(90.0001, 0.0), (-91.0, 10.0), (float("nan"), 0.0), (0.0, float("inf"))],
)
def test_invalid_coordinates_raise(small_model, lat, lon):
    with pytest.raises(DomainError):
        small_model.compute_altitude_offset(lat, lon)


@pytest.mark.parametrize("lat", [90.0, -90.0])
def test_poles_raise(small_model, lat):
    with pytest.raises(SingularityError):
        small_model.compute_altitude_offset(lat, 45.0)


def test_near_pole_is_finite(small_model):
    assert math.isfinite(small_model.compute_altitude_offset(89.999999, 45.0))


def test_angular_quantities_are_accepted(small_model):
    from_radians = small_model.compute_altitude_offset(Q_(0.5, "radian"), Q_(30.0, "degree"))
    from_degrees = small_model.compute_altitude_offset(math.degrees(0.5), 30.0)
    assert from_radians == pytest.approx(from_degrees, abs=1e-9)


def test_non_angular_quantity_is_rejected(small_model):
    with pytest.raises(DomainError):
        small_model.compute_altitude_offset(Q_(10.0, "meter"), 0.0)


def test_batch_matches_single_queries(small_model):
    lats = np.array([[10.0, 10.0], [-35.5, 60.0]])
    lons = np.array([[0.0, 200.0], [-20.0, 359.5]])
    result = small_model.compute_altitude_offsets(lats, lons)

    assert result.shape == (2, 2)
    for index in np.ndindex(lats.shape):
        assert result[index] == small_model.compute_altitude_offset(lats[index], lons[index])


def test_batch_broadcasts_inputs(small_model):
    result = small_model.compute_altitude_offsets(15.0, [0.0, 90.0, 180.0])
    assert result.shape == (3,)
    assert result[1] == small_model.compute_altitude_offset(15.0, 90.0)


def test_batch_rejects_pole(small_model):
    with pytest.raises(SingularityError):
        small_model.compute_altitude_offsets([0.0, 90.0], [0.0, 0.0])


def test_undulation_grid(small_model):
    lats = [-30.0, 0.0, 45.0]
    lons = [0.0, 120.0, 240.0, 359.0]
    grid = small_model.undulation_grid(lats, lons)

    assert grid.dims == ("latitude", "longitude")
    assert grid.shape == (3, 4)
    assert grid.name == "geoid_undulation"
    assert grid.attrs["units"] == "m"
    assert grid.attrs["max_degree"] == SMALL_DEGREE
    np.testing.assert_array_equal(grid["latitude"].values, lats)
    assert grid.sel(latitude=45.0, longitude=240.0).item() == small_model.compute_altitude_offset(45.0, 240.0)


def test_concurrent_queries_match_sequential(small_model):
    points = [(lat, lon) for lat in (-60.0, -5.0, 25.0, 70.0) for lon in (15.0, 190.0)]
    sequential = [small_model.compute_altitude_offset(lat, lon) for lat, lon in points]

    with ThreadPoolExecutor(max_workers=4) as executor:
        concurrent = list(executor.map(lambda pt: small_model.compute_altitude_offset(*pt), points))

    assert concurrent == sequential


def test_table_degree_must_match_model():
    with pytest.raises(CoefficientTableError):
        EGM96GeoidModel(CoefficientTable.zeros(SMALL_DEGREE))


def test_model_exposes_tables(small_model):
    assert small_model.max_degree == SMALL_DEGREE
    assert small_model.scaling_tables.size == 2 * SMALL_DEGREE + 1
    assert small_model.coefficients.coefficient(packed_index(0, 0))[0] == -52.0


def test_grid_builds_one_legendre_buffer_per_row(small_model, monkeypatch):
    built = []
    build = geoid.model.triangular_legendre_buffer

    def counting_build(theta, tables):
        built.append(theta)
        return build(theta, tables)

    monkeypatch.setattr(geoid.model, "triangular_legendre_buffer", counting_build)

    # cos or sin of these longitudes is exactly ±1, so a row shares one colatitude
    grid = small_model.undulation_grid([-40.0, 5.0, 62.0], [0.0, 90.0, 180.0, 270.0])

    assert len(built) == 3
    assert len(set(built)) == 3
    monkeypatch.undo()
    assert grid.sel(latitude=5.0, longitude=270.0).item() == small_model.compute_altitude_offset(5.0, 270.0)


def test_batch_rebuilds_buffer_when_parallel_changes(small_model, monkeypatch):
    built = []
    build = geoid.model.triangular_legendre_buffer

    def counting_build(theta, tables):
        built.append(theta)
        return build(theta, tables)

    monkeypatch.setattr(geoid.model, "triangular_legendre_buffer", counting_build)
    small_model.compute_altitude_offsets([10.0, 20.0, 10.0], [0.0, 0.0, 0.0])

    # Only the latest buffer is held, so returning to a parallel rebuilds it
    assert len(built) == 3
    assert built[0] == built[2]
