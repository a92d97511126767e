import math
from datetime import datetime, timezone

import numpy as np
import pytest

from earth_grids import BuilderKind, EngineConfig, build_grid
from earth_grids.config import AssemblyConfig
from earth_grids.recipes import default_catalog

from conftest import make_record


@pytest.fixture
def scalar_field(scalar_record):
    return build_grid([scalar_record])


def test_metadata(scalar_field):
    assert scalar_field.source == "GFS / NCEP / US National Weather Service"
    assert scalar_field.date == datetime(2013, 12, 1, 0, tzinfo=timezone.utc)
    assert scalar_field.recipe_key == "0,0,103,2"
    assert scalar_field.recipe is None
    assert scalar_field.kind is BuilderKind.SCALAR


def test_midpoint_of_first_row(scalar_field):
    assert scalar_field.interpolate(45.0, 90.0) == pytest.approx(1.5)


def test_equator_hits_second_row(scalar_field):
    # Latitude 0 is row (90 - 0) / 90 = 1 of the 90-degree grid.
    assert scalar_field.interpolate(0.0, 0.0) == 5.0


def test_origin_is_exact(scalar_field):
    assert scalar_field.interpolate(0.0, 90.0) == 1.0


def test_last_row_has_no_ceiling(scalar_field):
    assert scalar_field.interpolate(0.0, -90.0) is None


def test_outside_latitude_range(scalar_field):
    assert scalar_field.interpolate(0.0, 91.0) is None
    assert scalar_field.interpolate(0.0, -120.0) is None


def test_non_finite_query(scalar_field):
    assert scalar_field.interpolate(float("nan"), 0.0) is None
    assert scalar_field.interpolate(0.0, float("inf")) is None


def test_wraparound_uses_duplicated_column(scalar_field):
    # Between column 3 (lon 270) and the duplicated column 0 (lon 360).
    assert scalar_field.interpolate(315.0, 90.0) == pytest.approx((4.0 + 1.0) / 2)
    assert scalar_field.interpolate(-45.0, 90.0) == pytest.approx(2.5)


def test_wraparound_agreement():
    nx, ny = 36, 19
    rng = np.random.default_rng(7)
    record = make_record(rng.random(nx * ny), nx=nx, ny=ny, lon0=-180.0, lat0=90.0, dlon=10.0, dlat=10.0)
    grid_field = build_grid([record])
    lon0 = -180.0
    for lat in (85.0, 12.3, -47.5):
        a = grid_field.interpolate(lon0 - 0.0001 + 360.0, lat)
        b = grid_field.interpolate(lon0 + nx * 10.0 - 0.0001, lat)
        assert a is not None
        assert a == pytest.approx(b)
        # Just past the seam the value continues smoothly from column 0.
        c = grid_field.interpolate(lon0 + 0.0001, lat)
        assert c == pytest.approx(a, abs=1e-3)


def test_regional_grid_edge_has_no_result():
    record = make_record(np.arange(12, dtype=float), lon0=10.0, lat0=50.0, dlon=1.0, dlat=1.0)
    grid_field = build_grid([record])
    assert grid_field.interpolate(10.0, 50.0) == 0.0
    assert grid_field.interpolate(12.5, 49.5) == pytest.approx((2 + 3 + 6 + 7) / 4)
    # Column nx - 1 has no ceiling neighbour on a regional grid.
    assert grid_field.interpolate(13.0, 50.0) is None
    assert grid_field.interpolate(9.5, 50.0) is None


def test_grid_aligned_points_are_exact():
    rng = np.random.default_rng(11)
    samples = rng.normal(size=20)
    record = make_record(samples, nx=5, ny=4, lon0=-20.0, lat0=40.0, dlon=2.0, dlat=3.0)
    grid_field = build_grid([record])
    table = samples.reshape(4, 5)
    for j in range(3):
        for i in range(4):
            assert grid_field.interpolate(-20.0 + 2.0 * i, 40.0 - 3.0 * j) == table[j, i]


def test_any_missing_corner_gives_no_result():
    samples = np.arange(12, dtype=float)
    samples[5] = np.nan
    grid_field = build_grid([make_record(samples)])
    # Cells touching (row 1, col 1) have no result.
    for lon, lat in [(45.0, 45.0), (135.0, 45.0), (45.0, -45.0), (135.0, -10.0)]:
        assert grid_field.interpolate(lon, lat) is None
    assert grid_field.interpolate(225.0, 45.0) is not None


def test_wind_field_returns_vector(wind_records):
    grid_field = build_grid(wind_records)
    assert grid_field.kind is BuilderKind.WIND
    assert grid_field.is_vector
    u, v, magnitude = grid_field.interpolate(0.0, 90.0)
    assert (u, v) == (0.0, 0.0)
    u, v, magnitude = grid_field.interpolate(90.0, 90.0)
    assert (u, v) == (1.0, -2.0)
    assert magnitude == pytest.approx(math.sqrt(5.0))


def test_wind_gap_gives_no_result():
    u = np.ones(12)
    u[0] = np.nan
    records = [
        make_record(u, parameter_category=2, parameter_number=2),
        make_record(np.ones(12), parameter_category=2, parameter_number=3),
    ]
    grid_field = build_grid(records)
    assert grid_field.interpolate(45.0, 45.0) is None
    # Column 4 repeats the gap at column 0.
    assert grid_field.interpolate(315.0, 45.0) is None
    assert grid_field.interpolate(135.0, 45.0) == pytest.approx((1.0, 1.0, math.sqrt(2.0)))

    values, valid = grid_field.interpolate_points(np.array([45.0, 135.0]), np.array([45.0, 45.0]))
    assert valid.tolist() == [False, True]
    assert not np.isnan(values).any()


def test_ocean_land_cell_blocks_interpolation(ocean_records):
    grid_field = build_grid(ocean_records)
    assert grid_field.kind is BuilderKind.OCEAN
    assert grid_field.source == "OSCAR / Earth & Space Research"
    assert grid_field.interpolate(45.0, 45.0) is None
    u, v, magnitude = grid_field.interpolate(225.0, 45.0)
    assert (u, v) == pytest.approx((1.0, 2.0))
    assert magnitude == pytest.approx(math.sqrt(5.0))


def test_recipe_lookup_is_injected(wind_records):
    catalog = default_catalog()
    grid_field = build_grid(wind_records, recipe_for=catalog.recipe_for)
    assert grid_field.recipe is catalog.recipe_for("wind,100,25000")
    assert grid_field.recipe.description == "Wind @ 250 hPa"

    seen = []
    build_grid(wind_records, recipe_for=lambda key: seen.append(key))
    assert seen == ["wind,100,25000"]


def test_for_each_point_visits_materialized_cells(scalar_field):
    visited = []
    scalar_field.for_each_point(lambda lon, lat, sample: visited.append((lon, lat, sample)))
    assert len(visited) == 3 * 5
    assert all(-180.0 <= lon < 180.0 for lon, _, _ in visited)
    assert visited[0] == (0.0, 90.0, 1.0)
    assert visited[2] == (-180.0, 90.0, 3.0)
    assert visited[4] == (0.0, 90.0, 1.0)
    assert visited[5] == (0.0, 0.0, 5.0)
    assert [lat for _, lat, _ in visited[-5:]] == [-90.0] * 5


def test_for_each_point_regional_and_missing():
    samples = np.arange(6, dtype=float)
    samples[1] = np.nan
    record = make_record(samples, nx=3, ny=2, lon0=170.0, lat0=10.0, dlon=5.0, dlat=5.0)
    visited = []
    build_grid([record]).for_each_point(lambda lon, lat, sample: visited.append((lon, lat, sample)))
    assert len(visited) == 6
    assert visited[1] == (175.0, 10.0, None)
    assert visited[2] == (-180.0, 10.0, 2.0)


def test_interpolate_points_matches_scalar_queries(scalar_field):
    lons = np.array([45.0, 0.0, 315.0, 0.0, 10.0, np.nan])
    lats = np.array([90.0, 0.0, 90.0, -90.0, 100.0, 0.0])
    values, valid = scalar_field.interpolate_points(lons, lats)
    for k in range(lons.size):
        expected = scalar_field.interpolate(lons[k], lats[k])
        if expected is None:
            assert not valid[k]
            assert values[k] == 0.0
        else:
            assert valid[k]
            assert values[k] == pytest.approx(expected)


def test_interpolate_points_vector_shape(ocean_records):
    grid_field = build_grid(ocean_records)
    lons = np.array([[45.0, 225.0]])
    lats = np.array([[45.0, 45.0]])
    values, valid = grid_field.interpolate_points(lons, lats)
    assert values.shape == (1, 2, 3)
    assert valid.tolist() == [[False, True]]
    np.testing.assert_allclose(values[0, 1], [1.0, 2.0, math.sqrt(5.0)])


def test_interpolate_points_shape_mismatch(scalar_field):
    with pytest.raises(ValueError):
        scalar_field.interpolate_points([0.0, 1.0], [0.0])


def test_sharded_build_matches_serial():
    nx, ny = 72, 37
    rng = np.random.default_rng(5)
    record = make_record(rng.random(nx * ny), nx=nx, ny=ny, dlon=5.0, dlat=5.0)
    serial = build_grid([record])
    sharded = build_grid([record], config=EngineConfig(assembly=AssemblyConfig(row_workers=4, rows_per_task=3)))
    for lon, lat in [(12.3, 45.6), (359.0, -10.0), (-0.5, 89.0)]:
        assert serial.interpolate(lon, lat) == sharded.interpolate(lon, lat)


def test_field_is_immutable(scalar_field):
    with pytest.raises(AttributeError):
        scalar_field.recipe_key = "other"
