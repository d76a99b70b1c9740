import numpy as np
import pytest
import geopandas as gpd
import xarray as xr
from shapely.geometry import Point

from lepmap.raster.elevation import (
    load_elevation,
    sample_elevation,
    join_elevation,
    drop_missing_elevation,
)


def make_points(coords, crs="EPSG:4326") -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {"key": list(range(len(coords)))},
        geometry=[Point(x, y) for x, y in coords],
        crs=crs,
    )


@pytest.fixture
def dem(dem_path) -> xr.DataArray:
    return load_elevation(dem_path)


def test_load_elevation(dem):
    assert isinstance(dem, xr.DataArray)
    assert dem.dims == ("y", "x")
    assert dem.rio.crs == "EPSG:4326"
    # nodata cells come back as NaN
    assert int(np.isnan(dem.values).sum()) == 4
    assert float(np.nanmax(dem.values)) == 120.0


def test_load_elevation_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_elevation(tmp_path / "missing.tif")


def test_sample_elevation_values(dem):
    points = make_points([(12.5, 43.1), (13.9, 45.9), (11.0, 44.0)])
    values = sample_elevation(points, dem)

    assert values[0] == 120.0
    assert values[1] == 120.0
    assert np.isnan(values[2])


def test_sample_elevation_outside_extent(dem):
    points = make_points([(9.0, 43.0), (12.0, 47.0), (20.0, 20.0)])
    assert np.isnan(sample_elevation(points, dem)).all()


def test_sample_elevation_is_deterministic(dem):
    rng = np.random.default_rng(1)
    points = make_points(rng.uniform([9.5, 41.5], [14.5, 46.5], size=(100, 2)))

    first = sample_elevation(points, dem)
    second = sample_elevation(points, dem)
    np.testing.assert_array_equal(first, second)


def test_sample_elevation_reprojects_points(dem):
    points = make_points([(12.5, 43.1), (11.0, 44.0)]).to_crs("EPSG:3857")
    values = sample_elevation(points, dem)

    assert values[0] == 120.0
    assert np.isnan(values[1])


def test_sample_elevation_no_points(dem):
    assert sample_elevation(make_points([]), dem).size == 0


def test_join_elevation_adds_column(dem):
    points = make_points([(12.5, 43.1), (11.0, 44.0)])
    joined = join_elevation(points, dem)

    assert "elevation" in joined.columns
    assert "elevation" not in points.columns
    assert joined["elevation"].iloc[0] == 120.0
    assert np.isnan(joined["elevation"].iloc[1])


def test_drop_missing_elevation(dem):
    joined = join_elevation(make_points([(12.5, 43.1), (11.0, 44.0), (30.0, 30.0)]), dem)
    kept = drop_missing_elevation(joined)

    assert len(kept) == 1
    assert kept["key"].tolist() == [0]
    assert kept["elevation"].notna().all()
