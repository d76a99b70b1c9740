import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import geopandas as gpd
import xarray as xr
import rioxarray as rxr  # noqa: F401
from shapely.geometry import box

DEM_NODATA = -9999.0


@pytest.fixture
def boundary() -> gpd.GeoDataFrame:
    """A square study area in geographic coordinates."""
    return gpd.GeoDataFrame({"name": ["study area"]}, geometry=[box(10, 42, 14, 46)], crs="EPSG:4326")


@pytest.fixture
def dem_path(tmp_path) -> str:
    """
    Write a 0.5 degree DEM covering the boundary.

    Every cell is 120 m, except a nodata block around (11.0, 44.0).
    """
    resolution = 0.5
    x = np.arange(10 + resolution / 2, 14, resolution)
    y = np.arange(46 - resolution / 2, 42, -resolution)
    data = np.full((len(y), len(x)), 120.0)
    data[3:5, 1:3] = DEM_NODATA

    dem = xr.DataArray(data, coords={"y": y, "x": x}, dims=("y", "x"), name="elevation")
    dem.rio.write_crs("EPSG:4326", inplace=True)
    dem.rio.write_nodata(DEM_NODATA, inplace=True)

    path = tmp_path / "dem.tif"
    dem.rio.to_raster(path)
    return str(path)


@pytest.fixture
def raw_occurrences() -> pd.DataFrame:
    """Two records at the same place and one on a nodata cell."""
    return pd.DataFrame(
        {
            "decimalLongitude": [12.5, 12.5, 11.0],
            "decimalLatitude": [43.1, 43.1, 44.0],
            "key": [1, 2, 3],
            "species": ["Papilio machaon"] * 3,
        }
    )
