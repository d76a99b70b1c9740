"""Elevation lookup for occurrence points."""

import logging
from pathlib import Path
from typing import Union

import numpy as np
import geopandas as gpd
import xarray as xr
import rioxarray as rxr

logger = logging.getLogger(__name__)


def load_elevation(dem_path: Union[str, Path]) -> xr.DataArray:
    """Open a single-band DEM, with nodata cells set to NaN."""
    dem_path = Path(dem_path)
    if not dem_path.exists():
        raise FileNotFoundError(f"Elevation file not found at: {dem_path}")

    dem = rxr.open_rasterio(dem_path, masked=True)
    if "band" in dem.dims:
        if dem.sizes["band"] != 1:
            logger.warning(f"{dem_path} has {dem.sizes['band']} bands; using the first.")
        dem = dem.isel(band=0, drop=True)

    logger.info(f"Loaded elevation surface {dem_path} ({dem.sizes['y']} x {dem.sizes['x']} cells, CRS {dem.rio.crs})")
    return dem.astype(float)


def sample_elevation(points: gpd.GeoDataFrame, dem: xr.DataArray) -> np.ndarray:
    """
    Extract the DEM value of the cell each point falls in.

    Points outside the DEM extent, or on nodata cells, get NaN.
    """
    if len(points) == 0:
        return np.array([], dtype=float)

    if dem.rio.crs is not None and points.crs is not None and points.crs != dem.rio.crs:
        points = points.to_crs(dem.rio.crs)

    data = np.asarray(dem.values, dtype=float)
    nodata = dem.rio.nodata
    if nodata is not None and not np.isnan(nodata):
        data = np.where(data == nodata, np.nan, data)

    height, width = data.shape
    cols, rows = ~dem.rio.transform() * (points.geometry.x.values, points.geometry.y.values)
    rows = np.floor(rows).astype(int)
    cols = np.floor(cols).astype(int)
    inside = (rows >= 0) & (rows < height) & (cols >= 0) & (cols < width)

    values = np.full(len(points), np.nan)
    values[inside] = data[rows[inside], cols[inside]]
    return values


def join_elevation(
    points: gpd.GeoDataFrame,
    dem: xr.DataArray,
    column: str = "elevation",
) -> gpd.GeoDataFrame:
    """Return a copy of points with the sampled elevation attached as column."""
    joined = points.copy()
    joined[column] = sample_elevation(points, dem)
    n_missing = int(joined[column].isna().sum())
    logger.info(f"Joined elevation for {len(joined) - n_missing} of {len(joined)} points ({n_missing} missing).")
    return joined


def drop_missing_elevation(points: gpd.GeoDataFrame, column: str = "elevation") -> gpd.GeoDataFrame:
    """Drop points without an elevation value."""
    missing = points[column].isna()
    if missing.any():
        logger.info(f"Dropping {int(missing.sum())} points with no elevation value.")
    return points.loc[~missing].reset_index(drop=True)
