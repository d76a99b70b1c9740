from typing import Tuple, Union

import numpy as np
import xarray as xr
import rioxarray as rxr  # noqa: F401  registers the .rio accessor
from affine import Affine
from rasterio.coords import BoundingBox


def construct_transform_shift_bounds(
    minx: float, miny: float, maxx: float, maxy: float, resolution: float
) -> Tuple[Affine, int, int, BoundingBox]:
    """Construct Affine transform and align bounds to resolution."""
    minx = np.floor(minx / resolution) * resolution
    miny = np.floor(miny / resolution) * resolution
    maxx = np.ceil(maxx / resolution) * resolution
    maxy = np.ceil(maxy / resolution) * resolution

    dst_transform = Affine.translation(minx, maxy) * Affine.scale(resolution, -resolution)
    dst_height = max(int(round((maxy - miny) / resolution)), 1)
    dst_width = max(int(round((maxx - minx) / resolution)), 1)
    dst_bounds = BoundingBox(
        left=minx,
        bottom=maxy - dst_height * resolution,
        right=minx + dst_width * resolution,
        top=maxy,
    )
    return dst_transform, dst_width, dst_height, dst_bounds


def generate_grid(
    bounds: Tuple[float, float, float, float],
    resolution: float,
    crs: Union[str, int, dict],
    name: str = "grid",
) -> xr.DataArray:
    """
    Generate an empty raster of square cells covering bounds.

    The grid is aligned to multiples of resolution and always contains the bounds.
    y runs north to south, as in a GeoTIFF.
    """
    transform, width, height, aligned = construct_transform_shift_bounds(*bounds, float(resolution))
    half = float(resolution) / 2

    grid = xr.DataArray(
        np.zeros((height, width), dtype=float),
        coords=[
            ("y", np.linspace(aligned.top - half, aligned.bottom + half, height)),
            ("x", np.linspace(aligned.left + half, aligned.right - half, width)),
        ],
        dims=("y", "x"),
        attrs={"resolution": float(resolution)},
        name=name,
    )
    grid.rio.write_crs(crs, inplace=True)
    grid.rio.write_transform(transform, inplace=True)
    return grid


def cell_edges(grid: xr.DataArray) -> Tuple[np.ndarray, np.ndarray]:
    """Ascending x and y cell edges of a regular grid, for use with np.histogram2d."""
    res_x = res_y = grid.attrs["resolution"]
    x = np.sort(grid.x.values)
    y = np.sort(grid.y.values)
    x_edges = np.append(x - res_x / 2, x[-1] + res_x / 2)
    y_edges = np.append(y - res_y / 2, y[-1] + res_y / 2)
    return x_edges, y_edges
