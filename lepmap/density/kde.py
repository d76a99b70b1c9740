from typing import Tuple
import logging

import numpy as np
import geopandas as gpd
import xarray as xr
from scipy.ndimage import gaussian_filter
import rioxarray as rxr  # noqa: F401  registers the .rio accessor

from lepmap.errors import EmptyPointPatternError
from lepmap.occurrence.cleaning import points_in_window
from lepmap.raster.utils import generate_grid, cell_edges


def window_from_boundary(boundary: gpd.GeoDataFrame) -> Tuple[float, float, float, float]:
    """The analysis window: the bounding box of the boundary, not its exact outline."""
    minx, miny, maxx, maxy = (float(v) for v in boundary.total_bounds)
    return minx, miny, maxx, maxy


def count_points(points: gpd.GeoDataFrame, grid: xr.DataArray) -> np.ndarray:
    """Number of points in each grid cell, as a (y, x) array matching the grid orientation."""
    x_edges, y_edges = cell_edges(grid)
    # Aligned outer edges can land a rounding error inside the window; widen them
    # so points on the window edge still fall in the outermost cells
    tol = grid.attrs["resolution"] * 1e-6
    x_edges[[0, -1]] += (-tol, tol)
    y_edges[[0, -1]] += (-tol, tol)
    point_counts, _, _ = np.histogram2d(
        points.geometry.x.values,
        points.geometry.y.values,
        bins=(x_edges, y_edges),
    )
    # Always transpose to (y, x) for raster alignment
    point_counts = point_counts.T

    # Only flip if y-coordinates are descending (i.e., north is at the top)
    if grid.y.values[0] > grid.y.values[-1]:
        point_counts = np.flipud(point_counts)

    return point_counts


def kernel_density(
    points: gpd.GeoDataFrame,
    window: Tuple[float, float, float, float],
    sigma: float,
    resolution: float = 0.05,
    edge_correction: bool = True,
) -> xr.DataArray:
    """
    Gaussian kernel density estimate of a point pattern over a rectangular window.

    The pattern is binned onto a grid of square cells and convolved with an isotropic
    Gaussian kernel of standard deviation sigma (in CRS units). Kernel mass falling
    outside the window is lost, and with edge_correction the estimate is divided by
    the fraction of mass kept inside the window.

    Args:
        points: Point pattern. Points outside the window are ignored.
        window: (minx, miny, maxx, maxy) of the analysis window.
        sigma: Kernel bandwidth, in CRS units.
        resolution: Grid cell size, in CRS units.
        edge_correction: Apply the uniform edge correction.

    Returns:
        Intensity surface (expected points per unit area). Not normalised to a probability.

    Raises:
        EmptyPointPatternError: If no points fall inside the window.
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")
    if resolution <= 0:
        raise ValueError(f"resolution must be positive, got {resolution}")

    if points.crs is None:
        raise ValueError("Point pattern has no CRS.")
    if not all(points.geometry.geom_type == "Point"):
        raise ValueError("Point pattern must contain only point geometries.")

    pattern = points_in_window(points, window)
    if len(pattern) == 0:
        logging.error("No occurrence points found within the analysis window. Cannot estimate density.")
        raise EmptyPointPatternError("No occurrence points found within the analysis window.")

    grid = generate_grid(window, resolution, crs=points.crs, name="occurrence_density")
    point_counts = count_points(pattern, grid)

    sigma_cells = sigma / resolution
    logging.info(
        f"Estimating density of {len(pattern)} points on a {grid.sizes['y']} x {grid.sizes['x']} grid "
        f"(sigma={sigma}, {sigma_cells:.2f} cells)"
    )
    smoothed = gaussian_filter(point_counts, sigma=sigma_cells, mode="constant", cval=0.0)

    if edge_correction:
        inside_mass = gaussian_filter(np.ones_like(point_counts), sigma=sigma_cells, mode="constant", cval=0.0)
        smoothed = smoothed / inside_mass

    intensity = smoothed / (resolution * resolution)

    density = grid.copy(data=intensity)
    density.rio.write_nodata(np.nan, inplace=True)
    density.attrs["sigma"] = float(sigma)
    density.attrs["n_points"] = int(len(pattern))
    return density


def mask_to_boundary(density: xr.DataArray, boundary: gpd.GeoDataFrame) -> xr.DataArray:
    """Set cells whose centre lies outside the boundary polygon to NaN."""
    masked = density.rio.clip(
        list(boundary.geometry),
        crs=boundary.crs,
        drop=False,
        all_touched=False,
    )
    n_valid = int(np.isfinite(masked.values).sum())
    logging.info(f"Masked density surface to boundary: {n_valid} of {masked.size} cells kept.")
    return masked
