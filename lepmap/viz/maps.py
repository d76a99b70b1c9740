"""Report figures: density map, elevation map and elevation histogram."""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import geopandas as gpd
import xarray as xr

logger = logging.getLogger(__name__)


def _save(fig, output_path: Union[str, Path], dpi: int) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Saved figure to: {output_path}")
    return output_path


def plot_density_map(
    density: xr.DataArray,
    boundary: gpd.GeoDataFrame,
    output_path: Union[str, Path],
    title: Optional[str] = None,
    cmap: str = "viridis",
    dpi: int = 150,
) -> Path:
    """Plot the (masked) density surface with the boundary outline."""
    fig, ax = plt.subplots(figsize=(10, 10))

    density.plot.imshow(
        ax=ax,
        cmap=cmap,
        cbar_kwargs={"label": "Intensity (occurrences per unit area)", "shrink": 0.7},
    )
    boundary.plot(ax=ax, facecolor="none", edgecolor="black", linewidth=0.8)

    ax.set_title(title or "Occurrence density")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal")

    return _save(fig, output_path, dpi)


def plot_elevation_map(
    points: gpd.GeoDataFrame,
    boundary: gpd.GeoDataFrame,
    output_path: Union[str, Path],
    column: str = "elevation",
    title: Optional[str] = None,
    cmap: str = "terrain",
    dpi: int = 150,
) -> Path:
    """Plot occurrence points coloured by elevation over the boundary."""
    fig, ax = plt.subplots(figsize=(10, 10))

    boundary.plot(ax=ax, facecolor="whitesmoke", edgecolor="black", linewidth=0.8)
    if points.empty:
        logger.warning("No points with an elevation value to plot.")
    else:
        points.plot(
            ax=ax,
            column=column,
            cmap=cmap,
            markersize=12,
            alpha=0.8,
            legend=True,
            legend_kwds={"label": "Elevation (m)", "shrink": 0.7},
        )

    ax.set_title(title or "Occurrences by elevation")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal")

    return _save(fig, output_path, dpi)


def plot_elevation_histogram(
    histogram: pd.DataFrame,
    output_path: Union[str, Path],
    title: Optional[str] = None,
    color: str = "steelblue",
    dpi: int = 150,
) -> Path:
    """Plot a binned elevation histogram as produced by elevation_histogram."""
    fig, ax = plt.subplots(figsize=(10, 6))

    widths = histogram["bin_end"] - histogram["bin_start"]
    ax.bar(
        histogram["bin_start"],
        histogram["count"],
        width=widths,
        align="edge",
        color=color,
        edgecolor="white",
    )

    ax.set_title(title or "Elevation of occurrences")
    ax.set_xlabel("Elevation (m)")
    ax.set_ylabel("Number of occurrences")
    ax.grid(True, axis="y", alpha=0.3)

    return _save(fig, output_path, dpi)
