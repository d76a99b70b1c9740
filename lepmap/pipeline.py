"""
End-to-end occurrence density and elevation analysis.

Stages run once, in order: acquisition, normalisation, density estimation and
elevation join/summary. run_analysis does the in-memory part so it can be used
with data that is already loaded; run_pipeline adds downloading and outputs.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Union

import pandas as pd
import geopandas as gpd
import xarray as xr

from lepmap.occurrence.gbif import fetch_gbif_occurrences
from lepmap.occurrence.cleaning import occurrences_to_points, deduplicate_points, points_in_window
from lepmap.data.boundaries import fetch_country_boundary
from lepmap.density.kde import window_from_boundary, kernel_density, mask_to_boundary
from lepmap.raster.elevation import load_elevation, join_elevation, drop_missing_elevation
from lepmap.analysis.summary import elevation_histogram, describe_elevation
from lepmap.viz.maps import plot_density_map, plot_elevation_map, plot_elevation_histogram
from lepmap.utils.io import DEFAULT_SETTINGS, load_boundary


@dataclass
class AnalysisResult:
    occurrences: pd.DataFrame
    boundary: gpd.GeoDataFrame
    points: gpd.GeoDataFrame
    point_pattern: gpd.GeoDataFrame
    density: xr.DataArray
    elevation_points: gpd.GeoDataFrame
    histogram: pd.DataFrame
    elevation_summary: Dict[str, Any]
    figures: Dict[str, Path] = field(default_factory=dict)
    exports: Dict[str, Path] = field(default_factory=dict)


def run_analysis(
    occurrences: pd.DataFrame,
    boundary: gpd.GeoDataFrame,
    dem: xr.DataArray,
    settings: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """
    Run normalisation, density estimation and the elevation join on loaded data.

    Density is estimated from every deduplicated point inside the boundary's bounding
    box, while the elevation outputs only use points with a valid elevation.
    """
    settings = {**DEFAULT_SETTINGS, **(settings or {})}

    points = occurrences_to_points(occurrences)
    points = deduplicate_points(points)
    logging.info(f"{len(points)} distinct occurrence locations from {len(occurrences)} records.")

    window = window_from_boundary(boundary)
    point_pattern = points_in_window(points, window)
    density = kernel_density(
        point_pattern,
        window,
        sigma=settings["sigma"],
        resolution=settings["resolution"],
        edge_correction=settings["edge_correction"],
    )
    density = mask_to_boundary(density, boundary)

    joined = join_elevation(points, dem)
    elevation_points = drop_missing_elevation(joined)
    histogram = elevation_histogram(elevation_points["elevation"], bin_width=settings["bin_width"])
    elevation_summary = describe_elevation(elevation_points["elevation"])
    logging.info(f"Elevation summary: {elevation_summary}")

    return AnalysisResult(
        occurrences=occurrences,
        boundary=boundary,
        points=points,
        point_pattern=point_pattern,
        density=density,
        elevation_points=elevation_points,
        histogram=histogram,
        elevation_summary=elevation_summary,
    )


def write_figures(result: AnalysisResult, output_dir: Path, settings: Dict[str, Any]) -> Dict[str, Path]:
    species = settings["species"]
    dpi = settings["dpi"]
    return {
        "density_map": plot_density_map(
            result.density,
            result.boundary,
            output_dir / "density_map.png",
            title=f"Kernel density of {species} occurrences (sigma = {settings['sigma']})",
            cmap=settings["density_cmap"],
            dpi=dpi,
        ),
        "elevation_map": plot_elevation_map(
            result.elevation_points,
            result.boundary,
            output_dir / "elevation_map.png",
            title=f"{species} occurrences by elevation",
            cmap=settings["elevation_cmap"],
            dpi=dpi,
        ),
        "elevation_histogram": plot_elevation_histogram(
            result.histogram,
            output_dir / "elevation_histogram.png",
            title=f"Elevation of {species} occurrences ({settings['bin_width']} m bins)",
            dpi=dpi,
        ),
    }


def write_exports(result: AnalysisResult, output_dir: Path) -> Dict[str, Path]:
    """Save the intermediate products next to the figures."""
    exports = {
        "elevation_points": output_dir / "occurrences_with_elevation.geojson",
        "density": output_dir / "occurrence_density.tif",
        "histogram": output_dir / "elevation_histogram.csv",
    }
    result.elevation_points.to_file(exports["elevation_points"], driver="GeoJSON")
    result.density.rio.to_raster(exports["density"])
    result.histogram.to_csv(exports["histogram"], index=False)
    for name, path in exports.items():
        logging.info(f"Saved {name} to: {path}")
    return exports


def run_pipeline(
    dem_path: Union[str, Path],
    output_dir: Union[str, Path],
    settings: Optional[Dict[str, Any]] = None,
    boundary_path: Optional[Union[str, Path]] = None,
    export: bool = True,
) -> AnalysisResult:
    """
    Download the data, run the analysis and write the three report figures.

    Any failure (download, empty pattern, missing DEM) aborts the run.
    """
    settings = {**DEFAULT_SETTINGS, **(settings or {})}
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.info(f"Starting analysis for {settings['species']}. Outputs will be in: {output_dir}")

    occurrences = fetch_gbif_occurrences(
        settings["species"],
        settings["country_code"],
        has_coordinate=True,
        limit=settings["occurrence_limit"],
    )
    if boundary_path is not None:
        boundary = load_boundary(boundary_path)
    else:
        boundary = fetch_country_boundary(settings["country_name"], scale=settings["boundary_scale"])
    dem = load_elevation(dem_path)

    result = run_analysis(occurrences, boundary, dem, settings)
    result.figures = write_figures(result, output_dir, settings)
    if export:
        result.exports = write_exports(result, output_dir)

    logging.info("Analysis complete.")
    return result
