import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from lepmap.errors import LepmapError
from lepmap.utils.logging_utils import setup_logging
from lepmap.utils.io import load_settings
from lepmap.occurrence.gbif import fetch_gbif_occurrences
from lepmap.occurrence.cleaning import occurrences_to_points
from lepmap.data.boundaries import fetch_country_boundary
from lepmap.pipeline import run_pipeline

app = typer.Typer(
    name="lepmap",
    help="Butterfly occurrence density and elevation report",
    add_completion=False,
)


# Expected failures: bad settings or inputs, and failed downloads or analysis steps
FATAL_ERRORS = (LepmapError, ValueError, FileNotFoundError)


def _fail(e: Exception) -> None:
    logging.error(f"Aborting: {e}")
    raise typer.Exit(code=1)


@app.command()
def run(
    dem_path: Annotated[
        Path,
        typer.Option(
            ...,  # Required
            help="Path to the elevation raster (e.g., GeoTIFF) covering the study area.",
            exists=True, readable=True, resolve_path=True
        )
    ],
    output_dir: Annotated[
        Path,
        typer.Option(
            help="Directory to save the figures and exported data.",
            writable=True, resolve_path=True, file_okay=False, dir_okay=True
        )
    ] = Path("outputs/report"),
    species: Annotated[Optional[str], typer.Option(help="Scientific name to query on GBIF.")] = None,
    country_code: Annotated[Optional[str], typer.Option(help="ISO 3166-1 alpha-2 code for the GBIF country filter.")] = None,
    country_name: Annotated[Optional[str], typer.Option(help="Country name for the Natural Earth boundary.")] = None,
    boundary_scale: Annotated[Optional[str], typer.Option(help="Boundary resolution: small, medium or large.")] = None,
    boundary_path: Annotated[
        Optional[Path],
        typer.Option(
            help="Use a boundary file instead of downloading one.",
            exists=True, readable=True, resolve_path=True
        )
    ] = None,
    sigma: Annotated[Optional[float], typer.Option(help="Kernel bandwidth in degrees.")] = None,
    resolution: Annotated[Optional[float], typer.Option(help="Density grid cell size in degrees.")] = None,
    bin_width: Annotated[Optional[float], typer.Option(help="Elevation histogram bin width in metres.")] = None,
    limit: Annotated[Optional[int], typer.Option(help="Maximum number of GBIF records to download.")] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            help="YAML settings file. Defaults to config/default.yaml if present.",
            exists=True, readable=True, resolve_path=True
        )
    ] = None,
    no_export: Annotated[bool, typer.Option("--no-export", help="Only write the figures.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False
) -> None:
    """
    Download occurrences and the country boundary, estimate occurrence density,
    join elevations and write the density map, elevation map and elevation histogram.
    """
    setup_logging(verbose=verbose)
    try:
        settings = load_settings(
            config_path,
            overrides={
                "species": species,
                "country_code": country_code,
                "country_name": country_name,
                "boundary_scale": boundary_scale,
                "sigma": sigma,
                "resolution": resolution,
                "bin_width": bin_width,
                "occurrence_limit": limit,
            },
        )
        result = run_pipeline(
            dem_path=dem_path,
            output_dir=output_dir,
            settings=settings,
            boundary_path=boundary_path,
            export=not no_export,
        )
    except FATAL_ERRORS as e:
        _fail(e)

    for name, path in result.figures.items():
        typer.echo(f"{name}: {path}")


@app.command("fetch-occurrences")
def fetch_occurrences(
    output_path: Annotated[
        Path,
        typer.Option(help="Where to save the occurrence points (GeoJSON).", writable=True, resolve_path=True)
    ] = Path("data/raw/occurrences.geojson"),
    species: Annotated[Optional[str], typer.Option(help="Scientific name to query on GBIF.")] = None,
    country_code: Annotated[Optional[str], typer.Option(help="ISO 3166-1 alpha-2 country code.")] = None,
    limit: Annotated[Optional[int], typer.Option(help="Maximum number of records to download.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False
) -> None:
    """Download GBIF occurrence records and save them as points."""
    setup_logging(verbose=verbose)
    try:
        settings = load_settings(
            overrides={"species": species, "country_code": country_code, "occurrence_limit": limit}
        )
        occurrences = fetch_gbif_occurrences(
            settings["species"], settings["country_code"], limit=settings["occurrence_limit"]
        )
    except FATAL_ERRORS as e:
        _fail(e)

    points = occurrences_to_points(occurrences)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    points.to_file(output_path, driver="GeoJSON")
    logging.info(f"Saved {len(points)} occurrence points to: {output_path}")


@app.command("fetch-boundary")
def fetch_boundary(
    output_path: Annotated[
        Path,
        typer.Option(help="Where to save the boundary (GeoJSON).", writable=True, resolve_path=True)
    ] = Path("data/raw/boundary.geojson"),
    country_name: Annotated[Optional[str], typer.Option(help="Country name as used by Natural Earth.")] = None,
    boundary_scale: Annotated[Optional[str], typer.Option(help="Boundary resolution: small, medium or large.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False
) -> None:
    """Download a country boundary from Natural Earth."""
    setup_logging(verbose=verbose)
    try:
        settings = load_settings(overrides={"country_name": country_name, "boundary_scale": boundary_scale})
        boundary = fetch_country_boundary(settings["country_name"], scale=settings["boundary_scale"])
    except FATAL_ERRORS as e:
        _fail(e)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    boundary.to_file(output_path, driver="GeoJSON")
    logging.info(f"Saved boundary to: {output_path}")


if __name__ == "__main__":
    app()
