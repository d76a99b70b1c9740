from pathlib import Path
from typing import Union, Dict, Any, Optional

import geopandas as gpd
import yaml

from lepmap.occurrence import species_data
from lepmap.data.boundaries import natural_earth_scale

CONFIG_PATH = Path("config") / "default.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "species": species_data.latin_name,
    "country_code": species_data.country_code,
    "country_name": species_data.country_name,
    "boundary_scale": "medium",
    "occurrence_limit": None,
    # KDE bandwidth and grid cell size, in degrees
    "sigma": 0.5,
    "resolution": 0.05,
    "edge_correction": True,
    "bin_width": 100,
    "density_cmap": "viridis",
    "elevation_cmap": "terrain",
    "dpi": 150,
}


def load_config(config_path: Union[str, Path] = CONFIG_PATH) -> Dict:
    """Loads the YAML configuration file."""
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)
    return config or {}


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the analysis settings.

    Defaults are overlaid with the YAML config (if one is given, or if the default
    config file exists) and then with any non-None overrides, e.g. CLI options.
    """
    settings = dict(DEFAULT_SETTINGS)

    if config_path is None and CONFIG_PATH.exists():
        config_path = CONFIG_PATH
    if config_path is not None:
        config = load_config(config_path)
        unknown = set(config) - set(DEFAULT_SETTINGS)
        if unknown:
            raise ValueError(f"Unknown settings in {config_path}: {sorted(unknown)}")
        settings.update(config)

    if overrides:
        settings.update({k: v for k, v in overrides.items() if v is not None})

    assert settings["sigma"] > 0, "sigma must be positive."
    assert settings["resolution"] > 0, "resolution must be positive."
    assert settings["bin_width"] > 0, "bin_width must be positive."
    # Fail before any download rather than after the GBIF query
    natural_earth_scale(settings["boundary_scale"])

    return settings


def load_boundary(
    filepath: Union[str, Path],
    target_crs: Union[str, int, dict] = species_data.occurrence_crs,
) -> gpd.GeoDataFrame:
    """
    Loads a boundary from a file, reprojects it and dissolves it to a single geometry.

    Parameters:
    filepath (str): The path to the file containing the boundary data.
    target_crs (str): The coordinate reference system to reproject the boundary to.

    Returns:
    GeoDataFrame: A single-row GeoDataFrame containing the boundary.
    """
    if not Path(filepath).exists():
        raise FileNotFoundError(f"Boundary file not found at: {filepath}")
    boundary = gpd.read_file(filepath)
    if boundary.crs is None:
        boundary = boundary.set_crs(target_crs)
    elif boundary.crs != target_crs:
        boundary = boundary.to_crs(target_crs)
    return gpd.GeoDataFrame(geometry=[boundary.union_all()], crs=boundary.crs)
