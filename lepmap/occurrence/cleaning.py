import logging
from typing import Tuple

import numpy as np
import pandas as pd
import geopandas as gpd
from shapely.geometry import box

from lepmap.occurrence import species_data


def occurrences_to_points(
    occurrences: pd.DataFrame,
    x_col: str = species_data.gbif_coordinate_columns[0],
    y_col: str = species_data.gbif_coordinate_columns[1],
    crs: str = species_data.occurrence_crs,
) -> gpd.GeoDataFrame:
    """
    Convert tabular longitude/latitude records into point geometries.

    Records with coordinates that are missing, non-numeric or outside the valid
    longitude/latitude range are skipped with a warning rather than failing the run.
    All other columns are carried over unchanged.
    """
    x = pd.to_numeric(occurrences[x_col], errors="coerce")
    y = pd.to_numeric(occurrences[y_col], errors="coerce")
    valid = x.between(-180, 180) & y.between(-90, 90)

    n_invalid = int((~valid).sum())
    if n_invalid:
        logging.warning(f"Skipping {n_invalid} records with malformed coordinates.")

    records = occurrences.loc[valid].copy()
    records[x_col] = x[valid].astype(float)
    records[y_col] = y[valid].astype(float)

    points = gpd.GeoDataFrame(
        records,
        geometry=gpd.points_from_xy(records[x_col], records[y_col]),
        crs=crs,
    )
    return points.reset_index(drop=True)


def deduplicate_points(points: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Drop points with exactly the same coordinates, keeping the first record of each."""
    coords = pd.DataFrame({"_x": points.geometry.x.values, "_y": points.geometry.y.values})
    duplicated = coords.duplicated(keep="first").values

    if duplicated.any():
        logging.info(f"Removed {int(duplicated.sum())} duplicate occurrence locations.")

    return points.loc[~duplicated].reset_index(drop=True)


def points_in_window(
    points: gpd.GeoDataFrame,
    bounds: Tuple[float, float, float, float],
) -> gpd.GeoDataFrame:
    """Restrict points to a rectangular window (edges included)."""
    window = box(*bounds)
    inside = np.asarray(points.intersects(window))

    n_rejected = int((~inside).sum())
    if n_rejected:
        logging.warning(f"{n_rejected} points lie outside the analysis window and were rejected.")

    return points.loc[inside].reset_index(drop=True)
