import logging
from enum import StrEnum
from typing import Union

import geopandas as gpd

from lepmap.errors import AcquisitionError
from lepmap.occurrence import species_data

logger = logging.getLogger(__name__)

NATURAL_EARTH_COUNTRIES_URL = (
    "https://naciscdn.org/naturalearth/{scale}m/cultural/ne_{scale}m_admin_0_countries.zip"
)

# Name columns searched, in order, for a matching country
COUNTRY_NAME_COLUMNS = ["ADMIN", "NAME", "NAME_LONG"]


class BoundaryScale(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


_SCALE_TO_NE = {
    BoundaryScale.SMALL: 110,
    BoundaryScale.MEDIUM: 50,
    BoundaryScale.LARGE: 10,
}


def natural_earth_scale(scale: Union[str, int, BoundaryScale]) -> int:
    """Resolve a resolution tier ("small"/"medium"/"large" or 110/50/10) to a Natural Earth scale."""
    if isinstance(scale, int) or str(scale).isdigit():
        if int(scale) in _SCALE_TO_NE.values():
            return int(scale)
    else:
        try:
            return _SCALE_TO_NE[BoundaryScale(str(scale).lower())]
        except ValueError:
            pass
    raise ValueError(
        f"Unknown boundary scale: {scale}. Use one of {[s.value for s in BoundaryScale]} or 110, 50, 10."
    )


def select_country(countries: gpd.GeoDataFrame, country_name: str) -> gpd.GeoDataFrame:
    """Pick the rows of a countries layer whose name matches, case-insensitively."""
    target = country_name.strip().casefold()
    for col in COUNTRY_NAME_COLUMNS:
        if col not in countries.columns:
            continue
        matches = countries[countries[col].astype(str).str.casefold() == target]
        if not matches.empty:
            return matches
    return countries.iloc[0:0]


def fetch_country_boundary(
    country_name: str = species_data.country_name,
    scale: Union[str, int, BoundaryScale] = BoundaryScale.MEDIUM,
) -> gpd.GeoDataFrame:
    """
    Download a country outline from Natural Earth.

    Args:
        country_name: Country name as used by Natural Earth, e.g. "Italy".
        scale: Resolution tier; "small" (1:110m), "medium" (1:50m) or "large" (1:10m).

    Returns:
        Single-row GeoDataFrame in EPSG:4326 holding the (dissolved) country polygon.
    """
    if not isinstance(country_name, str) or not country_name.strip():
        raise ValueError(f"country_name must be a non-empty string, got {country_name!r}")
    ne_scale = natural_earth_scale(scale)
    url = NATURAL_EARTH_COUNTRIES_URL.format(scale=ne_scale)

    logger.info(f"Downloading Natural Earth 1:{ne_scale}m countries from {url}")
    try:
        countries = gpd.read_file(url)
    except Exception as e:
        logger.error(f"Error downloading country boundaries: {e}")
        raise AcquisitionError(f"Could not download country boundaries from {url}: {e}") from e

    country = select_country(countries, country_name)
    if country.empty:
        raise AcquisitionError(f"No country named '{country_name}' found in Natural Earth 1:{ne_scale}m data.")

    country = country.to_crs(species_data.occurrence_crs)
    boundary = gpd.GeoDataFrame(
        {"name": [country_name]},
        geometry=[country.union_all()],
        crs=country.crs,
    )
    logger.info(f"Loaded boundary for {country_name} with bounds {tuple(boundary.total_bounds)}")
    return boundary
