"""GBIF occurrence download."""

import logging
from typing import Optional

import pandas as pd
import requests
from tqdm import tqdm

from lepmap.errors import AcquisitionError
from lepmap.occurrence import species_data

logger = logging.getLogger(__name__)

GBIF_OCCURRENCE_URL = "https://api.gbif.org/v1/occurrence/search"
# The search API refuses offset + limit beyond this
GBIF_OFFSET_LIMIT = 100000
GBIF_MAX_PAGE_SIZE = 300


def _check_query_string(value, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string, got {value!r}")
    return value.strip()


def fetch_gbif_page(
    session: requests.Session,
    params: dict,
    timeout: float = 60,
) -> dict:
    """Fetch a single page of occurrence search results."""
    try:
        response = session.get(GBIF_OCCURRENCE_URL, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"GBIF request failed (offset={params.get('offset')}): {e}")
        raise AcquisitionError(f"GBIF occurrence search failed: {e}") from e


def fetch_gbif_occurrences(
    species: str,
    country: str,
    has_coordinate: bool = True,
    limit: Optional[int] = None,
    page_size: int = GBIF_MAX_PAGE_SIZE,
    session: Optional[requests.Session] = None,
) -> pd.DataFrame:
    """
    Download occurrence records for a species in a country from the GBIF search API.

    Args:
        species: Scientific name to query, e.g. "Papilio machaon".
        country: ISO 3166-1 alpha-2 country code, e.g. "IT".
        has_coordinate: Only request records that carry coordinates.
        limit: Maximum number of records to return. None fetches everything the API allows.
        page_size: Records requested per page (max 300).
        session: Optional requests session, mainly so callers can share connections.

    Returns:
        DataFrame with one row per record, holding the coordinate columns and the
        metadata fields listed in species_data.gbif_record_fields that were present.

    Raises:
        ValueError: If species or country is not a non-empty string.
        AcquisitionError: If the service fails or no records with coordinates are found.
    """
    species = _check_query_string(species, "species")
    country = _check_query_string(country, "country")
    page_size = max(1, min(int(page_size), GBIF_MAX_PAGE_SIZE))
    max_records = GBIF_OFFSET_LIMIT if limit is None else min(int(limit), GBIF_OFFSET_LIMIT)

    session = session or requests.Session()
    records = []
    offset = 0
    end_of_records = False
    pbar = None

    logger.info(f"Querying GBIF for '{species}' in {country} (hasCoordinate={has_coordinate})")
    while offset < max_records:
        params = {
            "scientificName": species,
            "country": country,
            "hasCoordinate": str(has_coordinate).lower(),
            "limit": min(page_size, max_records - offset),
            "offset": offset,
        }
        page = fetch_gbif_page(session, params)
        results = page.get("results", [])

        if pbar is None:
            total = min(page.get("count", len(results)), max_records)
            pbar = tqdm(total=total, desc="Downloading GBIF records", dynamic_ncols=True)
        pbar.update(len(results))

        records.extend(results)
        offset += len(results)
        logger.debug(f"Fetched {len(results)} records (offset now {offset})")

        end_of_records = page.get("endOfRecords", True) or not results
        if end_of_records:
            break

    if pbar is not None:
        pbar.close()

    if not end_of_records and offset >= GBIF_OFFSET_LIMIT:
        logger.warning(
            f"Reached the GBIF search offset limit of {GBIF_OFFSET_LIMIT}; remaining records were not downloaded."
        )

    x_col, y_col = species_data.gbif_coordinate_columns
    columns = [x_col, y_col] + species_data.gbif_record_fields
    occurrences = pd.DataFrame.from_records(records)
    for col in columns:
        if col not in occurrences.columns:
            occurrences[col] = None
    occurrences = occurrences[columns]

    # Presence of both coordinates is the only check made here
    occurrences = occurrences.dropna(subset=[x_col, y_col]).reset_index(drop=True)

    if occurrences.empty:
        logger.error(f"No GBIF occurrences with coordinates found for '{species}' in {country}")
        raise AcquisitionError(f"No GBIF occurrences with coordinates found for '{species}' in {country}")

    logger.info(f"Downloaded {len(occurrences)} GBIF occurrence records")
    return occurrences
