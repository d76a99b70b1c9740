import logging
from unittest.mock import MagicMock

import pandas as pd
import pytest
import requests

from lepmap.errors import AcquisitionError
from lepmap.occurrence import gbif
from lepmap.occurrence.gbif import fetch_gbif_occurrences, GBIF_OCCURRENCE_URL


def record(key, lon=12.5, lat=43.1):
    rec = {"key": key, "species": "Papilio machaon", "scientificName": "Papilio machaon Linnaeus, 1758"}
    if lon is not None:
        rec["decimalLongitude"] = lon
    if lat is not None:
        rec["decimalLatitude"] = lat
    return rec


def mock_session(pages):
    """A session whose get() returns the given pages of search results in turn."""
    responses = []
    for page in pages:
        response = MagicMock()
        response.json.return_value = page
        response.raise_for_status.return_value = None
        responses.append(response)
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = responses
    return session


def test_fetch_pages_until_end_of_records():
    session = mock_session(
        [
            {"count": 3, "endOfRecords": False, "results": [record(1), record(2)]},
            {"count": 3, "endOfRecords": True, "results": [record(3, 11.0, 44.0)]},
        ]
    )
    occurrences = fetch_gbif_occurrences("Papilio machaon", "IT", page_size=2, session=session)

    assert isinstance(occurrences, pd.DataFrame)
    assert occurrences["key"].tolist() == [1, 2, 3]
    assert {"decimalLongitude", "decimalLatitude", "eventDate", "year"} <= set(occurrences.columns)
    assert session.get.call_count == 2

    url = session.get.call_args_list[0].args[0]
    first_params = session.get.call_args_list[0].kwargs["params"]
    second_params = session.get.call_args_list[1].kwargs["params"]
    assert url == GBIF_OCCURRENCE_URL
    assert first_params["scientificName"] == "Papilio machaon"
    assert first_params["country"] == "IT"
    assert first_params["hasCoordinate"] == "true"
    assert first_params["offset"] == 0
    assert second_params["offset"] == 2


def test_fetch_respects_limit():
    session = mock_session(
        [
            {"count": 10, "endOfRecords": False, "results": [record(1), record(2)]},
            {"count": 10, "endOfRecords": False, "results": [record(3)]},
        ]
    )
    occurrences = fetch_gbif_occurrences("Papilio machaon", "IT", limit=3, page_size=2, session=session)

    assert len(occurrences) == 3
    assert session.get.call_args_list[1].kwargs["params"]["limit"] == 1


def test_fetch_drops_records_without_coordinates():
    session = mock_session(
        [{"count": 3, "endOfRecords": True, "results": [record(1), record(2, lon=None), record(3, lat=None)]}]
    )
    occurrences = fetch_gbif_occurrences("Papilio machaon", "IT", session=session)
    assert occurrences["key"].tolist() == [1]


def test_fetch_empty_result_is_fatal():
    session = mock_session([{"count": 0, "endOfRecords": True, "results": []}])
    with pytest.raises(AcquisitionError):
        fetch_gbif_occurrences("Papilio machaon", "IT", session=session)


def test_fetch_service_error_is_fatal():
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("no route to host")
    with pytest.raises(AcquisitionError):
        fetch_gbif_occurrences("Papilio machaon", "IT", session=session)


def test_fetch_http_error_is_fatal():
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("503 Service Unavailable")
    session = MagicMock(spec=requests.Session)
    session.get.return_value = response
    with pytest.raises(AcquisitionError):
        fetch_gbif_occurrences("Papilio machaon", "IT", session=session)


@pytest.mark.parametrize("species,country", [("", "IT"), ("Papilio machaon", "  "), (None, "IT")])
def test_fetch_requires_non_empty_strings(species, country):
    with pytest.raises(ValueError):
        fetch_gbif_occurrences(species, country, session=MagicMock(spec=requests.Session))


def test_fetch_stops_at_offset_ceiling(monkeypatch, caplog):
    monkeypatch.setattr(gbif, "GBIF_OFFSET_LIMIT", 3)
    session = mock_session(
        [
            {"count": 10, "endOfRecords": False, "results": [record(1), record(2)]},
            {"count": 10, "endOfRecords": False, "results": [record(3)]},
        ]
    )
    with caplog.at_level(logging.WARNING, logger="lepmap.occurrence.gbif"):
        occurrences = fetch_gbif_occurrences("Papilio machaon", "IT", page_size=2, session=session)

    assert len(occurrences) == 3
    assert session.get.call_count == 2
    assert session.get.call_args_list[-1].kwargs["params"]["limit"] == 1
    assert "offset limit" in caplog.text


def test_fetch_no_ceiling_warning_when_records_end_at_ceiling(monkeypatch, caplog):
    monkeypatch.setattr(gbif, "GBIF_OFFSET_LIMIT", 2)
    session = mock_session([{"count": 2, "endOfRecords": True, "results": [record(1), record(2)]}])

    with caplog.at_level(logging.WARNING, logger="lepmap.occurrence.gbif"):
        occurrences = fetch_gbif_occurrences("Papilio machaon", "IT", page_size=2, session=session)

    assert len(occurrences) == 2
    assert "offset limit" not in caplog.text
