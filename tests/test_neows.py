"""Tests for the NeoWs candidate provider."""

from __future__ import annotations

import copy
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from neoimpact.data.neows import NeoWsClient
from neoimpact.errors import ProviderFetchFailure

from test_bodies import NEO_RECORD


def _record(neo_id: str, magnitude: float | None, **overrides) -> dict:
    record = copy.deepcopy(NEO_RECORD)
    record["id"] = neo_id
    record["name"] = f"NEO {neo_id}"
    if magnitude is None:
        del record["absolute_magnitude_h"]
    else:
        record["absolute_magnitude_h"] = magnitude
    record.update(overrides)
    return record


def _make_response(status_code: int = 200, payload=None) -> MagicMock:
    """Helper to create a mock response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.raise_for_status = MagicMock()
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error", response=resp
        )
    return resp


def _feed(*days: list[dict]) -> dict:
    return {
        "element_count": sum(len(d) for d in days),
        "near_earth_objects": {f"2026-10-{11 + i:02d}": d for i, d in enumerate(days)},
    }


def test_client_defaults():
    client = NeoWsClient()
    assert client.base_url == "https://api.nasa.gov/neo/rest/v1"
    assert client.api_key
    assert client.timeout > 0


def test_fetch_feed_query():
    client = NeoWsClient(api_key="KEY")
    with patch.object(client._session, "get", return_value=_make_response(200, _feed([]))) as get:
        client.fetch_feed(date(2026, 10, 11), date(2026, 10, 18))
    url = get.call_args.args[0]
    kwargs = get.call_args.kwargs
    assert url == "https://api.nasa.gov/neo/rest/v1/feed"
    assert kwargs["params"] == {"api_key": "KEY", "start_date": "2026-10-11", "end_date": "2026-10-18"}
    assert kwargs["timeout"] == client.timeout


def test_fetch_candidates_window():
    client = NeoWsClient()
    with patch.object(client._session, "get", return_value=_make_response(200, _feed([]))) as get:
        client.fetch_candidates(today=date(2026, 10, 18))
    params = get.call_args.kwargs["params"]
    assert params["start_date"] == "2026-10-11"
    assert params["end_date"] == "2026-10-18"


def test_fetch_candidates_flattens_and_sorts():
    """Records from every day are pooled and ordered by magnitude, highest first."""
    client = NeoWsClient()
    feed = _feed(
        [_record("1", 18.0), _record("2", 25.5)],
        [_record("3", 21.0)],
        [_record("4", None), _record("5", 19.2)],
    )
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["2", "3", "5", "1", "4"]


def test_fetch_candidates_truncates():
    client = NeoWsClient()
    feed = _feed([_record(str(i), 15.0 + i) for i in range(30)])
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert len(bodies) == 20
    assert bodies[0].id == "29"


def test_fetch_candidates_custom_limit():
    client = NeoWsClient()
    feed = _feed([_record(str(i), 15.0 + i) for i in range(10)])
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(limit=3, today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["9", "8", "7"]


def test_fetch_candidates_skips_malformed():
    """Malformed records and records without approaches are skipped, not fatal."""
    client = NeoWsClient()
    broken = _record("bad", 30.0)
    broken["close_approach_data"][0]["miss_distance"]["kilometers"] = "???"
    empty = _record("empty", 29.0, close_approach_data=[])
    feed = _feed([broken, empty, _record("good", 20.0)])
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["good"]


def test_fetch_candidates_day_not_a_list():
    """A day whose value is not a list is a malformed envelope."""
    client = NeoWsClient()
    feed = {"near_earth_objects": {"2026-10-11": "oops", "2026-10-12": [_record("1", 20.0)]}}
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        with pytest.raises(ProviderFetchFailure, match="2026-10-11"):
            client.fetch_candidates(today=date(2026, 10, 18))


def test_fetch_candidates_skips_non_object_records():
    client = NeoWsClient()
    feed = _feed(["junk", 42, None, _record("good", 20.0)], [["nested"]])
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["good"]


def test_fetch_candidates_null_day():
    client = NeoWsClient()
    feed = {"near_earth_objects": {"2026-10-11": None, "2026-10-12": [_record("1", 20.0)]}}
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["1"]


def test_fetch_candidates_non_numeric_magnitude():
    """A text magnitude neither breaks the sort nor survives parsing."""
    client = NeoWsClient()
    feed = _feed([_record("text", None, absolute_magnitude_h="bright"), _record("1", 18.0), _record("2", 22.0)])
    with patch.object(client._session, "get", return_value=_make_response(200, feed)):
        bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["2", "1"]


def test_fetch_candidates_http_error():
    client = NeoWsClient()
    with patch.object(client._session, "get", return_value=_make_response(429, {})):
        with pytest.raises(ProviderFetchFailure, match="429") as exc_info:
            client.fetch_candidates()
    assert isinstance(exc_info.value.__cause__, requests.HTTPError)


def test_fetch_candidates_connection_error():
    client = NeoWsClient()
    with patch.object(client._session, "get", side_effect=requests.ConnectionError("offline")):
        with pytest.raises(ProviderFetchFailure, match="offline"):
            client.fetch_candidates()


def test_fetch_candidates_invalid_json():
    client = NeoWsClient()
    resp = _make_response(200)
    resp.json.side_effect = ValueError("Expecting value")
    with patch.object(client._session, "get", return_value=resp):
        with pytest.raises(ProviderFetchFailure, match="Invalid JSON"):
            client.fetch_candidates()


def test_fetch_candidates_missing_envelope():
    client = NeoWsClient()
    with patch.object(client._session, "get", return_value=_make_response(200, {"links": {}})):
        with pytest.raises(ProviderFetchFailure, match="near_earth_objects"):
            client.fetch_candidates()


def test_fetch_candidates_non_object_payload():
    client = NeoWsClient()
    with patch.object(client._session, "get", return_value=_make_response(200, ["not", "a", "dict"])):
        with pytest.raises(ProviderFetchFailure):
            client.fetch_candidates()


def test_lookup_success():
    client = NeoWsClient()
    with patch.object(client._session, "get", return_value=_make_response(200, NEO_RECORD)) as get:
        body = client.lookup("2465633")
    assert get.call_args.args[0].endswith("/neo/2465633")
    assert body.id == "2465633"
    assert len(body.close_approaches) == 2


def test_lookup_malformed():
    client = NeoWsClient()
    with patch.object(client._session, "get", return_value=_make_response(200, {"id": "1"})):
        with pytest.raises(ProviderFetchFailure, match="Malformed record"):
            client.lookup("1")
