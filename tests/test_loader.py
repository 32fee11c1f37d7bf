import json

import pytest
import requests

from conftest import raw_record
from missing_persons.config import DataSources
from missing_persons.data.loader import (
    SOURCE_COUNTY_GEOJSON,
    SOURCE_DATASET,
    SOURCE_POPULATION,
    FetchError,
    LoadError,
    ParseError,
    filter_plausible,
    is_plausible,
    load_sources,
)

SOURCES = DataSources(
    dataset_url="https://example.test/data.json",
    county_geojson_url="https://example.test/counties.geojson",
    state_geojson_url="https://example.test/states.geojson",
    population_url="https://example.test/population.csv",
    timeout=1.0,
)

POPULATION_CSV = 'Geographic Area,2020,2023\n".Orange County, California","3,186,989","3,135,755"\n'


class _FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class _FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def _responses(**overrides):
    responses = {
        SOURCES.dataset_url: _FakeResponse(payload=[raw_record(), raw_record(weight=450)]),
        SOURCES.county_geojson_url: _FakeResponse(payload={"type": "FeatureCollection", "features": [{}]}),
        SOURCES.state_geojson_url: _FakeResponse(payload={"type": "FeatureCollection", "features": [{}, {}]}),
        SOURCES.population_url: _FakeResponse(text=POPULATION_CSV),
    }
    responses.update(overrides)
    return responses


def test_plausibility_bounds():
    assert is_plausible(raw_record())
    assert not is_plausible(raw_record(weight=450))
    assert not is_plausible(raw_record(height=101))
    assert not is_plausible(raw_record(age=116))
    assert is_plausible(raw_record(weight=400, height=100, age=115))
    assert is_plausible({})


def test_filter_plausible_drops_non_records():
    kept = filter_plausible([raw_record(), "junk", raw_record(weight=450)])
    assert kept == [raw_record()]


def test_load_sources_success():
    session = _FakeSession(_responses())
    loaded = load_sources(SOURCES, session=session)

    assert len(loaded.records) == 1
    assert loaded.population == {"Orange, California": 3135755}
    assert loaded.diagnostics["raw_row_count"] == 2
    assert loaded.diagnostics["dropped_implausible"] == 1
    assert loaded.diagnostics["county_features"] == 1
    assert loaded.diagnostics["state_features"] == 2
    assert sorted(session.requested) == sorted(
        [SOURCES.dataset_url, SOURCES.county_geojson_url, SOURCES.state_geojson_url, SOURCES.population_url]
    )


def test_http_error_is_tagged_with_source():
    session = _FakeSession(_responses(**{SOURCES.county_geojson_url: _FakeResponse(status_code=404, payload={})}))
    with pytest.raises(FetchError) as info:
        load_sources(SOURCES, session=session)
    assert info.value.source == SOURCE_COUNTY_GEOJSON


def test_network_error_is_fetch_error():
    session = _FakeSession(_responses(**{SOURCES.dataset_url: requests.ConnectionError("boom")}))
    with pytest.raises(FetchError) as info:
        load_sources(SOURCES, session=session)
    assert info.value.source == SOURCE_DATASET


def test_malformed_json_is_parse_error():
    session = _FakeSession(_responses(**{SOURCES.dataset_url: _FakeResponse(text="{not json")}))
    with pytest.raises(ParseError) as info:
        load_sources(SOURCES, session=session)
    assert info.value.source == SOURCE_DATASET


def test_dataset_must_be_an_array():
    session = _FakeSession(_responses(**{SOURCES.dataset_url: _FakeResponse(payload={"cases": []})}))
    with pytest.raises(ParseError):
        load_sources(SOURCES, session=session)


def test_population_without_columns_is_parse_error():
    session = _FakeSession(_responses(**{SOURCES.population_url: _FakeResponse(text="a,b\n1,2\n")}))
    with pytest.raises(LoadError) as info:
        load_sources(SOURCES, session=session)
    assert isinstance(info.value, ParseError)
    assert info.value.source == SOURCE_POPULATION


def test_first_failure_in_source_order_wins():
    session = _FakeSession(
        _responses(
            **{
                SOURCES.dataset_url: _FakeResponse(status_code=500, payload={}),
                SOURCES.population_url: _FakeResponse(status_code=500, payload={}),
            }
        )
    )
    with pytest.raises(FetchError) as info:
        load_sources(SOURCES, session=session)
    assert info.value.source == SOURCE_DATASET
    assert len(session.requested) == 4


class _ClosingSession(_FakeSession):
    def __init__(self, responses):
        super().__init__(responses)
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True


def test_owned_session_is_closed(monkeypatch):
    session = _ClosingSession(_responses())
    monkeypatch.setattr(requests, "Session", lambda: session)

    loaded = load_sources(SOURCES)
    assert len(loaded.records) == 1
    assert session.closed


def test_owned_session_is_closed_on_failure(monkeypatch):
    session = _ClosingSession(_responses(**{SOURCES.dataset_url: _FakeResponse(status_code=503, payload={})}))
    monkeypatch.setattr(requests, "Session", lambda: session)

    with pytest.raises(FetchError):
        load_sources(SOURCES)
    assert session.closed
