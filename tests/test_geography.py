import subprocess
import sys

import pytest

from missing_persons.data.geography import (
    county_feature_key,
    county_rates,
    join_key,
    keyed_geojson,
    normalize_region_name,
    parse_population,
    rate,
    state_counts,
)
from missing_persons.data.projection import PlotRecord, records_frame

COUNTIES = {
    "type": "FeatureCollection",
    "features": [
        {"properties": {"NAME": "Orange", "NAMELSAD": "Orange County", "STATE": "California"}},
        {"properties": {"NAME": "Orleans", "NAMELSAD": "Orleans Parish", "STATE": "Louisiana"}},
        {"properties": {"NAME": "Nowhere", "NAMELSAD": "Nowhere County", "STATE": "Nevada"}},
    ],
}

STATES = {
    "type": "FeatureCollection",
    "features": [
        {"properties": {"NAME": "California"}},
        {"properties": {"NAME": "Louisiana"}},
        {"properties": {"NAME": "Alaska"}},
    ],
}


def _frame():
    return records_frame(
        [
            PlotRecord(index=0, county="Orange", state="California"),
            PlotRecord(index=1, county="Orange County", state="California"),
            PlotRecord(index=2, county="Orleans", state="Louisiana"),
            PlotRecord(index=3, county="Anchorage", state="Alaska"),
        ]
    )


def test_admin_suffixes_are_stripped():
    assert join_key("Orange County", "California") == "Orange, California"
    assert join_key("Orleans Parish", "Louisiana") == "Orleans, Louisiana"
    assert join_key("Nome Census Area", "Alaska") == "Nome, Alaska"
    assert normalize_region_name("Orange County") == normalize_region_name("orange")


def test_parse_population():
    csv_text = (
        "Geographic Area,2023\n"
        '".Orange County, California","3,135,755"\n'
        '".Orleans Parish, Louisiana","364,136"\n'
        "California,not-a-number\n"
    )
    assert parse_population(csv_text) == {
        "Orange, California": 3135755,
        "Orleans, Louisiana": 364136,
    }


def test_parse_population_requires_columns():
    with pytest.raises(ValueError):
        parse_population("Area,Value\nx,1\n")


def test_county_rates_join():
    population = {"Orange, California": 200_000, "Orleans, Louisiana": 100_000}
    rates = county_rates(_frame(), [0, 1, 2], COUNTIES, population).set_index("key")

    assert rates.loc["Orange, California", "count"] == 2
    assert rates.loc["Orange, California", "rate"] == pytest.approx(1.0)
    assert rates.loc["Orleans, Louisiana", "rate"] == pytest.approx(1.0)
    # join misses default to zero cases over a population of one
    assert rates.loc["Nowhere, Nevada", "count"] == 0
    assert rates.loc["Nowhere, Nevada", "population"] == 1
    assert rates.loc["Nowhere, Nevada", "rate"] == 0


def test_county_rates_follow_filtered_indices():
    rates = county_rates(_frame(), [2], COUNTIES, {}).set_index("key")
    assert rates.loc["Orange, California", "count"] == 0
    assert rates.loc["Orleans, Louisiana", "count"] == 1


def test_state_counts_skip_non_contiguous():
    counts = state_counts(_frame(), [0, 1, 2, 3], STATES)
    assert dict(zip(counts["state"], counts["count"])) == {"California": 2, "Louisiana": 1}


def test_keyed_geojson_sets_feature_ids():
    keyed = keyed_geojson(COUNTIES, county_feature_key)
    assert [f["id"] for f in keyed["features"]] == [
        "Orange, California",
        "Orleans, Louisiana",
        "Nowhere, Nevada",
    ]
    assert "id" not in COUNTIES["features"][0]


def test_rate_with_zero_population():
    assert rate(0, 0) == 0
    assert rate(3, 0) == 300_000
    assert rate(5, 500_000) == pytest.approx(1.0)


def test_data_layer_does_not_import_ui():
    code = (
        "import sys, missing_persons.data.loader, missing_persons.data.filters\n"
        "assert not [m for m in sys.modules if m.startswith('missing_persons.ui')]\n"
    )
    subprocess.run([sys.executable, "-c", code], check=True)
