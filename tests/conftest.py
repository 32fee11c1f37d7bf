from datetime import datetime, timezone

import pytest

from missing_persons.data.filters import FilterStore
from missing_persons.data.projection import PlotRecord

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def raw_record(
    age=30,
    weight=150,
    height=66,
    sex="Female",
    eye="Brown",
    ethnicity="White / Caucasian",
    county="Orange",
    state="California",
    date="2014-01-01",
    first="Jane",
    last="Doe",
):
    """A NamUs-shaped raw record with the fields the dashboard reads."""
    return {
        "subjectIdentification": {
            "computedMissingMinAge": age,
            "firstName": first,
            "lastName": last,
        },
        "subjectDescription": {
            "heightFrom": height,
            "weightFrom": weight,
            "sex": {"localizedName": sex},
            "primaryEthnicity": {"localizedName": ethnicity},
        },
        "physicalDescription": {"leftEyeColor": {"localizedName": eye}},
        "sighting": {
            "date": date,
            "address": {"county": {"name": county}, "state": {"name": state}},
        },
        "images": [{"files": {"original": {"href": "/api/CaseSets/NamUs/MissingPersons/Cases/1/Images/1/Original"}}}],
        "circumstances": {"circumstancesOfDisappearance": "Last seen leaving work."},
    }


@pytest.fixture
def raw_records():
    return [
        raw_record(age=25, sex="Female", eye="Blue", county="Orange", state="California"),
        raw_record(age=40, sex="Male", eye="Brown", county="Orange", state="Florida"),
        raw_record(age=12, sex="Male", eye="Green", county="Cook", state="Illinois"),
        raw_record(age=67, sex="Female", eye="Brown", county="King", state="Washington"),
    ]


@pytest.fixture
def age_store():
    ages = [10, 20, 20, 30, 40]
    return FilterStore([PlotRecord(index=i, age=a) for i, a in enumerate(ages)])


@pytest.fixture
def geo_store():
    places = [
        ("Orange County", "California"),
        ("Orange", "California"),
        ("Orange", "Florida"),
        ("Cook", "Illinois"),
    ]
    return FilterStore(
        [
            PlotRecord(index=i, county=county, state=state, gender="Female" if i % 2 else "Male")
            for i, (county, state) in enumerate(places)
        ]
    )
