from datetime import datetime

import pytest

from conftest import NOW, raw_record
from missing_persons.config import UNKNOWN
from missing_persons.data.projection import dig, project, race_label, records_frame


def test_project_reads_nested_fields():
    (record,) = project([raw_record(age=25, date="2014-01-01")], now=NOW)

    assert record.index == 0
    assert record.age == 25
    assert record.height == 66
    assert record.weight == 150
    assert record.gender == "Female"
    assert record.eye_color == "Brown"
    assert record.race == "Caucasian"
    assert record.county == "Orange"
    assert record.state == "California"
    assert record.full_name == "Jane Doe"
    assert record.photo_url.startswith("https://namus.gov/api/")
    assert record.circumstances == "Last seen leaving work."
    assert record.years_missing == pytest.approx(10.0, abs=0.01)


def test_missing_fields_fall_back_to_defaults():
    (record,) = project([{}], now=NOW)

    assert record.age == 0
    assert record.years_missing == 0
    assert record.height == 0
    assert record.weight == 0
    assert record.gender == UNKNOWN
    assert record.eye_color == UNKNOWN
    assert record.race == UNKNOWN
    assert record.state == UNKNOWN
    assert record.county == UNKNOWN
    assert record.photo_url == ""
    assert record.full_name == ""


def test_null_and_garbage_values():
    raw = raw_record(age=None, weight="n/a", date="not a date")
    raw["subjectDescription"]["sex"] = None
    (record,) = project([raw], now=NOW)

    assert record.age == 0
    assert record.weight == 0
    assert record.years_missing == 0
    assert record.gender == UNKNOWN


def test_indices_follow_input_order(raw_records):
    records = project(raw_records, now=NOW)
    assert [r.index for r in records] == [0, 1, 2, 3]
    assert [r.age for r in records] == [25, 40, 12, 67]


def test_naive_now_is_treated_as_utc():
    (record,) = project([raw_record(date="2014-01-01")], now=datetime(2024, 1, 1))
    assert record.years_missing == pytest.approx(10.0, abs=0.01)


def test_race_labels_are_shortened():
    assert race_label("Black / African American") == "African American"
    assert race_label("American Indian / Alaska Native") == "Native Amer"
    assert race_label("Asian") == "Asian"
    assert race_label(None) == UNKNOWN


def test_dig():
    data = {"a": {"b": {"c": 1}}, "n": None}
    assert dig(data, "a", "b", "c") == 1
    assert dig(data, "a", "x", "c", default="d") == "d"
    assert dig(data, "n", "b") is None
    assert dig("text", "a") is None


def test_records_frame_is_indexed_by_record_index(raw_records):
    frame = records_frame(project(raw_records, now=NOW))
    assert list(frame.index) == [0, 1, 2, 3]
    assert frame.loc[2, "county"] == "Cook"
    assert records_frame([]).empty


def test_non_list_images_have_no_photo():
    (record,) = project([{"images": {"files": {}}}], now=NOW)
    assert record.photo_url == ""
    assert project([{"images": ["not-a-dict"]}], now=NOW)[0].photo_url == ""
