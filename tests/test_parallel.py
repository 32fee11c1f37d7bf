from missing_persons.config import DIMENSIONS
from missing_persons.data.filters import FilterStore, NumericRange
from missing_persons.data.geography import Region
from missing_persons.data.projection import PlotRecord
from missing_persons.ui.pages.parallel import bucket_table

AGE = DIMENSIONS["age"]


def _store():
    ages = [0, 10, 10, 10, 20, 30, 40]
    return FilterStore(
        [
            PlotRecord(
                index=i,
                age=age,
                gender="Female" if i % 2 else "Male",
                county="Orange" if i < 3 else "Cook",
                state="California" if i < 3 else "Illinois",
            )
            for i, age in enumerate(ages)
        ]
    )


def test_bar_count_matches_click_result():
    store = _store()
    table = bucket_table(store, AGE, store.frame["age"])
    for low, high, count in zip(table["low"], table["high"], table["count"]):
        store.toggle_dimension_range("age", NumericRange(low, high))
        assert store.surviving_count == count
        assert len(store.get_surviving_indices()) == count
        store.toggle_dimension_range("age", NumericRange(low, high))
    assert store.state.is_empty


def test_edge_value_counts_in_both_neighbouring_bars():
    store = _store()
    table = bucket_table(store, AGE, store.frame["age"])
    touching = table[(table["low"] <= 10) & (table["high"] >= 10)]
    assert len(touching) == 2
    assert set(touching["count"]) == {3}


def test_bucket_boundaries_ignore_filter_changes():
    store = _store()
    before = bucket_table(store, AGE, store.frame["age"])

    position = before.index[before["low"] == 10][0]
    store.toggle_dimension_range("age", NumericRange(before["low"][position], before["high"][position]))
    store.toggle_dimension_range("gender", "Female")
    store.toggle_geography(Region("Orange County", "California"))
    assert store.get_surviving_indices() == [1]

    after = bucket_table(store, AGE, store.filtered_frame()["age"])
    assert after["low"].tolist() == before["low"].tolist()
    assert after["high"].tolist() == before["high"].tolist()
    assert after["selected"].tolist() == [i == position for i in range(len(after))]
    assert sum(after["count"]) < sum(before["count"])

    store.clear_all()
    cleared = bucket_table(store, AGE, store.frame["age"])
    assert cleared["low"].tolist() == before["low"].tolist()
    assert cleared["count"].tolist() == before["count"].tolist()
