import pytest

from missing_persons.ui.pages.helpers import (
    bin_values,
    count_by_category,
    count_in_buckets,
    national_average,
    representation_ratios,
    sample_indices,
    share,
)


def test_bins_span_full_range():
    buckets = bin_values([0, 5, 10, 20], 4)
    assert len(buckets) == 4
    assert buckets[0].low == 0
    assert buckets[-1].high == 20
    for left, right in zip(buckets, buckets[1:]):
        assert left.high == pytest.approx(right.low)


def test_bins_ignore_filtered_subset():
    full = [1, 2, 3, 50, 100]
    counts = count_in_buckets([1, 2, 3], bin_values(full, 5))
    assert counts == [3, 0, 0, 0, 0]


def test_zero_variance_gives_single_bucket():
    buckets = bin_values([7, 7, 7], 20)
    assert len(buckets) == 1
    assert count_in_buckets([7, 7], buckets) == [2]


def test_empty_values_give_no_buckets():
    assert bin_values([], 20) == []
    assert bin_values([float("nan")], 20) == []
    assert count_in_buckets([1, 2], []) == []


def test_bucket_bounds_are_closed_like_range_filters():
    buckets = bin_values([0, 10], 2)
    # 5 sits on the shared edge and belongs to both bars
    assert count_in_buckets([0, 5, 10], buckets) == [2, 2]


def test_count_by_category_ordering():
    counts = count_by_category(["b", "a", "c", "a", "b", "", None])
    assert list(counts.items()) == [("a", 2), ("b", 2), ("c", 1)]


def test_national_average_ignores_unknowns():
    assert national_average([0, 10, 20]) == 15
    assert national_average([0, 0]) is None


def test_share():
    assert share(1, 4) == 25
    assert share(1, 0) is None


def test_representation_ratios():
    ratios = representation_ratios(["Brown"] * 45 + ["Blue"] * 55).set_index("Eye Color")
    assert ratios.loc["Brown", "Ratio"] == 1.0
    assert ratios.loc["Blue", "Ratio"] == pytest.approx(2.04)
    assert ratios.loc["Green", "Ratio"] == 0


def test_sample_indices():
    assert sample_indices(10, 100) == list(range(10))
    assert sample_indices(1000, 100) == list(range(0, 1000, 10))
    assert sample_indices(0, 100) == []
