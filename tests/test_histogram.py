import pytest

from conftest import make_results
from stats_simulator.simulation.histogram import BinningPolicy, compute_histogram


def test_empty_results():
    histogram = compute_histogram([])

    assert histogram.labels == []
    assert histogram.data == []


def test_unlimited_bins_fill_gaps_with_zero():
    histogram = compute_histogram(make_results([45, 50, 55, 45, 50]))

    assert histogram.labels == [str(v) for v in range(45, 56)]
    assert histogram.data[0] == 2
    assert histogram.data[5] == 2
    assert histogram.data[10] == 1
    assert sum(histogram.data) == 5
    assert histogram.data.count(0) == 8


def test_unlimited_single_value():
    histogram = compute_histogram(make_results([7, 7, 7]))

    assert histogram.labels == ["7"]
    assert histogram.data == [3]


def test_capped_bins_group_ranges():
    # span of 41 values over at most 20 bins gives a width of 3
    results = make_results([10, 11, 12, 13, 30, 50])

    histogram = compute_histogram(results, BinningPolicy.CAPPED)

    assert len(histogram.labels) == 20
    assert histogram.labels[0] == "10-12"
    assert histogram.labels[1] == "13-15"
    assert histogram.data[0] == 3
    assert histogram.data[1] == 1
    # (30 - 10) // 3 == 6, (50 - 10) // 3 == 13
    assert histogram.data[6] == 1
    assert histogram.data[13] == 1
    assert sum(histogram.data) == 6


def test_capped_bins_with_narrow_span_use_one_bin_per_value():
    histogram = compute_histogram(make_results([3, 4, 4, 6]), "capped")

    assert histogram.labels == ["3-3", "4-4", "5-5", "6-6"]
    assert histogram.data == [1, 2, 0, 1]


def test_capped_single_value():
    histogram = compute_histogram(make_results([9, 9]), BinningPolicy.CAPPED)

    assert histogram.labels == ["9-9"]
    assert histogram.data == [2]


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        compute_histogram(make_results([1]), "logarithmic")
