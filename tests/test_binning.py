import random

import pytest

from upload_analytics.core.analysis.binning import histogram_bins, value_ranges
from upload_analytics.core.exceptions import EmptyColumnError


def test_constant_values_land_in_first_bin():
    bins = histogram_bins([1, 1, 1, 1], 10)

    assert len(bins) == 10
    assert bins[0].count == 4
    assert all(bin_.count == 0 for bin_ in bins[1:])


def test_counts_sum_to_input_length_and_empty_bins_kept():
    values = [0, 0, 0, 10, 10, 10, 5]
    bins = histogram_bins(values, 10)

    assert len(bins) == 10
    assert sum(bin_.count for bin_ in bins) == len(values)
    assert any(bin_.count == 0 for bin_ in bins)


def test_last_bin_includes_maximum():
    bins = histogram_bins([0, 2.5, 5, 7.5, 10], 4)

    assert [bin_.count for bin_ in bins] == [1, 1, 1, 2]
    assert bins[-1].upper_bound == 10


def test_lower_bound_is_inclusive():
    bins = histogram_bins([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10], 10)
    assert [bin_.count for bin_ in bins] == [1] * 9 + [2]


def test_bin_labels_use_one_decimal():
    bins = histogram_bins([0, 10], 2)
    assert [bin_.label for bin_ in bins] == ["0.0-5.0", "5.0-10.0"]


def test_value_ranges_omit_empty_ranges():
    ranges = value_ranges([0, 0, 10], 5)

    assert [range_.count for range_ in ranges] == [2, 1]
    assert ranges[0].label == "0.0-2.0"
    assert ranges[1].label == "8.0-10.0"


def test_value_ranges_of_constant_input_is_single_range():
    ranges = value_ranges([3, 3, 3], 5)
    assert len(ranges) == 1
    assert ranges[0].count == 3


def test_empty_input_raises():
    with pytest.raises(EmptyColumnError):
        histogram_bins([], 10, column="price")


def test_invalid_bin_count_raises():
    with pytest.raises(ValueError):
        histogram_bins([1, 2], 0)


@pytest.mark.parametrize("seed, bin_count", [
    (0, 1), (1, 3), (2, 7), (3, 10), (4, 10), (5, 13),
])
def test_counts_sum_for_arbitrary_floats(seed, bin_count):
    rng = random.Random(seed)
    values = [rng.uniform(-1e3, 1e3) * rng.random() for _ in range(rng.randint(2, 300))]
    values.append(values[0] + 0.1)

    bins = histogram_bins(values, bin_count)

    assert len(bins) == bin_count
    assert sum(bin_.count for bin_ in bins) == len(values)
    assert bins[-1].upper_bound == max(values)
