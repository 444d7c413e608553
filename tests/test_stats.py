import math

import pytest

from cupbench.benchmarks.stats import (
    mean,
    median_value,
    normal_percentile,
    percentile,
    population_std_dev,
    z_score,
)


def test_population_std_dev_is_not_bessel_corrected():
    assert population_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)


def test_single_sample_std_dev_is_zero():
    assert population_std_dev([0.7]) == 0.0


def test_median_averages_middle_pair():
    assert median_value([4.0, 1.0, 3.0, 2.0]) == 2.5
    assert median_value([3.0, 1.0, 2.0]) == 2.0


def test_percentile_interpolates_between_ranks():
    values = [1.0, 2.0, 3.0, 4.0]
    assert percentile(values, 25) == pytest.approx(1.75)
    assert percentile(values, 75) == pytest.approx(3.25)
    assert percentile(values, 0) == 1.0
    assert percentile(values, 100) == 4.0
    assert percentile([5.0], 25) == 5.0


@pytest.mark.parametrize(
    "values",
    [
        [0.1],
        [0.3, 0.1],
        [0.9, 0.2, 0.2, 0.5, 0.7],
        [1.0, 1.0, 1.0, 1.0],
        [0.05 * i for i in range(1, 30)],
    ],
)
def test_quartiles_are_monotonic(values):
    assert percentile(values, 25) <= median_value(values) <= percentile(values, 75)


def test_empty_inputs_raise():
    for func in (mean, population_std_dev, median_value):
        with pytest.raises(ValueError):
            func([])
    with pytest.raises(ValueError):
        percentile([], 50)
    with pytest.raises(ValueError):
        percentile([1.0], 120)


@pytest.mark.parametrize("std_dev", [0.0, -1.0, math.nan])
def test_z_score_short_circuits_without_spread(std_dev):
    result = z_score(0.65, 0.70, std_dev)
    assert result == 0.0
    assert math.isfinite(result)


def test_z_score():
    assert z_score(0.65, 0.70, 0.10) == pytest.approx(-0.5)


def test_normal_percentile():
    assert normal_percentile(0.0) == pytest.approx(50.0)
    assert normal_percentile(-1.0) == pytest.approx(15.8655, abs=1e-3)
