"""Descriptive statistics used to summarize role buckets."""

from __future__ import annotations

import math
from statistics import NormalDist, fmean, median, pstdev
from typing import Sequence


_STANDARD_NORMAL = NormalDist()


def mean(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("mean requires at least one value")
    return fmean(values)


def population_std_dev(values: Sequence[float]) -> float:
    """Population (not Bessel-corrected) standard deviation; 0.0 for n == 1."""

    if not values:
        raise ValueError("std dev requires at least one value")
    if len(values) == 1:
        return 0.0
    return pstdev(values)


def median_value(values: Sequence[float]) -> float:
    """Sort-and-midpoint median; even counts average the middle pair."""

    if not values:
        raise ValueError("median requires at least one value")
    return median(values)


def percentile(values: Sequence[float], pct: float) -> float:
    """Linear interpolation between the closest ranks.

    ``index = pct / 100 * (n - 1)``, interpolated between floor and ceil.
    """

    if not values:
        raise ValueError("percentile requires at least one value")
    if not 0.0 <= pct <= 100.0:
        raise ValueError(f"percentile must be within 0-100, got {pct}")
    ordered = sorted(values)
    index = (pct / 100.0) * (len(ordered) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    weight = index - lower
    return ordered[lower] * (1.0 - weight) + ordered[upper] * weight


def z_score(value: float, mean_value: float, std_dev: float) -> float:
    if std_dev <= 0.0 or not math.isfinite(std_dev):
        return 0.0
    return (value - mean_value) / std_dev


def normal_percentile(z: float) -> float:
    """Percentile (0-100) of ``z`` under the standard normal distribution."""

    return _STANDARD_NORMAL.cdf(z) * 100.0
