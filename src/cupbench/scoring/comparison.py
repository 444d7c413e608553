"""Quick single-player checks against a role benchmark."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from cupbench.benchmarks.stats import normal_percentile, z_score
from cupbench.benchmarks.store import BenchmarkStore
from cupbench.exceptions import UnknownRole
from cupbench.models import Role, RoleBenchmark


class PerformanceBand(str, Enum):
    ELITE = "elite"
    ABOVE_AVERAGE = "above-average"
    AVERAGE = "average"
    BELOW_AVERAGE = "below-average"
    WEAK = "weak"


@dataclass(frozen=True)
class BenchmarkComparison:
    role: Role
    points_per_game: float
    z_score: float
    percentile: float
    band: PerformanceBand
    description: str


def _resolve_role(role: Role | str) -> Role:
    try:
        resolved = Role.parse(role)
    except ValueError:
        raise UnknownRole(f"Unknown role {role!r}") from None
    if resolved == Role.UNKNOWN:
        raise UnknownRole("Unknown role has no benchmark")
    return resolved


def _band(points_per_game: float, benchmark: RoleBenchmark) -> PerformanceBand:
    if points_per_game >= benchmark.p75_ppg:
        return PerformanceBand.ELITE
    if points_per_game >= benchmark.median_ppg:
        return PerformanceBand.ABOVE_AVERAGE
    if points_per_game >= benchmark.p25_ppg:
        return PerformanceBand.AVERAGE
    if points_per_game >= benchmark.p25_ppg - benchmark.std_dev_ppg:
        return PerformanceBand.BELOW_AVERAGE
    return PerformanceBand.WEAK


_DESCRIPTIONS = {
    PerformanceBand.ELITE: "Elite {role}, top 25% of champions",
    PerformanceBand.ABOVE_AVERAGE: "Above average {role} for a champion",
    PerformanceBand.AVERAGE: "Average {role}, meets championship standards",
    PerformanceBand.BELOW_AVERAGE: "Below average {role}, bottom 25% of champions",
    PerformanceBand.WEAK: "Weak {role}, well below championship standards",
}


def compare_against_benchmark(
    role: Role | str, points_per_game: float, benchmarks: BenchmarkStore
) -> BenchmarkComparison:
    """Place a PPG value within the role's championship distribution.

    Raises ``UnknownRole`` for an unrecognised role and ``BenchmarkUnavailable``
    when the store has no entry for it.
    """

    resolved = _resolve_role(role)
    benchmark = benchmarks.require(resolved)
    z = z_score(points_per_game, benchmark.mean_ppg, benchmark.std_dev_ppg)
    band = _band(points_per_game, benchmark)
    return BenchmarkComparison(
        role=resolved,
        points_per_game=points_per_game,
        z_score=z,
        percentile=normal_percentile(z),
        band=band,
        description=_DESCRIPTIONS[band].format(role=resolved.value),
    )


def expected_ppg_range(role: Role | str, benchmarks: BenchmarkStore) -> Tuple[float, float, float]:
    """Return ``(p25, mean, p75)`` PPG for a role."""

    benchmark = benchmarks.require(_resolve_role(role))
    return benchmark.p25_ppg, benchmark.mean_ppg, benchmark.p75_ppg


def is_weak_link(role: Role | str, points_per_game: float, benchmarks: BenchmarkStore) -> bool:
    # Bottom quartile of champions at the role.
    benchmark = benchmarks.require(_resolve_role(role))
    return points_per_game < benchmark.p25_ppg
