"""Weakness scoring and benchmark comparisons."""

from .comparison import (
    BenchmarkComparison,
    PerformanceBand,
    compare_against_benchmark,
    expected_ppg_range,
    is_weak_link,
)
from .weakness import (
    Evaluable,
    Excluded,
    ExclusionReason,
    MetricZScores,
    PlayerMetrics,
    ScoreOutcome,
    WeaknessScore,
    classify_severity,
    score_player,
    score_row,
)

__all__ = [
    "BenchmarkComparison",
    "Evaluable",
    "Excluded",
    "ExclusionReason",
    "MetricZScores",
    "PerformanceBand",
    "PlayerMetrics",
    "ScoreOutcome",
    "WeaknessScore",
    "classify_severity",
    "compare_against_benchmark",
    "expected_ppg_range",
    "is_weak_link",
    "score_player",
    "score_row",
]
