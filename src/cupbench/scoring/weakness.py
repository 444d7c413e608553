"""Score players against championship benchmarks for their role."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

from cupbench.benchmarks.stats import normal_percentile, z_score
from cupbench.benchmarks.store import BenchmarkStore
from cupbench.classifier import ClassifierStrategy, classify_stat
from cupbench.config import composite_weights_for, position_weight
from cupbench.exceptions import InsufficientSample, InvalidMetricInput
from cupbench.ingest import DEFAULT_MIN_GAMES_PLAYED, IceTimeBasis, normalize_stat
from cupbench.models import (
    NormalizedPlayerStat,
    Position,
    Role,
    RoleBenchmark,
    SeasonStatRow,
    SeverityTier,
    parse_position,
)


logger = logging.getLogger(__name__)


class ExclusionReason(str, Enum):
    INSUFFICIENT_SAMPLE = "insufficient_sample"
    INVALID_INPUT = "invalid_input"
    UNKNOWN_ROLE = "unknown_role"
    NO_BENCHMARK = "no_benchmark"
    GOALIE = "goalie"


@dataclass(frozen=True)
class PlayerMetrics:
    points_per_game: float
    time_on_ice_per_game: float
    corsi_for_pct: Optional[float]
    fenwick_for_pct: Optional[float]


@dataclass(frozen=True)
class MetricZScores:
    ppg: float
    corsi: float
    fenwick: float


@dataclass(frozen=True)
class WeaknessScore:
    player_id: str
    name: str
    role: Role
    benchmark_role: Role
    metrics: PlayerMetrics
    benchmark: RoleBenchmark
    z_scores: MetricZScores
    composite_z_score: float
    position_weight: float
    ranking_score: float
    severity: SeverityTier
    percentile: float
    explanation: str


@dataclass(frozen=True)
class Evaluable:
    score: WeaknessScore

    @property
    def player_id(self) -> str:
        return self.score.player_id


@dataclass(frozen=True)
class Excluded:
    player_id: str
    reason: ExclusionReason
    detail: str = ""


ScoreOutcome = Union[Evaluable, Excluded]


def classify_severity(composite_z_score: float) -> SeverityTier:
    """Map a composite z-score onto standard-normal tail tiers.

    Lower bounds are inclusive: exactly -0.5 is Minor, exactly -1.0 Moderate.
    """

    if composite_z_score < -2.0:
        return SeverityTier.CRITICAL
    if composite_z_score < -1.0:
        return SeverityTier.HIGH
    if composite_z_score < -0.5:
        return SeverityTier.MODERATE
    if composite_z_score < 0.0:
        return SeverityTier.MINOR
    return SeverityTier.NONE


def _share_z_score(player_value: Optional[float], mean_value: float, std_dev: float, has_data: bool) -> float:
    # A missing share contributes nothing rather than counting against the player.
    if player_value is None or not has_data or std_dev <= 0.0:
        return 0.0
    return z_score(player_value, mean_value, std_dev)


def _share_clauses(
    stat: NormalizedPlayerStat,
    benchmark: RoleBenchmark,
    z_scores: MetricZScores,
    *,
    below_only: bool,
) -> str:
    text = ""
    if (
        stat.corsi_for_pct is not None
        and benchmark.has_data("corsiForPct")
        and (z_scores.corsi < 0.0 or not below_only)
    ):
        text += (
            f"Corsi: {stat.corsi_for_pct:.1f}% vs {benchmark.mean_corsi_for_pct:.1f}% avg "
            f"({z_scores.corsi:.2f} std devs). "
        )
    if (
        stat.fenwick_for_pct is not None
        and benchmark.has_data("fenwickForPct")
        and (z_scores.fenwick < 0.0 or not below_only)
    ):
        text += (
            f"Fenwick: {stat.fenwick_for_pct:.1f}% vs {benchmark.mean_fenwick_for_pct:.1f}% avg "
            f"({z_scores.fenwick:.2f} std devs). "
        )
    return text


def _explain(
    stat: NormalizedPlayerStat,
    role: Role,
    benchmark: RoleBenchmark,
    z_scores: MetricZScores,
    severity: SeverityTier,
) -> str:
    who = f"{stat.display_name} ({role.value})"
    ppg = stat.points_per_game
    if severity in (SeverityTier.CRITICAL, SeverityTier.HIGH):
        text = f"{who} is significantly underperforming championship standards. "
        if benchmark.mean_ppg > 0:
            gap_pct = (benchmark.mean_ppg - ppg) / benchmark.mean_ppg * 100.0
            text += (
                f"PPG: {ppg:.3f} vs {benchmark.mean_ppg:.3f} avg "
                f"({gap_pct:.0f}% below, {z_scores.ppg:.2f} std devs). "
            )
        else:
            text += f"PPG: {ppg:.3f} vs {benchmark.mean_ppg:.3f} avg ({z_scores.ppg:.2f} std devs). "
        text += _share_clauses(stat, benchmark, z_scores, below_only=False)
        text += f"As a {role.value}, this gap is a major weakness in a critical position."
        return text
    if severity == SeverityTier.MODERATE:
        # Only the shares that pull the composite down are cited.
        text = (
            f"{who} is below championship standards but not critically. "
            f"PPG: {ppg:.3f} vs {benchmark.mean_ppg:.3f} avg ({z_scores.ppg:.2f} std devs). "
        )
        text += _share_clauses(stat, benchmark, z_scores, below_only=True)
        return text.rstrip()
    if severity == SeverityTier.MINOR:
        return f"{who} is slightly below championship standards. Minor concern."
    return f"{who} meets or exceeds championship standards."


def score_player(
    stat: NormalizedPlayerStat,
    benchmarks: BenchmarkStore,
    *,
    position_weights: Mapping[Role, float] | None = None,
    strategy: ClassifierStrategy | str = ClassifierStrategy.SALARY_AWARE,
    role_strategy: ClassifierStrategy | str = ClassifierStrategy.PERFORMANCE,
) -> ScoreOutcome:
    """Score one normalized player.

    ``strategy`` picks the benchmark role; ``role_strategy`` reports the
    player's current on-ice role. Goalies, unknown positions and roles with no
    benchmark come back as ``Excluded``, never as a zero score.
    """

    position = stat.position or parse_position(stat.raw_position)
    if position == Position.GOALIE:
        return Excluded(stat.player_id, ExclusionReason.GOALIE, "goalies are not scored")
    if position is None:
        logger.debug("Excluding %s: unknown position %r", stat.player_id, stat.raw_position)
        return Excluded(stat.player_id, ExclusionReason.UNKNOWN_ROLE, f"unknown position {stat.raw_position!r}")

    benchmark_role = classify_stat(stat, strategy)
    if benchmark_role == Role.UNKNOWN:
        logger.debug("Excluding %s: unknown position %r", stat.player_id, stat.raw_position)
        return Excluded(stat.player_id, ExclusionReason.UNKNOWN_ROLE, f"unknown position {stat.raw_position!r}")

    benchmark = benchmarks.get(benchmark_role)
    if benchmark is None:
        logger.info("Excluding %s: no benchmark for %s", stat.player_id, benchmark_role.value)
        return Excluded(
            stat.player_id,
            ExclusionReason.NO_BENCHMARK,
            f"no benchmark for {benchmark_role.value}",
        )

    role = classify_stat(stat, role_strategy)
    z_scores = MetricZScores(
        ppg=z_score(stat.points_per_game, benchmark.mean_ppg, benchmark.std_dev_ppg),
        corsi=_share_z_score(
            stat.corsi_for_pct,
            benchmark.mean_corsi_for_pct,
            benchmark.std_dev_corsi_for_pct,
            benchmark.has_data("corsiForPct"),
        ),
        fenwick=_share_z_score(
            stat.fenwick_for_pct,
            benchmark.mean_fenwick_for_pct,
            benchmark.std_dev_fenwick_for_pct,
            benchmark.has_data("fenwickForPct"),
        ),
    )
    weights = composite_weights_for(position)
    composite = (
        z_scores.ppg * weights.ppg
        + z_scores.corsi * weights.corsi
        + z_scores.fenwick * weights.fenwick
    )
    weight = position_weight(benchmark_role, position_weights)
    severity = classify_severity(composite)

    return Evaluable(
        WeaknessScore(
            player_id=stat.player_id,
            name=stat.name,
            role=role,
            benchmark_role=benchmark_role,
            metrics=PlayerMetrics(
                points_per_game=stat.points_per_game,
                time_on_ice_per_game=stat.time_on_ice_per_game,
                corsi_for_pct=stat.corsi_for_pct,
                fenwick_for_pct=stat.fenwick_for_pct,
            ),
            benchmark=benchmark,
            z_scores=z_scores,
            composite_z_score=composite,
            position_weight=weight,
            ranking_score=composite * weight,
            severity=severity,
            percentile=normal_percentile(z_scores.ppg),
            explanation=_explain(stat, benchmark_role, benchmark, z_scores, severity),
        )
    )


def score_row(
    row: SeasonStatRow,
    benchmarks: BenchmarkStore,
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    ice_time_basis: IceTimeBasis | str = IceTimeBasis.SEASON_SECONDS,
    position_weights: Mapping[Role, float] | None = None,
    strategy: ClassifierStrategy | str = ClassifierStrategy.SALARY_AWARE,
    role_strategy: ClassifierStrategy | str = ClassifierStrategy.PERFORMANCE,
) -> ScoreOutcome:
    """Normalize then score a raw row, turning sample/input issues into exclusions."""

    try:
        stat = normalize_stat(row, min_games_played=min_games_played, ice_time_basis=ice_time_basis)
    except InsufficientSample as exc:
        logger.debug("Excluding %s: %s", row.player_id, exc)
        return Excluded(row.player_id, ExclusionReason.INSUFFICIENT_SAMPLE, str(exc))
    except InvalidMetricInput as exc:
        logger.warning("Excluding %s: %s", row.player_id, exc)
        return Excluded(row.player_id, ExclusionReason.INVALID_INPUT, str(exc))
    return score_player(
        stat,
        benchmarks,
        position_weights=position_weights,
        strategy=strategy,
        role_strategy=role_strategy,
    )
