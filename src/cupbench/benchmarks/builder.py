"""Aggregate championship rosters into per-role benchmarks."""

from __future__ import annotations

import logging
import multiprocessing as mp
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Dict, Iterable, List, Sequence

from cupbench.classifier import ClassifierStrategy, classify_stat
from cupbench.ingest import DEFAULT_MIN_GAMES_PLAYED, HistoricalRoster
from cupbench.models import Position, Role, RoleBenchmark

from .stats import mean, median_value, percentile, population_std_dev
from .store import BenchmarkStore


logger = logging.getLogger(__name__)


@dataclass
class RoleBucket:
    """Raw samples for one role; merged by concatenation only."""

    ppg: List[float] = field(default_factory=list)
    ages: List[float] = field(default_factory=list)
    cap_hits: List[float] = field(default_factory=list)
    corsi: List[float] = field(default_factory=list)
    fenwick: List[float] = field(default_factory=list)

    def extend(self, other: "RoleBucket") -> None:
        self.ppg.extend(other.ppg)
        self.ages.extend(other.ages)
        self.cap_hits.extend(other.cap_hits)
        self.corsi.extend(other.corsi)
        self.fenwick.extend(other.fenwick)


def bucket_roster(
    roster: HistoricalRoster,
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    strategy: ClassifierStrategy | str = ClassifierStrategy.PERFORMANCE,
    include_goalies: bool = True,
) -> Dict[Role, RoleBucket]:
    """Classify every qualifying player of one roster into role buckets."""

    buckets: Dict[Role, RoleBucket] = {}
    for player in roster.players:
        stat = player.stat
        if stat.games_played < min_games_played:
            continue
        if stat.position == Position.GOALIE and not include_goalies:
            continue
        role = classify_stat(stat, strategy)
        if role == Role.UNKNOWN:
            logger.debug(
                "Skipping %s (%s %s): unknown position %r",
                stat.player_id,
                roster.season,
                roster.team_id,
                stat.raw_position,
            )
            continue
        bucket = buckets.setdefault(role, RoleBucket())
        bucket.ppg.append(stat.points_per_game)
        if player.age is not None:
            bucket.ages.append(player.age)
        if stat.salary_reported:
            bucket.cap_hits.append(stat.salary_millions)
        if stat.corsi_for_pct is not None:
            bucket.corsi.append(stat.corsi_for_pct)
        if stat.fenwick_for_pct is not None:
            bucket.fenwick.append(stat.fenwick_for_pct)
    return buckets


def merge_buckets(partials: Iterable[Dict[Role, RoleBucket]]) -> Dict[Role, RoleBucket]:
    merged: Dict[Role, RoleBucket] = {}
    for partial_buckets in partials:
        for role, bucket in partial_buckets.items():
            merged.setdefault(role, RoleBucket()).extend(bucket)
    return merged


def summarize_bucket(bucket: RoleBucket) -> RoleBenchmark:
    """Compute the benchmark over a complete (never partial) bucket."""

    if not bucket.ppg:
        raise ValueError("cannot summarize an empty role bucket")

    missing: list[str] = []

    def optional_mean(values: Sequence[float], metric: str) -> float:
        if not values:
            missing.append(metric)
            return 0.0
        return mean(values)

    def optional_std(values: Sequence[float]) -> float:
        return population_std_dev(values) if values else 0.0

    return RoleBenchmark(
        sample_size=len(bucket.ppg),
        mean_ppg=mean(bucket.ppg),
        std_dev_ppg=population_std_dev(bucket.ppg),
        median_ppg=median_value(bucket.ppg),
        p25_ppg=percentile(bucket.ppg, 25),
        p75_ppg=percentile(bucket.ppg, 75),
        min_ppg=min(bucket.ppg),
        max_ppg=max(bucket.ppg),
        mean_age=optional_mean(bucket.ages, "age"),
        mean_cap_hit=optional_mean(bucket.cap_hits, "capHit"),
        mean_corsi_for_pct=optional_mean(bucket.corsi, "corsiForPct"),
        std_dev_corsi_for_pct=optional_std(bucket.corsi),
        mean_fenwick_for_pct=optional_mean(bucket.fenwick, "fenwickForPct"),
        std_dev_fenwick_for_pct=optional_std(bucket.fenwick),
        missing_metrics=tuple(missing),
    )


def _collect_buckets(
    rosters: Sequence[HistoricalRoster],
    *,
    min_games_played: int,
    strategy: ClassifierStrategy,
    include_goalies: bool,
    workers: int,
) -> List[Dict[Role, RoleBucket]]:
    job = partial(
        bucket_roster,
        min_games_played=min_games_played,
        strategy=strategy,
        include_goalies=include_goalies,
    )
    if workers <= 1 or len(rosters) <= 1:
        return [job(roster) for roster in rosters]

    ctx = mp.get_context("spawn")
    with ctx.Pool(processes=min(workers, len(rosters))) as pool:
        # map() preserves input order, so the merged buckets match the serial path.
        return pool.map(job, rosters)


def build_benchmarks(
    rosters: Iterable[HistoricalRoster],
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    strategy: ClassifierStrategy | str = ClassifierStrategy.PERFORMANCE,
    include_goalies: bool = True,
    workers: int = 1,
) -> BenchmarkStore:
    """Bucket every qualifying player of the corpus by role and summarize.

    Roles without a single qualifying player are omitted from the store.
    Deterministic: the same corpus always yields identical benchmarks.
    """

    roster_list = list(rosters)
    resolved_strategy = ClassifierStrategy(strategy)
    start = time.perf_counter()
    partials = _collect_buckets(
        roster_list,
        min_games_played=min_games_played,
        strategy=resolved_strategy,
        include_goalies=include_goalies,
        workers=max(1, workers),
    )
    merged = merge_buckets(partials)

    benchmarks = {
        role: summarize_bucket(bucket) for role, bucket in merged.items() if bucket.ppg
    }
    total_players = sum(benchmark.sample_size for benchmark in benchmarks.values())
    logger.info(
        "Built %s role benchmarks from %s rosters (%s players, strategy=%s, %.2fs)",
        len(benchmarks),
        len(roster_list),
        total_players,
        resolved_strategy.value,
        time.perf_counter() - start,
    )
    if not benchmarks:
        logger.warning("Historical corpus produced no benchmarks")
    return BenchmarkStore(benchmarks)
