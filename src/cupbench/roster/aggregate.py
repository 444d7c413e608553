"""Evaluate whole rosters and reduce the scored list."""

from __future__ import annotations

import logging
import multiprocessing as mp
from dataclasses import dataclass
from functools import partial
from statistics import fmean
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from cupbench.benchmarks.store import BenchmarkStore
from cupbench.classifier import ClassifierStrategy
from cupbench.exceptions import BenchmarkUnavailable
from cupbench.ingest import DEFAULT_MIN_GAMES_PLAYED, IceTimeBasis
from cupbench.models import NormalizedPlayerStat, Role, SeasonStatRow, SeverityTier
from cupbench.scoring import (
    Evaluable,
    Excluded,
    ExclusionReason,
    ScoreOutcome,
    WeaknessScore,
    score_player,
    score_row,
)


logger = logging.getLogger(__name__)

RosterEntry = Union[SeasonStatRow, NormalizedPlayerStat]

WEAK_LINK_TIERS = frozenset({SeverityTier.CRITICAL, SeverityTier.HIGH})


@dataclass(frozen=True)
class RosterSummary:
    total_players: int
    critical: int
    high: int
    moderate: int
    minor: int
    meets_standards: int
    average_z_score: Optional[float]
    worst_player: Optional[WeaknessScore]
    excluded: int


@dataclass(frozen=True)
class RosterEvaluation:
    """Scores sorted worst-first plus the players that could not be scored."""

    scores: Tuple[WeaknessScore, ...]
    excluded: Tuple[Excluded, ...]
    team_id: Optional[str] = None

    @property
    def weak_links(self) -> List[WeaknessScore]:
        return get_weak_links(self.scores)

    @property
    def summary(self) -> RosterSummary:
        return summarize(self.scores, self.excluded)


def _score_entry(
    entry: RosterEntry,
    benchmarks: BenchmarkStore,
    *,
    min_games_played: int,
    ice_time_basis: IceTimeBasis,
    position_weights: Optional[Mapping[Role, float]],
    strategy: ClassifierStrategy,
) -> ScoreOutcome:
    if isinstance(entry, NormalizedPlayerStat):
        if entry.games_played < min_games_played:
            return Excluded(
                entry.player_id,
                reason=ExclusionReason.INSUFFICIENT_SAMPLE,
                detail=f"played {entry.games_played} games (minimum {min_games_played})",
            )
        return score_player(entry, benchmarks, position_weights=position_weights, strategy=strategy)
    return score_row(
        entry,
        benchmarks,
        min_games_played=min_games_played,
        ice_time_basis=ice_time_basis,
        position_weights=position_weights,
        strategy=strategy,
    )


def _ranking_key(score: WeaknessScore) -> Tuple[float, str]:
    return (score.ranking_score, score.player_id)


def evaluate_roster(
    players: Iterable[RosterEntry],
    benchmarks: BenchmarkStore,
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    ice_time_basis: IceTimeBasis | str = IceTimeBasis.SEASON_SECONDS,
    position_weights: Optional[Mapping[Role, float]] = None,
    strategy: ClassifierStrategy | str = ClassifierStrategy.SALARY_AWARE,
    workers: int = 1,
    team_id: Optional[str] = None,
) -> RosterEvaluation:
    """Score every player of a roster against the championship benchmarks.

    Thin-sample, malformed, goalie and unbenchmarked players are returned as
    exclusions and never counted in any tier. An empty store is fatal: it
    raises ``BenchmarkUnavailable`` rather than reporting a clean roster.
    """

    if benchmarks.is_empty:
        raise BenchmarkUnavailable("No role benchmarks loaded; build or load benchmarks first")

    entries: Sequence[RosterEntry] = list(players)
    job = partial(
        _score_entry,
        benchmarks=benchmarks,
        min_games_played=min_games_played,
        ice_time_basis=IceTimeBasis(ice_time_basis),
        position_weights=dict(position_weights) if position_weights is not None else None,
        strategy=ClassifierStrategy(strategy),
    )
    if workers > 1 and len(entries) > 1:
        ctx = mp.get_context("spawn")
        with ctx.Pool(processes=min(workers, len(entries))) as pool:
            outcomes = pool.map(job, entries)
    else:
        outcomes = [job(entry) for entry in entries]

    scores: List[WeaknessScore] = []
    excluded: List[Excluded] = []
    for outcome in outcomes:
        if isinstance(outcome, Evaluable):
            scores.append(outcome.score)
        else:
            excluded.append(outcome)

    scores.sort(key=_ranking_key)
    logger.info(
        "Evaluated roster%s: %s scored, %s excluded",
        f" {team_id}" if team_id else "",
        len(scores),
        len(excluded),
    )
    return RosterEvaluation(scores=tuple(scores), excluded=tuple(excluded), team_id=team_id)


def get_weak_links(scores: Iterable[WeaknessScore]) -> List[WeaknessScore]:
    """Critical and High players, in the order given."""

    return [score for score in scores if score.severity in WEAK_LINK_TIERS]


def summarize(scores: Sequence[WeaknessScore], excluded: Sequence[Excluded] = ()) -> RosterSummary:
    counts = {tier: 0 for tier in SeverityTier}
    for score in scores:
        counts[score.severity] += 1
    worst = min(scores, key=_ranking_key) if scores else None
    return RosterSummary(
        total_players=len(scores),
        critical=counts[SeverityTier.CRITICAL],
        high=counts[SeverityTier.HIGH],
        moderate=counts[SeverityTier.MODERATE],
        minor=counts[SeverityTier.MINOR],
        meets_standards=counts[SeverityTier.NONE],
        average_z_score=fmean(score.composite_z_score for score in scores) if scores else None,
        worst_player=worst,
        excluded=len(excluded),
    )
