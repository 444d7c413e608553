from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from cupbench.models import SeasonStatRow
from cupbench.roster import RosterSummary
from cupbench.scoring import Excluded, WeaknessScore


class RosterRequest(BaseModel):
    team_id: str | None = None
    min_games_played: int | None = Field(default=None, ge=0)
    players: List[SeasonStatRow] = Field(default_factory=list)


class WeaknessScoreResponse(BaseModel):
    player_id: str
    name: str
    role: str
    benchmark_role: str
    points_per_game: float
    time_on_ice_per_game: float
    corsi_for_pct: float | None
    fenwick_for_pct: float | None
    ppg_z: float
    corsi_z: float
    fenwick_z: float
    composite_z_score: float
    position_weight: float
    ranking_score: float
    severity: str
    percentile: float
    benchmark_mean_ppg: float
    explanation: str

    @classmethod
    def from_score(cls, score: WeaknessScore) -> "WeaknessScoreResponse":
        return cls(
            player_id=score.player_id,
            name=score.name,
            role=score.role.value,
            benchmark_role=score.benchmark_role.value,
            points_per_game=score.metrics.points_per_game,
            time_on_ice_per_game=score.metrics.time_on_ice_per_game,
            corsi_for_pct=score.metrics.corsi_for_pct,
            fenwick_for_pct=score.metrics.fenwick_for_pct,
            ppg_z=score.z_scores.ppg,
            corsi_z=score.z_scores.corsi,
            fenwick_z=score.z_scores.fenwick,
            composite_z_score=score.composite_z_score,
            position_weight=score.position_weight,
            ranking_score=score.ranking_score,
            severity=score.severity.value,
            percentile=score.percentile,
            benchmark_mean_ppg=score.benchmark.mean_ppg,
            explanation=score.explanation,
        )


class ExcludedPlayerResponse(BaseModel):
    player_id: str
    reason: str
    detail: str = ""

    @classmethod
    def from_excluded(cls, excluded: Excluded) -> "ExcludedPlayerResponse":
        return cls(player_id=excluded.player_id, reason=excluded.reason.value, detail=excluded.detail)


class RosterSummaryResponse(BaseModel):
    total_players: int
    critical: int
    high: int
    moderate: int
    minor: int
    meets_standards: int
    average_z_score: float | None
    worst_player: WeaknessScoreResponse | None = None
    excluded: int

    @classmethod
    def from_summary(cls, summary: RosterSummary) -> "RosterSummaryResponse":
        worst = summary.worst_player
        return cls(
            total_players=summary.total_players,
            critical=summary.critical,
            high=summary.high,
            moderate=summary.moderate,
            minor=summary.minor,
            meets_standards=summary.meets_standards,
            average_z_score=summary.average_z_score,
            worst_player=WeaknessScoreResponse.from_score(worst) if worst is not None else None,
            excluded=summary.excluded,
        )


class RosterEvaluationResponse(BaseModel):
    team_id: str | None = None
    scores: List[WeaknessScoreResponse]
    excluded: List[ExcludedPlayerResponse]
    summary: RosterSummaryResponse


class WeakLinksResponse(BaseModel):
    team_id: str | None = None
    weak_links: List[WeaknessScoreResponse]
    evaluated: int
    excluded: List[ExcludedPlayerResponse] = Field(default_factory=list)
