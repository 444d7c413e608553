"""Role thresholds, salary tiers and scoring weights."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from cupbench.models.role import Position, Role


@dataclass(frozen=True)
class RoleTier:
    """A tier is met when both rate cutoffs are reached (inclusive)."""

    role: Role
    min_points_per_game: float = 0.0
    min_time_on_ice: float = 0.0


@dataclass(frozen=True)
class SalaryTier:
    """A tier is met when salary strictly exceeds the cutoff (millions)."""

    role: Role
    min_salary_exclusive: float


@dataclass(frozen=True)
class PositionRules:
    position: Position
    tiers: Tuple[RoleTier, ...]
    fallback: Role
    salary_tiers: Tuple[SalaryTier, ...] = ()
    # Rate tiers consulted by the salary-aware classifier once no salary tier
    # matched; defaults to ``tiers``.
    salary_aware_tiers: Tuple[RoleTier, ...] | None = None


STARTING_GOALIE_MIN_TOI = 40.0

_POSITION_RULES: Dict[Position, PositionRules] = {
    Position.CENTER: PositionRules(
        position=Position.CENTER,
        tiers=(
            RoleTier(Role.FIRST_LINE_CENTER, 0.60, 18.0),
            RoleTier(Role.SECOND_LINE_CENTER, 0.45, 16.0),
            RoleTier(Role.THIRD_LINE_CENTER, 0.35, 14.0),
        ),
        fallback=Role.FOURTH_LINE_CENTER,
        salary_tiers=(
            SalaryTier(Role.FIRST_LINE_CENTER, 8.0),
            SalaryTier(Role.SECOND_LINE_CENTER, 6.0),
            SalaryTier(Role.THIRD_LINE_CENTER, 4.0),
        ),
    ),
    Position.WING: PositionRules(
        position=Position.WING,
        tiers=(
            RoleTier(Role.TOP_SIX_WING, 0.60, 16.0),
            RoleTier(Role.MIDDLE_SIX_WING, 0.35, 12.0),
        ),
        fallback=Role.BOTTOM_SIX_WING,
        salary_tiers=(
            SalaryTier(Role.TOP_SIX_WING, 7.0),
            SalaryTier(Role.MIDDLE_SIX_WING, 4.0),
        ),
    ),
    Position.DEFENSEMAN: PositionRules(
        position=Position.DEFENSEMAN,
        tiers=(
            RoleTier(Role.FIRST_PAIR_DEFENSE, 0.50, 22.0),
            RoleTier(Role.SECOND_PAIR_DEFENSE, 0.40, 20.0),
            RoleTier(Role.THIRD_PAIR_DEFENSE, 0.30, 18.0),
            RoleTier(Role.FOURTH_PAIR_DEFENSE, 0.25, 16.0),
            RoleTier(Role.FIFTH_PAIR_DEFENSE, 0.20, 14.0),
        ),
        fallback=Role.SIXTH_PAIR_DEFENSE,
        salary_tiers=(
            SalaryTier(Role.FIRST_PAIR_DEFENSE, 7.0),
            SalaryTier(Role.SECOND_PAIR_DEFENSE, 5.0),
            SalaryTier(Role.THIRD_PAIR_DEFENSE, 3.0),
        ),
        # Below the top two pairs, deployment is judged by ice time alone.
        salary_aware_tiers=(
            RoleTier(Role.FIRST_PAIR_DEFENSE, 0.50, 22.0),
            RoleTier(Role.SECOND_PAIR_DEFENSE, 0.40, 20.0),
            RoleTier(Role.THIRD_PAIR_DEFENSE, 0.0, 18.0),
            RoleTier(Role.FOURTH_PAIR_DEFENSE, 0.0, 16.0),
            RoleTier(Role.FIFTH_PAIR_DEFENSE, 0.0, 14.0),
        ),
    ),
}


def get_position_rules(position: Position) -> PositionRules:
    """Fetch skater rules for a position, raising KeyError for goalies."""

    if position not in _POSITION_RULES:
        raise KeyError(f"No role tiers configured for position={position.value!r}")
    return _POSITION_RULES[position]


# Ranking multipliers; a weakness on a top-line role hurts more.
POSITION_WEIGHTS: Mapping[Role, float] = {
    Role.FIRST_LINE_CENTER: 5.0,
    Role.FIRST_PAIR_DEFENSE: 5.0,
    Role.TOP_SIX_WING: 4.5,
    Role.SECOND_LINE_CENTER: 4.0,
    Role.SECOND_PAIR_DEFENSE: 4.0,
    Role.MIDDLE_SIX_WING: 3.0,
    Role.THIRD_LINE_CENTER: 2.5,
    Role.THIRD_PAIR_DEFENSE: 2.5,
    Role.FOURTH_PAIR_DEFENSE: 2.0,
    Role.FOURTH_LINE_CENTER: 1.5,
    Role.BOTTOM_SIX_WING: 1.5,
    Role.FIFTH_PAIR_DEFENSE: 1.5,
    Role.SIXTH_PAIR_DEFENSE: 1.0,
}

DEFAULT_POSITION_WEIGHT = 1.0


@dataclass(frozen=True)
class CompositeWeights:
    ppg: float
    corsi: float
    fenwick: float


DEFENSE_COMPOSITE_WEIGHTS = CompositeWeights(ppg=0.30, corsi=0.35, fenwick=0.35)
FORWARD_COMPOSITE_WEIGHTS = CompositeWeights(ppg=0.40, corsi=0.35, fenwick=0.25)


def composite_weights_for(position: Position) -> CompositeWeights:
    if position == Position.DEFENSEMAN:
        return DEFENSE_COMPOSITE_WEIGHTS
    return FORWARD_COMPOSITE_WEIGHTS


def position_weight(role: Role, weights: Mapping[Role, float] | None = None) -> float:
    table = POSITION_WEIGHTS if weights is None else weights
    return float(table.get(role, DEFAULT_POSITION_WEIGHT))
