"""Deterministic role classification from per-game rates."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional, Sequence

from cupbench.config.roles import (
    STARTING_GOALIE_MIN_TOI,
    RoleTier,
    get_position_rules,
)
from cupbench.models.player import NormalizedPlayerStat
from cupbench.models.role import Position, Role, parse_position


Classifier = Callable[[Optional[Position | str], float, float, float], Role]


class ClassifierStrategy(str, Enum):
    PERFORMANCE = "performance"
    SALARY_AWARE = "salary_aware"


def _first_matching_tier(tiers: Sequence[RoleTier], ppg: float, toi: float) -> Optional[Role]:
    # Tiers are ordered high-to-low so an exact boundary lands in the higher role.
    for tier in tiers:
        if ppg >= tier.min_points_per_game and toi >= tier.min_time_on_ice:
            return tier.role
    return None


def _goalie_role(toi: float) -> Role:
    return Role.STARTING_GOALIE if toi > STARTING_GOALIE_MIN_TOI else Role.BACKUP_GOALIE


def classify(position: Optional[Position | str], points_per_game: float, time_on_ice_per_game: float) -> Role:
    """Classify using production and ice time only."""

    resolved = parse_position(position)
    if resolved is None:
        return Role.UNKNOWN
    if resolved == Position.GOALIE:
        return _goalie_role(time_on_ice_per_game)

    rules = get_position_rules(resolved)
    matched = _first_matching_tier(rules.tiers, points_per_game, time_on_ice_per_game)
    return matched or rules.fallback


def classify_salary_aware(
    position: Optional[Position | str],
    points_per_game: float,
    time_on_ice_per_game: float,
    salary_millions: float,
) -> Role:
    """Classify with contract tiers taking precedence over rate tiers.

    A center earning more than 8.0M is a 1C regardless of production; players
    below every salary tier fall through to the rate rules.
    """

    resolved = parse_position(position)
    if resolved is None:
        return Role.UNKNOWN
    if resolved == Position.GOALIE:
        return _goalie_role(time_on_ice_per_game)

    rules = get_position_rules(resolved)
    for tier in rules.salary_tiers:
        if salary_millions > tier.min_salary_exclusive:
            return tier.role

    tiers = rules.salary_aware_tiers if rules.salary_aware_tiers is not None else rules.tiers
    matched = _first_matching_tier(tiers, points_per_game, time_on_ice_per_game)
    return matched or rules.fallback


def _performance_strategy(
    position: Optional[Position | str],
    points_per_game: float,
    time_on_ice_per_game: float,
    salary_millions: float,
) -> Role:
    return classify(position, points_per_game, time_on_ice_per_game)


_STRATEGIES: dict[ClassifierStrategy, Classifier] = {
    ClassifierStrategy.PERFORMANCE: _performance_strategy,
    ClassifierStrategy.SALARY_AWARE: classify_salary_aware,
}


def get_classifier(strategy: ClassifierStrategy | str) -> Classifier:
    """Resolve a named classifier strategy, raising KeyError if missing."""

    try:
        key = ClassifierStrategy(strategy)
    except ValueError:
        raise KeyError(f"No classifier strategy named {strategy!r}") from None
    return _STRATEGIES[key]


def classify_stat(
    stat: NormalizedPlayerStat,
    strategy: ClassifierStrategy | str = ClassifierStrategy.PERFORMANCE,
) -> Role:
    classifier = get_classifier(strategy)
    position = stat.position if stat.position is not None else stat.raw_position
    return classifier(
        position,
        stat.points_per_game,
        stat.time_on_ice_per_game,
        stat.salary_millions,
    )
