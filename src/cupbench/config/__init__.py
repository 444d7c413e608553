"""Configuration tables for role classification and scoring."""

from .roles import (
    DEFENSE_COMPOSITE_WEIGHTS,
    FORWARD_COMPOSITE_WEIGHTS,
    POSITION_WEIGHTS,
    STARTING_GOALIE_MIN_TOI,
    CompositeWeights,
    PositionRules,
    RoleTier,
    SalaryTier,
    composite_weights_for,
    get_position_rules,
    position_weight,
)

__all__ = [
    "CompositeWeights",
    "DEFENSE_COMPOSITE_WEIGHTS",
    "FORWARD_COMPOSITE_WEIGHTS",
    "POSITION_WEIGHTS",
    "PositionRules",
    "RoleTier",
    "STARTING_GOALIE_MIN_TOI",
    "SalaryTier",
    "composite_weights_for",
    "get_position_rules",
    "position_weight",
]
