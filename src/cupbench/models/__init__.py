"""Canonical data models."""

from .benchmark import OPTIONAL_METRICS, RoleBenchmark
from .player import HistoricalPlayer, NormalizedPlayerStat, SeasonStatRow
from .role import ROLE_ORDER, Position, Role, SeverityTier, parse_position

__all__ = [
    "HistoricalPlayer",
    "NormalizedPlayerStat",
    "OPTIONAL_METRICS",
    "Position",
    "ROLE_ORDER",
    "Role",
    "RoleBenchmark",
    "SeasonStatRow",
    "SeverityTier",
    "parse_position",
]
