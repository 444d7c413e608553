"""Error kinds raised across the benchmark engine."""

from __future__ import annotations


class CupbenchError(Exception):
    """Base class for engine errors."""


class InsufficientSample(CupbenchError):
    def __init__(self, player_id: str, games_played: int, min_games_played: int):
        super().__init__(
            f"player {player_id!r} played {games_played} games (minimum {min_games_played})"
        )
        self.player_id = player_id
        self.games_played = games_played
        self.min_games_played = min_games_played


class InvalidMetricInput(CupbenchError, ValueError):
    def __init__(self, player_id: str, field: str, value: object, reason: str):
        super().__init__(f"player {player_id!r}: invalid {field}={value!r} ({reason})")
        self.player_id = player_id
        self.field = field
        self.value = value
        self.reason = reason


class UnknownRole(CupbenchError):
    """Raised when a position cannot be mapped onto any role."""


class BenchmarkUnavailable(CupbenchError, RuntimeError):
    """Benchmarks are missing, unreadable, or have no entry for a role."""

    def __init__(self, message: str, *, role: str | None = None):
        super().__init__(message)
        self.message = message
        self.role = role


__all__ = [
    "BenchmarkUnavailable",
    "CupbenchError",
    "InsufficientSample",
    "InvalidMetricInput",
    "UnknownRole",
]
