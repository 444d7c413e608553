"""Player stat models shared by ingestion, classification and scoring."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .role import Position


RawValue = Union[float, int, str, None]


class SeasonStatRow(BaseModel):
    """Raw per-season aggregate as supplied by the persistence layer.

    Numeric fields are kept loosely typed; the normalizer owns parsing and
    validation so that malformed values surface as ``InvalidMetricInput``
    instead of a pydantic error deep inside a batch.
    """

    player_id: str = Field(..., min_length=1)
    name: str = ""
    team_id: Optional[str] = None
    season: Optional[int] = None
    position: Optional[str] = None
    games_played: RawValue = None
    goals: RawValue = None
    assists: RawValue = None
    time_on_ice: RawValue = None
    corsi_for_pct: RawValue = None
    fenwick_for_pct: RawValue = None
    salary: RawValue = None
    age: RawValue = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Any],
        mapping: Mapping[str, str | Sequence[str]] | None = None,
    ) -> "SeasonStatRow":
        """Build a row from a dict using ``field -> column`` mapping entries.

        A mapping value may be a tuple of columns (or a ``"a|b"`` string) whose
        numeric values are summed, e.g. primary and secondary assists.
        """

        mapping = mapping or {}

        def extract(field: str) -> Any:
            source = mapping.get(field, field)
            if isinstance(source, str) and "|" in source:
                source = tuple(part.strip() for part in source.split("|"))
            if isinstance(source, str):
                value = row.get(source)
                return value.strip() if isinstance(value, str) else value
            parts = [row.get(column) for column in source]
            present = [part for part in parts if part not in (None, "")]
            if not present:
                return None
            try:
                return sum(float(part) for part in present)
            except (TypeError, ValueError):
                return present[0]

        data = {field: extract(field) for field in cls.model_fields}
        data["player_id"] = str(data["player_id"] or "").strip()
        data["name"] = str(data["name"] or "")
        if data["team_id"] is not None:
            data["team_id"] = str(data["team_id"])
        if data["season"] in ("", None):
            data["season"] = None
        return cls(**data)


class NormalizedPlayerStat(BaseModel):
    """Per-game rate representation of a player's season."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    raw_position: str = ""
    position: Optional[Position] = None
    points_per_game: float = Field(..., ge=0.0)
    time_on_ice_per_game: float = Field(..., ge=0.0)
    corsi_for_pct: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    fenwick_for_pct: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    salary_millions: float = Field(..., ge=0.0)
    salary_reported: bool = True
    games_played: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def display_name(self) -> str:
        return self.name or self.player_id


class HistoricalPlayer(BaseModel):
    """A championship-roster player used to build benchmarks."""

    stat: NormalizedPlayerStat
    age: Optional[float] = Field(default=None, ge=0.0)

    model_config = ConfigDict(frozen=True)
