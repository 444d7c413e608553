"""Input adapters that normalize raw season statistics."""

from .corpus import (
    CUP_WINNERS,
    ChampionSeason,
    HistoricalRoster,
    canonical_team,
    find_champion,
    load_corpus_json,
    load_moneypuck_directory,
    load_moneypuck_rows,
    rosters_from_payload,
)
from .normalize import (
    DEFAULT_MIN_GAMES_PLAYED,
    DEFAULT_SALARY_MILLIONS,
    IceTimeBasis,
    normalize_rows,
    normalize_stat,
    parse_age,
)

__all__ = [
    "CUP_WINNERS",
    "ChampionSeason",
    "DEFAULT_MIN_GAMES_PLAYED",
    "DEFAULT_SALARY_MILLIONS",
    "HistoricalRoster",
    "IceTimeBasis",
    "canonical_team",
    "find_champion",
    "load_corpus_json",
    "load_moneypuck_directory",
    "load_moneypuck_rows",
    "normalize_rows",
    "normalize_stat",
    "parse_age",
    "rosters_from_payload",
]
