"""Loaders for the historical championship roster corpus."""

from __future__ import annotations

import csv
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from cupbench.models import HistoricalPlayer, SeasonStatRow

from .normalize import DEFAULT_MIN_GAMES_PLAYED, IceTimeBasis, normalize_rows


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChampionSeason:
    season: int
    team_id: str
    team_name: str


# Season is the year the playoffs ended.
CUP_WINNERS: Tuple[ChampionSeason, ...] = (
    ChampionSeason(2024, "FLA", "Florida Panthers"),
    ChampionSeason(2023, "VGK", "Vegas Golden Knights"),
    ChampionSeason(2022, "COL", "Colorado Avalanche"),
    ChampionSeason(2021, "TBL", "Tampa Bay Lightning"),
    ChampionSeason(2020, "TBL", "Tampa Bay Lightning"),
    ChampionSeason(2019, "STL", "St. Louis Blues"),
    ChampionSeason(2018, "WAS", "Washington Capitals"),
    ChampionSeason(2017, "PIT", "Pittsburgh Penguins"),
    ChampionSeason(2016, "PIT", "Pittsburgh Penguins"),
    ChampionSeason(2015, "CHI", "Chicago Blackhawks"),
    ChampionSeason(2014, "LAK", "Los Angeles Kings"),
    ChampionSeason(2013, "CHI", "Chicago Blackhawks"),
    ChampionSeason(2012, "LAK", "Los Angeles Kings"),
    ChampionSeason(2011, "BOS", "Boston Bruins"),
    ChampionSeason(2010, "CHI", "Chicago Blackhawks"),
    ChampionSeason(2009, "PIT", "Pittsburgh Penguins"),
    ChampionSeason(2008, "DET", "Detroit Red Wings"),
    ChampionSeason(2007, "ANA", "Anaheim Ducks"),
    ChampionSeason(2006, "CAR", "Carolina Hurricanes"),
)

NHL_TEAM_ALIAS_GROUPS: dict[str, list[str]] = {
    "ANA": ["ANA", "ANAHEIM", "ANAHEIM DUCKS"],
    "ARI": ["ARI", "PHX", "ARIZONA", "ARIZONA COYOTES", "PHOENIX COYOTES"],
    "BOS": ["BOS", "BOSTON", "BOSTON BRUINS"],
    "BUF": ["BUF", "BUFFALO", "BUFFALO SABRES"],
    "CAR": ["CAR", "CAROLINA", "CAROLINA HURRICANES"],
    "CBJ": ["CBJ", "COLUMBUS", "COLUMBUS BLUE JACKETS"],
    "CGY": ["CGY", "CALGARY", "CALGARY FLAMES"],
    "CHI": ["CHI", "CHICAGO", "CHICAGO BLACKHAWKS"],
    "COL": ["COL", "COLORADO", "COLORADO AVALANCHE"],
    "DAL": ["DAL", "DALLAS", "DALLAS STARS"],
    "DET": ["DET", "DETROIT", "DETROIT RED WINGS"],
    "EDM": ["EDM", "EDMONTON", "EDMONTON OILERS"],
    "FLA": ["FLA", "FLORIDA", "FLORIDA PANTHERS"],
    "LAK": ["LAK", "L.A", "LA", "LOS ANGELES", "LOS ANGELES KINGS"],
    "MIN": ["MIN", "MINNESOTA", "MINNESOTA WILD"],
    "MTL": ["MTL", "MONTREAL", "MONTREAL CANADIENS"],
    "NJD": ["NJD", "N.J", "NJ", "NEW JERSEY", "NEW JERSEY DEVILS"],
    "NSH": ["NSH", "NASHVILLE", "NASHVILLE PREDATORS"],
    "NYI": ["NYI", "NEW YORK ISLANDERS"],
    "NYR": ["NYR", "NEW YORK RANGERS"],
    "OTT": ["OTT", "OTTAWA", "OTTAWA SENATORS"],
    "PHI": ["PHI", "PHILADELPHIA", "PHILADELPHIA FLYERS"],
    "PIT": ["PIT", "PITTSBURGH", "PITTSBURGH PENGUINS"],
    "SEA": ["SEA", "SEATTLE", "SEATTLE KRAKEN"],
    "SJS": ["SJS", "S.J", "SJ", "SAN JOSE", "SAN JOSE SHARKS"],
    "STL": ["STL", "ST LOUIS", "ST. LOUIS", "ST. LOUIS BLUES"],
    "TBL": ["TBL", "T.B", "TB", "TAMPA BAY", "TAMPA BAY LIGHTNING"],
    "TOR": ["TOR", "TORONTO", "TORONTO MAPLE LEAFS"],
    "VAN": ["VAN", "VANCOUVER", "VANCOUVER CANUCKS"],
    "VGK": ["VGK", "VEGAS", "VEGAS GOLDEN KNIGHTS"],
    "WAS": ["WAS", "WSH", "WASHINGTON", "WASHINGTON CAPITALS"],
    "WPG": ["WPG", "WINNIPEG", "WINNIPEG JETS"],
}


def _team_token(value: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", value.upper())


def _build_alias_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for abbr, variants in NHL_TEAM_ALIAS_GROUPS.items():
        for variant in variants:
            key = _team_token(variant)
            if key:
                lookup.setdefault(key, abbr)
    return lookup


TEAM_ALIAS_LOOKUP = _build_alias_lookup()


def canonical_team(team: str) -> str:
    token = _team_token(team)
    if not token:
        return team.upper()
    return TEAM_ALIAS_LOOKUP.get(token, team.upper())


@dataclass(frozen=True)
class HistoricalRoster:
    season: int
    team_id: str
    players: Tuple[HistoricalPlayer, ...]


MONEYPUCK_MAPPING: Mapping[str, str | Sequence[str]] = {
    "player_id": "playerId",
    "name": "name",
    "team_id": "team",
    "position": "position",
    "games_played": "games_played",
    "goals": "I_F_goals",
    "assists": ("I_F_primaryAssists", "I_F_secondaryAssists"),
    "time_on_ice": "icetime",
    "corsi_for_pct": "onIce_corsiPercentage",
    "fenwick_for_pct": "onIce_fenwickPercentage",
}


def _fraction_to_percentage(value: Any) -> Any:
    """MoneyPuck publishes on-ice shares as fractions; store them as 0-100."""

    if value in (None, ""):
        return value
    try:
        return float(value) * 100.0
    except (TypeError, ValueError):
        return value


def load_moneypuck_rows(path: Path, *, team_id: str, situation: str = "all") -> List[SeasonStatRow]:
    """Read one MoneyPuck skaters CSV and keep the rows of ``team_id``."""

    wanted = canonical_team(team_id)
    rows: List[SeasonStatRow] = []
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for raw in reader:
            if raw.get("situation", situation) != situation:
                continue
            if canonical_team(raw.get("team", "")) != wanted:
                continue
            converted = dict(raw)
            for column in ("onIce_corsiPercentage", "onIce_fenwickPercentage"):
                converted[column] = _fraction_to_percentage(raw.get(column))
            row = SeasonStatRow.from_mapping(converted, MONEYPUCK_MAPPING)
            rows.append(row.model_copy(update={"team_id": wanted}))
    return rows


def load_moneypuck_directory(
    directory: Path,
    *,
    champions: Iterable[ChampionSeason] = CUP_WINNERS,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
) -> List[HistoricalRoster]:
    """Build the corpus from ``skaters-<year>.csv`` files.

    MoneyPuck names a season by the year it started, so the 2024 champion is
    read from ``skaters-2023.csv``. Missing files are skipped with a warning.
    """

    rosters: List[HistoricalRoster] = []
    for champion in champions:
        path = directory / f"skaters-{champion.season - 1}.csv"
        if not path.exists():
            logger.warning("Missing data for %s %s (%s)", champion.season, champion.team_id, path.name)
            continue
        rows = load_moneypuck_rows(path, team_id=champion.team_id)
        players = normalize_rows(
            rows,
            min_games_played=min_games_played,
            ice_time_basis=IceTimeBasis.SEASON_SECONDS,
        )
        logger.info("Loaded %s %s: %s qualifying players", champion.season, champion.team_id, len(players))
        rosters.append(HistoricalRoster(champion.season, champion.team_id, tuple(players)))
    return rosters


def rosters_from_payload(
    payload: Sequence[Mapping[str, Any]],
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    ice_time_basis: IceTimeBasis | str = IceTimeBasis.SEASON_SECONDS,
) -> List[HistoricalRoster]:
    """Parse ``[{season, team_id, players: [...]}, ...]`` corpus documents."""

    rosters: List[HistoricalRoster] = []
    for entry in payload:
        try:
            season = int(entry["season"])
            team_id = canonical_team(str(entry["team_id"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Corpus entry is missing season/team_id: {entry!r}") from exc
        basis = entry.get("ice_time_basis", ice_time_basis)
        rows = [SeasonStatRow(**player) for player in entry.get("players", [])]
        players = normalize_rows(rows, min_games_played=min_games_played, ice_time_basis=basis)
        rosters.append(HistoricalRoster(season, team_id, tuple(players)))
    return rosters


def load_corpus_json(
    path: Path,
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    ice_time_basis: IceTimeBasis | str = IceTimeBasis.SEASON_SECONDS,
) -> List[HistoricalRoster]:
    with path.open(encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, list):
        raise ValueError(f"Corpus file {path} must contain a list of rosters")
    return rosters_from_payload(payload, min_games_played=min_games_played, ice_time_basis=ice_time_basis)


def find_champion(season: int) -> Optional[ChampionSeason]:
    for champion in CUP_WINNERS:
        if champion.season == season:
            return champion
    return None
