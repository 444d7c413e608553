"""Convert raw season aggregates into per-game rate records."""

from __future__ import annotations

import logging
import math
import re
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from cupbench.exceptions import InsufficientSample, InvalidMetricInput
from cupbench.models import HistoricalPlayer, NormalizedPlayerStat, SeasonStatRow, parse_position


logger = logging.getLogger(__name__)

DEFAULT_MIN_GAMES_PLAYED = 10
# League-average cap hit (millions) used when contract data is absent.
DEFAULT_SALARY_MILLIONS = 0.925


class IceTimeBasis(str, Enum):
    """How ``SeasonStatRow.time_on_ice`` is expressed.

    ``season_seconds`` is the persistence layer's native form (total seconds
    across the season); the per-game variants take already-divided values.
    """

    SEASON_SECONDS = "season_seconds"
    PER_GAME_MINUTES = "per_game_minutes"
    PER_GAME_SECONDS = "per_game_seconds"


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(player_id: str, field: str, value: object) -> float:
    if isinstance(value, bool):
        raise InvalidMetricInput(player_id, field, value, "not numeric")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        try:
            number = float(text)
        except ValueError:
            raise InvalidMetricInput(player_id, field, value, "not numeric") from None
    if not math.isfinite(number):
        raise InvalidMetricInput(player_id, field, value, "not finite")
    return number


def _parse_count(player_id: str, field: str, value: object) -> float:
    if _is_blank(value):
        return 0.0
    number = _parse_number(player_id, field, value)
    if number < 0:
        raise InvalidMetricInput(player_id, field, value, "negative count")
    return number


def _parse_games(player_id: str, value: object) -> int:
    if _is_blank(value):
        raise InvalidMetricInput(player_id, "games_played", value, "required")
    number = _parse_number(player_id, "games_played", value)
    if number < 0:
        raise InvalidMetricInput(player_id, "games_played", value, "negative count")
    if not number.is_integer():
        raise InvalidMetricInput(player_id, "games_played", value, "not a whole number")
    return int(number)


def _parse_percentage(player_id: str, field: str, value: object) -> Optional[float]:
    """Return a 0-100 percentage, or ``None`` when unset or non-numeric.

    Zero is a legitimate value and is kept; NaN/inf and out-of-range numbers
    are rejected.
    """

    if _is_blank(value):
        return None
    if isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        return None
    if not math.isfinite(number):
        raise InvalidMetricInput(player_id, field, value, "not finite")
    if number < 0.0 or number > 100.0:
        raise InvalidMetricInput(player_id, field, value, "outside 0-100")
    return number


def _parse_salary(player_id: str, value: object) -> Tuple[float, bool]:
    if _is_blank(value):
        return DEFAULT_SALARY_MILLIONS, False
    if isinstance(value, str):
        value = re.sub(r"[$,\s]", "", value)
    number = _parse_number(player_id, "salary", value)
    if number < 0:
        raise InvalidMetricInput(player_id, "salary", value, "negative salary")
    return number, True


def _time_on_ice_per_game(player_id: str, value: object, games_played: int, basis: IceTimeBasis) -> float:
    if _is_blank(value):
        raise InvalidMetricInput(player_id, "time_on_ice", value, "required")
    number = _parse_number(player_id, "time_on_ice", value)
    if number < 0:
        raise InvalidMetricInput(player_id, "time_on_ice", value, "negative ice time")
    if basis == IceTimeBasis.SEASON_SECONDS:
        return number / 60.0 / games_played
    if basis == IceTimeBasis.PER_GAME_SECONDS:
        return number / 60.0
    return number


def normalize_stat(
    row: SeasonStatRow,
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    ice_time_basis: IceTimeBasis | str = IceTimeBasis.SEASON_SECONDS,
) -> NormalizedPlayerStat:
    """Normalize one raw row.

    Raises ``InvalidMetricInput`` for malformed values and
    ``InsufficientSample`` when the player is below ``min_games_played`` (or
    has no games at all, since no rate can be computed).
    """

    player_id = row.player_id
    basis = IceTimeBasis(ice_time_basis)
    games_played = _parse_games(player_id, row.games_played)
    if games_played == 0 or games_played < min_games_played:
        raise InsufficientSample(player_id, games_played, min_games_played)

    goals = _parse_count(player_id, "goals", row.goals)
    assists = _parse_count(player_id, "assists", row.assists)
    toi = _time_on_ice_per_game(player_id, row.time_on_ice, games_played, basis)
    salary, salary_reported = _parse_salary(player_id, row.salary)

    return NormalizedPlayerStat(
        player_id=player_id,
        name=row.name,
        raw_position=(row.position or "").strip(),
        position=parse_position(row.position),
        points_per_game=(goals + assists) / games_played,
        time_on_ice_per_game=toi,
        corsi_for_pct=_parse_percentage(player_id, "corsi_for_pct", row.corsi_for_pct),
        fenwick_for_pct=_parse_percentage(player_id, "fenwick_for_pct", row.fenwick_for_pct),
        salary_millions=salary,
        salary_reported=salary_reported,
        games_played=games_played,
    )


def parse_age(row: SeasonStatRow) -> Optional[float]:
    if _is_blank(row.age):
        return None
    age = _parse_number(row.player_id, "age", row.age)
    if age < 0:
        raise InvalidMetricInput(row.player_id, "age", row.age, "negative age")
    return age


def normalize_rows(
    rows: Iterable[SeasonStatRow],
    *,
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED,
    ice_time_basis: IceTimeBasis | str = IceTimeBasis.SEASON_SECONDS,
) -> List[HistoricalPlayer]:
    """Normalize a roster, dropping thin-sample and malformed rows."""

    players: List[HistoricalPlayer] = []
    skipped_sample = 0
    skipped_invalid = 0
    for row in rows:
        try:
            stat = normalize_stat(row, min_games_played=min_games_played, ice_time_basis=ice_time_basis)
            age = parse_age(row)
        except InsufficientSample:
            skipped_sample += 1
            continue
        except InvalidMetricInput as exc:
            logger.warning("Skipping row: %s", exc)
            skipped_invalid += 1
            continue
        players.append(HistoricalPlayer(stat=stat, age=age))
    if skipped_sample or skipped_invalid:
        logger.debug(
            "Normalized %s rows (%s below %s games, %s invalid)",
            len(players),
            skipped_sample,
            min_games_played,
            skipped_invalid,
        )
    return players
