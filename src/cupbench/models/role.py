"""Canonical position, role and severity vocabulary."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional


class Position(str, Enum):
    CENTER = "C"
    WING = "W"
    DEFENSEMAN = "D"
    GOALIE = "G"


class Role(str, Enum):
    FIRST_LINE_CENTER = "1C"
    SECOND_LINE_CENTER = "2C"
    THIRD_LINE_CENTER = "3C"
    FOURTH_LINE_CENTER = "4C"
    TOP_SIX_WING = "Top-6 Wing"
    MIDDLE_SIX_WING = "Middle-6 Wing"
    BOTTOM_SIX_WING = "Bottom-6 Wing"
    FIRST_PAIR_DEFENSE = "1D"
    SECOND_PAIR_DEFENSE = "2D"
    THIRD_PAIR_DEFENSE = "3D"
    FOURTH_PAIR_DEFENSE = "4D"
    FIFTH_PAIR_DEFENSE = "5D"
    SIXTH_PAIR_DEFENSE = "6D"
    STARTING_GOALIE = "Starting"
    BACKUP_GOALIE = "Backup"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: "Role | str") -> "Role":
        """Resolve a role from its label, raising ValueError if unknown."""

        if isinstance(value, Role):
            return value
        text = str(value).strip()
        for role in cls:
            if role.value.lower() == text.lower() or role.name.lower() == text.lower():
                return role
        raise ValueError(f"Unknown role {value!r}")

    @property
    def is_goalie(self) -> bool:
        return self in (Role.STARTING_GOALIE, Role.BACKUP_GOALIE)


# Display and report order, top of the lineup first.
ROLE_ORDER: tuple[Role, ...] = (
    Role.FIRST_LINE_CENTER,
    Role.SECOND_LINE_CENTER,
    Role.THIRD_LINE_CENTER,
    Role.FOURTH_LINE_CENTER,
    Role.TOP_SIX_WING,
    Role.MIDDLE_SIX_WING,
    Role.BOTTOM_SIX_WING,
    Role.FIRST_PAIR_DEFENSE,
    Role.SECOND_PAIR_DEFENSE,
    Role.THIRD_PAIR_DEFENSE,
    Role.FOURTH_PAIR_DEFENSE,
    Role.FIFTH_PAIR_DEFENSE,
    Role.SIXTH_PAIR_DEFENSE,
    Role.STARTING_GOALIE,
    Role.BACKUP_GOALIE,
)


class SeverityTier(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MODERATE = "Moderate"
    MINOR = "Minor"
    NONE = "None"


_POSITION_TOKENS: dict[str, Position] = {
    "C": Position.CENTER,
    "CENTER": Position.CENTER,
    "CENTRE": Position.CENTER,
    "LW": Position.WING,
    "RW": Position.WING,
    "L": Position.WING,
    "R": Position.WING,
    "W": Position.WING,
    "WING": Position.WING,
    "D": Position.DEFENSEMAN,
    "LD": Position.DEFENSEMAN,
    "RD": Position.DEFENSEMAN,
    "DEFENSE": Position.DEFENSEMAN,
    "DEFENSEMAN": Position.DEFENSEMAN,
    "G": Position.GOALIE,
    "GOALIE": Position.GOALIE,
}


def parse_position(raw: Optional[str | Position]) -> Optional[Position]:
    """Collapse a raw position string onto the four canonical groups.

    Multi-position strings such as ``"C/LW"`` resolve on their first token.
    Returns ``None`` for anything that cannot be parsed.
    """

    if raw is None:
        return None
    if isinstance(raw, Position):
        return raw
    tokens = [token for token in re.split(r"[/,\s]+", str(raw).strip().upper()) if token]
    if not tokens:
        return None
    return _POSITION_TOKENS.get(tokens[0])


__all__ = [
    "Position",
    "ROLE_ORDER",
    "Role",
    "SeverityTier",
    "parse_position",
]
