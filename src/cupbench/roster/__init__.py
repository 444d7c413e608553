"""Roster-level evaluation and summaries."""

from .aggregate import (
    WEAK_LINK_TIERS,
    RosterEntry,
    RosterEvaluation,
    RosterSummary,
    evaluate_roster,
    get_weak_links,
    summarize,
)

__all__ = [
    "RosterEntry",
    "RosterEvaluation",
    "RosterSummary",
    "WEAK_LINK_TIERS",
    "evaluate_roster",
    "get_weak_links",
    "summarize",
]
