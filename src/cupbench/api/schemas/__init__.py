"""Pydantic models for API I/O."""

from .benchmark import (
    BenchmarkCatalogResponse,
    BenchmarkResponse,
    CompareRequest,
    CompareResponse,
    ExpectedRange,
    ReloadResponse,
)
from .roster import (
    ExcludedPlayerResponse,
    RosterEvaluationResponse,
    RosterRequest,
    RosterSummaryResponse,
    WeakLinksResponse,
    WeaknessScoreResponse,
)

__all__ = [
    "BenchmarkCatalogResponse",
    "BenchmarkResponse",
    "CompareRequest",
    "CompareResponse",
    "ExcludedPlayerResponse",
    "ExpectedRange",
    "ReloadResponse",
    "RosterEvaluationResponse",
    "RosterRequest",
    "RosterSummaryResponse",
    "WeakLinksResponse",
    "WeaknessScoreResponse",
]
