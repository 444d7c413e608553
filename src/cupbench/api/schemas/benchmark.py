from __future__ import annotations

from pydantic import BaseModel, Field

from cupbench.models import RoleBenchmark


class BenchmarkResponse(BaseModel):
    role: str
    benchmark: RoleBenchmark


class BenchmarkCatalogResponse(BaseModel):
    source: str | None = None
    roles: list[str]
    benchmarks: dict[str, RoleBenchmark]


class ReloadResponse(BaseModel):
    status: str
    source: str | None = None
    roles: list[str] = Field(default_factory=list)


class ExpectedRange(BaseModel):
    p25: float
    mean: float
    p75: float


class CompareRequest(BaseModel):
    role: str = Field(..., min_length=1)
    points_per_game: float = Field(..., ge=0.0)


class CompareResponse(BaseModel):
    role: str
    points_per_game: float
    z_score: float
    percentile: float
    band: str
    description: str
    expected_range: ExpectedRange
    is_weak_link: bool
