"""Serialized per-role benchmark record."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


OPTIONAL_METRICS = ("age", "capHit", "corsiForPct", "fenwickForPct")


class RoleBenchmark(BaseModel):
    """Summary statistics for one role across the championship corpus.

    Field aliases are the on-disk names. ``missing_metrics`` lists the optional
    metrics (see ``OPTIONAL_METRICS``) for which no sample existed; their mean
    and standard deviation fields hold 0 and must not be read as real zeros.
    """

    sample_size: int = Field(..., gt=0, alias="sampleSize")
    mean_ppg: float = Field(..., alias="meanPPG")
    std_dev_ppg: float = Field(..., ge=0.0, alias="stdDevPPG")
    median_ppg: float = Field(..., alias="medianPPG")
    p25_ppg: float = Field(..., alias="p25PPG")
    p75_ppg: float = Field(..., alias="p75PPG")
    min_ppg: float = Field(..., alias="minPPG")
    max_ppg: float = Field(..., alias="maxPPG")
    mean_age: float = Field(default=0.0, alias="meanAge")
    mean_cap_hit: float = Field(default=0.0, alias="meanCapHit")
    mean_corsi_for_pct: float = Field(default=0.0, alias="meanCorsiForPct")
    std_dev_corsi_for_pct: float = Field(default=0.0, ge=0.0, alias="stdDevCorsiForPct")
    mean_fenwick_for_pct: float = Field(default=0.0, alias="meanFenwickForPct")
    std_dev_fenwick_for_pct: float = Field(default=0.0, ge=0.0, alias="stdDevFenwickForPct")
    missing_metrics: Tuple[str, ...] = Field(default=(), alias="missingMetrics")

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    def has_data(self, metric: str) -> bool:
        if metric not in OPTIONAL_METRICS:
            raise KeyError(f"Unknown optional metric {metric!r}")
        return metric not in self.missing_metrics

    def to_payload(self) -> dict:
        payload = self.model_dump(by_alias=True)
        payload["missingMetrics"] = list(self.missing_metrics)
        return payload
