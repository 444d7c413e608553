"""Immutable role-keyed benchmark lookup and its JSON form."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from pydantic import ValidationError

from cupbench.exceptions import BenchmarkUnavailable
from cupbench.models import ROLE_ORDER, Role, RoleBenchmark


logger = logging.getLogger(__name__)

DEFAULT_BENCHMARK_FILENAME = "cup-winner-benchmarks.json"


def _role_rank(role: Role) -> int:
    return ROLE_ORDER.index(role) if role in ROLE_ORDER else len(ROLE_ORDER)


class BenchmarkStore:
    """Read-only mapping of Role -> RoleBenchmark.

    Built once (by the builder or from disk) and shared by reference; nothing
    mutates it afterwards, so concurrent readers need no locking. Roles with
    no qualifying historical players are simply absent.
    """

    __slots__ = ("_benchmarks", "_source")

    def __init__(self, benchmarks: Mapping[Role | str, RoleBenchmark], *, source: Optional[str] = None):
        resolved: dict[Role, RoleBenchmark] = {}
        for key, benchmark in benchmarks.items():
            role = Role.parse(key)
            if role == Role.UNKNOWN:
                raise ValueError("Unknown role cannot carry a benchmark")
            resolved[role] = benchmark
        ordered = sorted(resolved.items(), key=lambda item: _role_rank(item[0]))
        object.__setattr__(self, "_benchmarks", dict(ordered))
        object.__setattr__(self, "_source", source)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("BenchmarkStore is immutable")

    def __getstate__(self) -> tuple:
        return (self._benchmarks, self._source)

    def __setstate__(self, state: tuple) -> None:
        benchmarks, source = state
        object.__setattr__(self, "_benchmarks", benchmarks)
        object.__setattr__(self, "_source", source)

    @property
    def source(self) -> Optional[str]:
        return self._source

    @property
    def benchmarks(self) -> Mapping[Role, RoleBenchmark]:
        return MappingProxyType(self._benchmarks)

    def get(self, role: Role | str) -> Optional[RoleBenchmark]:
        """Return the benchmark for ``role`` or ``None`` when not available."""

        try:
            resolved = Role.parse(role)
        except ValueError:
            return None
        return self._benchmarks.get(resolved)

    def require(self, role: Role | str) -> RoleBenchmark:
        benchmark = self.get(role)
        if benchmark is None:
            label = role.value if isinstance(role, Role) else str(role)
            raise BenchmarkUnavailable(f"No benchmark available for role {label}", role=label)
        return benchmark

    def roles(self) -> tuple[Role, ...]:
        return tuple(self._benchmarks)

    @property
    def is_empty(self) -> bool:
        return not self._benchmarks

    def __contains__(self, role: object) -> bool:
        if not isinstance(role, (Role, str)):
            return False
        return self.get(role) is not None

    def __iter__(self) -> Iterator[Role]:
        return iter(self._benchmarks)

    def __len__(self) -> int:
        return len(self._benchmarks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BenchmarkStore):
            return NotImplemented
        return self._benchmarks == other._benchmarks

    def __repr__(self) -> str:
        roles = ", ".join(role.value for role in self._benchmarks)
        return f"BenchmarkStore([{roles}])"

    def to_payload(self) -> dict[str, dict]:
        return {role.value: benchmark.to_payload() for role, benchmark in self._benchmarks.items()}

    @classmethod
    def from_payload(cls, payload: Any, *, source: Optional[str] = None) -> "BenchmarkStore":
        """Validate a decoded document; anything malformed is unavailable."""

        label = source or "payload"
        if not isinstance(payload, Mapping):
            raise BenchmarkUnavailable(f"Benchmark document {label} is not a role mapping")
        benchmarks: dict[Role, RoleBenchmark] = {}
        for key, record in payload.items():
            try:
                role = Role.parse(key)
            except ValueError:
                raise BenchmarkUnavailable(f"Benchmark document {label} has unknown role {key!r}") from None
            if role == Role.UNKNOWN:
                raise BenchmarkUnavailable(f"Benchmark document {label} lists the Unknown role")
            try:
                benchmarks[role] = RoleBenchmark.model_validate(record)
            except ValidationError as exc:
                raise BenchmarkUnavailable(
                    f"Benchmark document {label} has an invalid record for {key}: {exc}", role=key
                ) from exc
        return cls(benchmarks, source=source)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_payload(), f, indent=2)
            f.write("\n")
        logger.info("Saved %s role benchmarks to %s", len(self), path)

    @classmethod
    def load(cls, path: Path) -> "BenchmarkStore":
        """Load a saved store, failing closed on any missing or bad artifact."""

        if not path.exists():
            logger.warning("Benchmark file %s not found; run `cupbench build` first", path)
            raise BenchmarkUnavailable(f"Benchmark file {path} not found")
        try:
            with path.open(encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BenchmarkUnavailable(f"Benchmark file {path} could not be read: {exc}") from exc
        store = cls.from_payload(payload, source=str(path))
        logger.info("Loaded %s role benchmarks from %s", len(store), path)
        return store

    def describe(self) -> list[str]:
        """Human-readable report lines, one block per role."""

        lines: list[str] = []
        for role, b in self._benchmarks.items():
            lines.append(role.value.upper())
            lines.append(f"  Sample size: {b.sample_size} players")
            lines.append(f"  PPG: {b.mean_ppg:.3f} ± {b.std_dev_ppg:.3f}")
            lines.append(
                f"       Median: {b.median_ppg:.3f}, Range: [{b.min_ppg:.3f} - {b.max_ppg:.3f}]"
            )
            lines.append(f"       P25: {b.p25_ppg:.3f} (minimum acceptable), P75: {b.p75_ppg:.3f} (elite)")
            if b.has_data("age"):
                lines.append(f"  Age: {b.mean_age:.1f} years")
            if b.has_data("capHit"):
                lines.append(f"  Cap hit: ${b.mean_cap_hit:.2f}M")
            if b.has_data("corsiForPct"):
                lines.append(f"  Corsi For %: {b.mean_corsi_for_pct:.1f}% ± {b.std_dev_corsi_for_pct:.1f}%")
            if b.has_data("fenwickForPct"):
                lines.append(
                    f"  Fenwick For %: {b.mean_fenwick_for_pct:.1f}% ± {b.std_dev_fenwick_for_pct:.1f}%"
                )
        return lines
