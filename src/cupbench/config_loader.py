"""Engine settings from the environment or a saved JSON profile."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from cupbench.benchmarks.store import DEFAULT_BENCHMARK_FILENAME
from cupbench.classifier import ClassifierStrategy
from cupbench.ingest import DEFAULT_MIN_GAMES_PLAYED, IceTimeBasis


logger = logging.getLogger(__name__)

ENV_PREFIX = "CUPBENCH_"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_choice(name: str, default: str, choices: type) -> str:
    raw = _env_str(name, default)
    try:
        return choices(raw.lower()).value
    except ValueError:
        logger.warning("Invalid value for %s: %s; using default %s", name, raw, default)
        return default


@dataclass(frozen=True)
class EngineSettings:
    benchmark_path: str = DEFAULT_BENCHMARK_FILENAME
    min_games_played: int = DEFAULT_MIN_GAMES_PLAYED
    scoring_classifier: str = ClassifierStrategy.SALARY_AWARE.value
    build_classifier: str = ClassifierStrategy.PERFORMANCE.value
    workers: int = 1
    ice_time_basis: str = IceTimeBasis.SEASON_SECONDS.value

    def __post_init__(self) -> None:
        ClassifierStrategy(self.scoring_classifier)
        ClassifierStrategy(self.build_classifier)
        IceTimeBasis(self.ice_time_basis)
        if self.min_games_played < 0:
            raise ValueError("min_games_played must be non-negative")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")

    @property
    def benchmark_file(self) -> Path:
        return Path(self.benchmark_path)

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls(
            benchmark_path=_env_str(f"{ENV_PREFIX}BENCHMARK_PATH", DEFAULT_BENCHMARK_FILENAME),
            min_games_played=_env_int(
                f"{ENV_PREFIX}MIN_GAMES_PLAYED", DEFAULT_MIN_GAMES_PLAYED, min_value=0
            ),
            scoring_classifier=_env_choice(
                f"{ENV_PREFIX}SCORING_CLASSIFIER", ClassifierStrategy.SALARY_AWARE.value, ClassifierStrategy
            ),
            build_classifier=_env_choice(
                f"{ENV_PREFIX}BUILD_CLASSIFIER", ClassifierStrategy.PERFORMANCE.value, ClassifierStrategy
            ),
            workers=_env_int(f"{ENV_PREFIX}WORKERS", 1, min_value=1),
            ice_time_basis=_env_choice(
                f"{ENV_PREFIX}ICE_TIME_BASIS", IceTimeBasis.SEASON_SECONDS.value, IceTimeBasis
            ),
        )

    def with_overrides(self, **overrides: object) -> "EngineSettings":
        """Copy with the given fields replaced; ``None`` values are ignored."""

        updates = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **updates)

    @classmethod
    def load(cls, path: Path) -> "EngineSettings":
        data = json.loads(path.read_text(encoding="utf-8"))
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))
        return cls(**{key: value for key, value in data.items() if key in known})

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
