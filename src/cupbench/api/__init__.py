"""REST API for championship benchmark evaluation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request

from cupbench.api.schemas import (
    BenchmarkCatalogResponse,
    BenchmarkResponse,
    CompareRequest,
    CompareResponse,
    ExcludedPlayerResponse,
    ExpectedRange,
    ReloadResponse,
    RosterEvaluationResponse,
    RosterRequest,
    RosterSummaryResponse,
    WeakLinksResponse,
    WeaknessScoreResponse,
)
from cupbench.benchmarks import BenchmarkStore
from cupbench.config_loader import EngineSettings
from cupbench.exceptions import BenchmarkUnavailable, UnknownRole
from cupbench.models import Role
from cupbench.roster import RosterEvaluation, evaluate_roster
from cupbench.scoring import compare_against_benchmark, expected_ppg_range, is_weak_link


logger = logging.getLogger(__name__)


def _load_store(path: Path) -> tuple[Optional[BenchmarkStore], Optional[str]]:
    try:
        return BenchmarkStore.load(path), None
    except BenchmarkUnavailable as exc:
        logger.warning("Starting without benchmarks: %s", exc.message)
        return None, exc.message


def create_app(store: BenchmarkStore | None = None, settings: EngineSettings | None = None) -> FastAPI:
    """Build the API around one BenchmarkStore snapshot.

    The store is loaded once here (unless injected) and only replaced by an
    explicit ``POST /benchmarks/reload``.
    """

    settings = settings or EngineSettings.from_env()
    app = FastAPI(title="cupbench")
    app.state.settings = settings
    if store is None:
        app.state.benchmarks, app.state.benchmark_error = _load_store(settings.benchmark_file)
    else:
        app.state.benchmarks, app.state.benchmark_error = store, None

    def current_store(request: Request) -> BenchmarkStore:
        loaded: Optional[BenchmarkStore] = request.app.state.benchmarks
        if loaded is None:
            detail = request.app.state.benchmark_error or "Benchmarks are not loaded"
            raise HTTPException(status_code=503, detail=detail)
        return loaded

    def run_evaluation(request: Request, payload: RosterRequest) -> RosterEvaluation:
        benchmarks = current_store(request)
        min_games = settings.min_games_played if payload.min_games_played is None else payload.min_games_played
        try:
            return evaluate_roster(
                payload.players,
                benchmarks,
                min_games_played=min_games,
                ice_time_basis=settings.ice_time_basis,
                strategy=settings.scoring_classifier,
                workers=settings.workers,
                team_id=payload.team_id,
            )
        except BenchmarkUnavailable as exc:
            raise HTTPException(status_code=503, detail=exc.message) from exc

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        benchmarks: Optional[BenchmarkStore] = request.app.state.benchmarks
        return {
            "status": "ok",
            "benchmarks_loaded": benchmarks is not None and not benchmarks.is_empty,
            "roles": len(benchmarks) if benchmarks is not None else 0,
        }

    @app.get("/benchmarks", response_model=BenchmarkCatalogResponse)
    async def list_benchmarks(request: Request) -> BenchmarkCatalogResponse:
        benchmarks = current_store(request)
        if benchmarks.is_empty:
            raise HTTPException(status_code=503, detail="No role benchmarks available")
        return BenchmarkCatalogResponse(
            source=benchmarks.source,
            roles=[role.value for role in benchmarks.roles()],
            benchmarks={role.value: benchmark for role, benchmark in benchmarks.benchmarks.items()},
        )

    @app.get("/benchmarks/{role}", response_model=BenchmarkResponse)
    async def get_benchmark(role: str, request: Request) -> BenchmarkResponse:
        benchmarks = current_store(request)
        try:
            resolved = Role.parse(role)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"Unknown role {role!r}") from None
        benchmark = benchmarks.get(resolved)
        if benchmark is None:
            raise HTTPException(status_code=404, detail=f"No benchmark for role {resolved.value}")
        return BenchmarkResponse(role=resolved.value, benchmark=benchmark)

    @app.post("/benchmarks/reload", response_model=ReloadResponse)
    async def reload_benchmarks(request: Request) -> ReloadResponse:
        try:
            reloaded = BenchmarkStore.load(settings.benchmark_file)
        except BenchmarkUnavailable as exc:
            # The previous snapshot, if any, keeps serving.
            raise HTTPException(status_code=503, detail=exc.message) from exc
        request.app.state.benchmarks = reloaded
        request.app.state.benchmark_error = None
        logger.info("Reloaded benchmarks from %s", settings.benchmark_file)
        return ReloadResponse(
            status="reloaded",
            source=reloaded.source,
            roles=[role.value for role in reloaded.roles()],
        )

    @app.post("/rosters/evaluate", response_model=RosterEvaluationResponse)
    async def evaluate(payload: RosterRequest, request: Request) -> RosterEvaluationResponse:
        evaluation = run_evaluation(request, payload)
        return RosterEvaluationResponse(
            team_id=evaluation.team_id,
            scores=[WeaknessScoreResponse.from_score(score) for score in evaluation.scores],
            excluded=[ExcludedPlayerResponse.from_excluded(item) for item in evaluation.excluded],
            summary=RosterSummaryResponse.from_summary(evaluation.summary),
        )

    @app.post("/rosters/weak-links", response_model=WeakLinksResponse)
    async def weak_links(payload: RosterRequest, request: Request) -> WeakLinksResponse:
        evaluation = run_evaluation(request, payload)
        return WeakLinksResponse(
            team_id=evaluation.team_id,
            weak_links=[WeaknessScoreResponse.from_score(score) for score in evaluation.weak_links],
            evaluated=len(evaluation.scores),
            excluded=[ExcludedPlayerResponse.from_excluded(item) for item in evaluation.excluded],
        )

    @app.post("/players/compare", response_model=CompareResponse)
    async def compare_player(payload: CompareRequest, request: Request) -> CompareResponse:
        benchmarks = current_store(request)
        try:
            comparison = compare_against_benchmark(payload.role, payload.points_per_game, benchmarks)
            p25, mean, p75 = expected_ppg_range(comparison.role, benchmarks)
            weak = is_weak_link(comparison.role, payload.points_per_game, benchmarks)
        except UnknownRole as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except BenchmarkUnavailable as exc:
            raise HTTPException(status_code=404, detail=exc.message) from exc
        return CompareResponse(
            role=comparison.role.value,
            points_per_game=comparison.points_per_game,
            z_score=comparison.z_score,
            percentile=comparison.percentile,
            band=comparison.band.value,
            description=comparison.description,
            expected_range=ExpectedRange(p25=p25, mean=mean, p75=p75),
            is_weak_link=weak,
        )

    return app


__all__ = ["create_app"]
