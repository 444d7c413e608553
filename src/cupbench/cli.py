"""Command-line interface for building benchmarks and evaluating rosters."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from cupbench.benchmarks import BenchmarkStore, build_benchmarks
from cupbench.classifier import ClassifierStrategy
from cupbench.config_loader import EngineSettings
from cupbench.exceptions import BenchmarkUnavailable
from cupbench.ingest import HistoricalRoster, IceTimeBasis, load_corpus_json, load_moneypuck_directory
from cupbench.models import SeasonStatRow
from cupbench.roster import RosterEvaluation, evaluate_roster


REPORT_HEADER = [
    "rank",
    "player_id",
    "name",
    "role",
    "benchmark_role",
    "severity",
    "points_per_game",
    "time_on_ice_per_game",
    "ppg_z",
    "corsi_z",
    "fenwick_z",
    "composite_z_score",
    "position_weight",
    "ranking_score",
    "percentile",
    "explanation",
]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare rosters against championship benchmarks")
    parser.add_argument("--settings", type=Path, default=None, help="Load engine settings JSON")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g., DEBUG, INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build role benchmarks from the championship corpus")
    build.add_argument("corpus", type=Path, help="Corpus JSON file or directory of MoneyPuck skaters CSVs")
    build.add_argument("--output", type=Path, default=None, help="Benchmark JSON path")
    build.add_argument("--min-games", type=int, default=None, help="Minimum games played to qualify")
    build.add_argument(
        "--classifier",
        choices=[strategy.value for strategy in ClassifierStrategy],
        default=None,
        help="Role classifier used to bucket historical players",
    )
    build.add_argument("--workers", type=int, default=None, help="Worker processes for bucketing")
    build.add_argument("--exclude-goalies", action="store_true", help="Skip goalie benchmarks")
    build.add_argument("--save-settings", type=Path, default=None, help="Save resolved settings JSON")

    show = sub.add_parser("show", help="Print the benchmark report")
    show.add_argument("--benchmarks", type=Path, default=None, help="Benchmark JSON path")

    evaluate = sub.add_parser("evaluate", help="Score a roster and write a CSV report")
    evaluate.add_argument("roster", type=Path, help="Roster JSON: a list of players or {team_id, players}")
    evaluate.add_argument("--benchmarks", type=Path, default=None, help="Benchmark JSON path")
    evaluate.add_argument("--output", type=Path, default=Path("weakness-report.csv"), help="Output CSV path")
    evaluate.add_argument("--weak-links", action="store_true", help="Only report Critical and High players")
    evaluate.add_argument("--min-games", type=int, default=None, help="Minimum games played to be scored")
    evaluate.add_argument(
        "--ice-time-basis",
        choices=[basis.value for basis in IceTimeBasis],
        default=None,
        help="How time_on_ice is expressed in the roster file",
    )
    evaluate.add_argument("--workers", type=int, default=None, help="Worker processes for scoring")

    serve = sub.add_parser("serve", help="Run the REST API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--benchmarks", type=Path, default=None, help="Benchmark JSON path")

    return parser.parse_args(argv)


def _load_corpus(path: Path, settings: EngineSettings) -> List[HistoricalRoster]:
    if path.is_dir():
        return load_moneypuck_directory(path, min_games_played=settings.min_games_played)
    return load_corpus_json(
        path,
        min_games_played=settings.min_games_played,
        ice_time_basis=settings.ice_time_basis,
    )


def _load_roster(path: Path) -> tuple[Optional[str], List[SeasonStatRow]]:
    payload: Any = json.loads(path.read_text(encoding="utf-8"))
    team_id: Optional[str] = None
    if isinstance(payload, dict):
        team_id = payload.get("team_id")
        payload = payload.get("players", [])
    if not isinstance(payload, list):
        raise ValueError(f"Roster file {path} must contain a list of players")
    return team_id, [SeasonStatRow(**player) for player in payload]


def _write_report(path: Path, evaluation: RosterEvaluation, *, weak_links_only: bool) -> int:
    scores = evaluation.weak_links if weak_links_only else list(evaluation.scores)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_HEADER)
        for rank, score in enumerate(scores, start=1):
            writer.writerow([
                rank,
                score.player_id,
                score.name,
                score.role.value,
                score.benchmark_role.value,
                score.severity.value,
                f"{score.metrics.points_per_game:.3f}",
                f"{score.metrics.time_on_ice_per_game:.2f}",
                f"{score.z_scores.ppg:.3f}",
                f"{score.z_scores.corsi:.3f}",
                f"{score.z_scores.fenwick:.3f}",
                f"{score.composite_z_score:.3f}",
                score.position_weight,
                f"{score.ranking_score:.3f}",
                f"{score.percentile:.1f}",
                score.explanation,
            ])
    return len(scores)


def _print_summary(evaluation: RosterEvaluation) -> None:
    summary = evaluation.summary
    label = evaluation.team_id or "roster"
    print(f"Evaluated {summary.total_players} players for {label} ({summary.excluded} excluded)")
    print(
        f"  Critical: {summary.critical}  High: {summary.high}  Moderate: {summary.moderate}  "
        f"Minor: {summary.minor}  Meets standards: {summary.meets_standards}"
    )
    if summary.average_z_score is not None:
        print(f"  Average composite z-score: {summary.average_z_score:.3f}")
    if summary.worst_player is not None:
        worst = summary.worst_player
        print(f"  Biggest weakness: {worst.name or worst.player_id} ({worst.benchmark_role.value}, {worst.severity.value})")


def _run_build(args: argparse.Namespace, settings: EngineSettings) -> int:
    settings = settings.with_overrides(
        min_games_played=args.min_games,
        build_classifier=args.classifier,
        workers=args.workers,
        benchmark_path=str(args.output) if args.output else None,
    )
    rosters = _load_corpus(args.corpus, settings)
    if not rosters:
        print(f"No championship rosters found in {args.corpus}", file=sys.stderr)
        return 1
    store = build_benchmarks(
        rosters,
        min_games_played=settings.min_games_played,
        strategy=settings.build_classifier,
        include_goalies=not args.exclude_goalies,
        workers=settings.workers,
    )
    if store.is_empty:
        print("Corpus produced no role benchmarks; nothing written", file=sys.stderr)
        return 1
    store.save(settings.benchmark_file)
    print(f"Wrote {len(store)} role benchmarks from {len(rosters)} rosters to {settings.benchmark_file}")
    if args.save_settings:
        settings.save(args.save_settings)
        print(f"Saved settings to {args.save_settings}")
    return 0


def _run_show(args: argparse.Namespace, settings: EngineSettings) -> int:
    path = args.benchmarks or settings.benchmark_file
    store = BenchmarkStore.load(path)
    print(f"Championship benchmarks ({path})")
    for line in store.describe():
        print(line)
    return 0


def _run_evaluate(args: argparse.Namespace, settings: EngineSettings) -> int:
    settings = settings.with_overrides(
        min_games_played=args.min_games,
        ice_time_basis=args.ice_time_basis,
        workers=args.workers,
    )
    store = BenchmarkStore.load(args.benchmarks or settings.benchmark_file)
    team_id, rows = _load_roster(args.roster)
    evaluation = evaluate_roster(
        rows,
        store,
        min_games_played=settings.min_games_played,
        ice_time_basis=settings.ice_time_basis,
        strategy=settings.scoring_classifier,
        workers=settings.workers,
        team_id=team_id,
    )
    written = _write_report(args.output, evaluation, weak_links_only=args.weak_links)
    _print_summary(evaluation)
    print(f"Wrote {written} rows to {args.output}")
    return 0


def _run_serve(args: argparse.Namespace, settings: EngineSettings) -> int:
    import uvicorn

    from cupbench.api import create_app

    if args.benchmarks:
        settings = settings.with_overrides(benchmark_path=str(args.benchmarks))
    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)
    return 0


_COMMANDS = {
    "build": _run_build,
    "show": _run_show,
    "evaluate": _run_evaluate,
    "serve": _run_serve,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = EngineSettings.load(args.settings) if args.settings else EngineSettings.from_env()
    try:
        return _COMMANDS[args.command](args, settings)
    except BenchmarkUnavailable as exc:
        print(f"Benchmarks unavailable: {exc.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
