import csv
import json
from pathlib import Path

import pytest

from cupbench import cli


def _corpus_player(player_id: str, position: str, ppg: float, toi: float, **extra) -> dict:
    games = 80
    points = round(ppg * games)
    player = {
        "player_id": player_id,
        "name": player_id.title(),
        "position": position,
        "games_played": games,
        "goals": points // 2,
        "assists": points - points // 2,
        "time_on_ice": toi,
    }
    player.update(extra)
    return player


def _write_corpus(path: Path) -> Path:
    corpus = [
        {
            "season": 2023,
            "team_id": "VGK",
            "ice_time_basis": "per_game_minutes",
            "players": [
                _corpus_player("c1", "C", 0.90, 20.0, corsi_for_pct=54.0, fenwick_for_pct=53.0, age=27),
                _corpus_player("c2", "C", 0.50, 17.0, corsi_for_pct=51.0, fenwick_for_pct=50.0),
                _corpus_player("d1", "D", 0.55, 23.0, corsi_for_pct=55.0, fenwick_for_pct=54.0),
            ],
        },
        {
            "season": 2024,
            "team_id": "FLA",
            "ice_time_basis": "per_game_minutes",
            "players": [
                _corpus_player("c3", "C", 0.70, 19.5, corsi_for_pct=52.0, fenwick_for_pct=52.0),
                _corpus_player("c4", "C", 0.60, 16.5, corsi_for_pct=50.0, fenwick_for_pct=51.0),
                _corpus_player("d2", "D", 0.45, 22.5, corsi_for_pct=53.0, fenwick_for_pct=52.0),
            ],
        },
    ]
    path.write_text(json.dumps(corpus), encoding="utf-8")
    return path


def _write_roster(path: Path) -> Path:
    roster = {
        "team_id": "NYR",
        "players": [
            _corpus_player("weak", "C", 0.20, 15.0, salary=9.0, corsi_for_pct=45.0, fenwick_for_pct=45.0),
            _corpus_player("fine", "C", 0.85, 20.0, corsi_for_pct=54.0, fenwick_for_pct=53.0),
            _corpus_player("thin", "C", 0.90, 20.0, games_played=5),
        ],
    }
    path.write_text(json.dumps(roster), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CUPBENCH_MIN_GAMES_PLAYED", "CUPBENCH_SCORING_CLASSIFIER", "CUPBENCH_BUILD_CLASSIFIER", "CUPBENCH_WORKERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def benchmarks(tmp_path: Path) -> Path:
    corpus = _write_corpus(tmp_path / "corpus.json")
    output = tmp_path / "benchmarks.json"
    assert cli.main(["build", str(corpus), "--output", str(output)]) == 0
    return output


def test_build_writes_benchmarks(benchmarks: Path):
    payload = json.loads(benchmarks.read_text(encoding="utf-8"))
    assert payload["1C"]["sampleSize"] == 2
    assert "1D" in payload


def test_show_prints_report(benchmarks: Path, capsys):
    assert cli.main(["show", "--benchmarks", str(benchmarks)]) == 0
    out = capsys.readouterr().out
    assert "1C" in out
    assert "Sample size: 2 players" in out


def test_evaluate_writes_report(benchmarks: Path, tmp_path: Path, capsys):
    roster = _write_roster(tmp_path / "roster.json")
    output = tmp_path / "report.csv"

    code = cli.main(
        [
            "evaluate",
            str(roster),
            "--benchmarks",
            str(benchmarks),
            "--output",
            str(output),
            "--ice-time-basis",
            "per_game_minutes",
        ]
    )

    assert code == 0
    with output.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [row["player_id"] for row in rows] == ["weak", "fine"]
    assert rows[0]["severity"] == "Critical"
    assert rows[0]["benchmark_role"] == "1C"
    out = capsys.readouterr().out
    assert "Evaluated 2 players for NYR (1 excluded)" in out


def test_evaluate_weak_links_only(benchmarks: Path, tmp_path: Path):
    roster = _write_roster(tmp_path / "roster.json")
    output = tmp_path / "weak.csv"

    cli.main(
        [
            "evaluate",
            str(roster),
            "--benchmarks",
            str(benchmarks),
            "--output",
            str(output),
            "--ice-time-basis",
            "per_game_minutes",
            "--weak-links",
        ]
    )

    with output.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [row["player_id"] for row in rows] == ["weak"]


def test_missing_benchmarks_exit_non_zero(tmp_path: Path, capsys):
    roster = _write_roster(tmp_path / "roster.json")
    code = cli.main(["evaluate", str(roster), "--benchmarks", str(tmp_path / "absent.json")])

    assert code != 0
    assert "Benchmarks unavailable" in capsys.readouterr().err
