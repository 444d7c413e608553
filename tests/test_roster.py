import pytest

from cupbench.benchmarks import BenchmarkStore
from cupbench.exceptions import BenchmarkUnavailable
from cupbench.models import NormalizedPlayerStat, Position, Role, RoleBenchmark, SeasonStatRow, SeverityTier
from cupbench.roster import evaluate_roster, get_weak_links, summarize
from cupbench.scoring import ExclusionReason


def _benchmark(mean: float, std_dev: float) -> RoleBenchmark:
    return RoleBenchmark(
        sample_size=10,
        mean_ppg=mean,
        std_dev_ppg=std_dev,
        median_ppg=mean,
        p25_ppg=mean - 0.1,
        p75_ppg=mean + 0.1,
        min_ppg=mean - 0.3,
        max_ppg=mean + 0.3,
        missing_metrics=("corsiForPct", "fenwickForPct"),
    )


def _store() -> BenchmarkStore:
    return BenchmarkStore(
        {
            Role.FIRST_LINE_CENTER: _benchmark(0.80, 0.10),
            Role.SECOND_LINE_CENTER: _benchmark(0.55, 0.10),
            Role.TOP_SIX_WING: _benchmark(0.70, 0.10),
            Role.MIDDLE_SIX_WING: _benchmark(0.45, 0.10),
            Role.FIRST_PAIR_DEFENSE: _benchmark(0.60, 0.10),
        }
    )


def _row(player_id: str, position: str, points: int, toi: float, *, games: int = 80, salary=None) -> SeasonStatRow:
    return SeasonStatRow(
        player_id=player_id,
        name=player_id.title(),
        position=position,
        games_played=games,
        goals=points // 2,
        assists=points - points // 2,
        time_on_ice=toi,
        salary=salary,
    )


def _roster() -> list[SeasonStatRow]:
    return [
        _row("star", "C", 80, 20.0),  # 1.00 PPG, 1C
        _row("overpaid", "C", 16, 15.0, salary=9.0),  # 0.20 PPG, 1C by contract
        _row("second", "C", 40, 17.0),  # 0.50 PPG, 2C
        _row("winger", "LW", 32, 14.0),  # 0.40 PPG, Middle-6
        _row("anchor", "D", 36, 23.0, salary=7.5),  # 0.45 PPG, 1D
        _row("callup", "C", 2, 11.0, games=8),
        _row("keeper", "G", 0, 59.0),
        _row("mystery", "F", 30, 15.0),
    ]


def _evaluate(**kwargs):
    return evaluate_roster(_roster(), _store(), ice_time_basis="per_game_minutes", **kwargs)


def test_scores_sorted_worst_first():
    evaluation = _evaluate()
    ranking = [score.ranking_score for score in evaluation.scores]

    assert ranking == sorted(ranking)
    assert evaluation.scores[0].player_id == "overpaid"
    assert evaluation.scores[-1].player_id == "star"


def test_thin_sample_player_is_absent_from_every_count():
    evaluation = _evaluate(min_games_played=10)
    summary = evaluation.summary

    assert "callup" not in {score.player_id for score in evaluation.scores}
    assert "callup" not in {score.player_id for score in evaluation.weak_links}
    assert summary.total_players == 5
    assert (
        summary.critical + summary.high + summary.moderate + summary.minor + summary.meets_standards
        == summary.total_players
    )
    reasons = {item.player_id: item.reason for item in evaluation.excluded}
    assert reasons == {
        "callup": ExclusionReason.INSUFFICIENT_SAMPLE,
        "keeper": ExclusionReason.GOALIE,
        "mystery": ExclusionReason.UNKNOWN_ROLE,
    }
    assert summary.excluded == 3


def test_summary_counts_and_worst_player():
    summary = _evaluate().summary

    assert summary.critical == 1
    assert summary.high == 0
    assert summary.moderate == 0
    assert summary.minor == 3
    assert summary.meets_standards == 1
    assert summary.worst_player is not None
    assert summary.worst_player.player_id == "overpaid"
    assert summary.average_z_score == pytest.approx(
        sum(score.composite_z_score for score in _evaluate().scores) / 5
    )


def test_weak_links_are_critical_and_high_only():
    evaluation = _evaluate()
    weak = evaluation.weak_links

    assert weak
    assert all(score.severity in (SeverityTier.CRITICAL, SeverityTier.HIGH) for score in weak)
    assert get_weak_links(evaluation.scores) == weak


def test_empty_store_is_fatal():
    with pytest.raises(BenchmarkUnavailable):
        evaluate_roster(_roster(), BenchmarkStore({}))


def test_empty_weakness_list_is_a_valid_result():
    evaluation = evaluate_roster([_row("star", "C", 80, 20.0)], _store(), ice_time_basis="per_game_minutes")
    assert evaluation.weak_links == []
    assert evaluation.summary.meets_standards == 1


def test_ties_break_on_player_id():
    rows = [_row("b-2", "C", 40, 17.0), _row("a-1", "C", 40, 17.0), _row("c-3", "C", 40, 17.0)]
    for _ in range(3):
        evaluation = evaluate_roster(rows, _store(), ice_time_basis="per_game_minutes")
        assert [score.player_id for score in evaluation.scores] == ["a-1", "b-2", "c-3"]


def test_normalized_stats_are_accepted():
    stat = NormalizedPlayerStat(
        player_id="n1",
        raw_position="C",
        position=Position.CENTER,
        points_per_game=0.55,
        time_on_ice_per_game=17.0,
        salary_millions=2.0,
        games_played=5,
    )
    evaluation = evaluate_roster([stat], _store(), min_games_played=10)
    assert evaluation.scores == ()
    assert evaluation.excluded[0].reason == ExclusionReason.INSUFFICIENT_SAMPLE

    evaluation = evaluate_roster([stat], _store(), min_games_played=0)
    assert evaluation.scores[0].benchmark_role == Role.SECOND_LINE_CENTER


def test_summarize_empty_list():
    summary = summarize([])
    assert summary.total_players == 0
    assert summary.average_z_score is None
    assert summary.worst_player is None


def test_parallel_evaluation_matches_serial():
    serial = _evaluate(workers=1)
    parallel = _evaluate(workers=2)
    assert parallel.scores == serial.scores
    assert parallel.excluded == serial.excluded
