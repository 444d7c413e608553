import pytest

from cupbench.benchmarks import BenchmarkStore
from cupbench.exceptions import BenchmarkUnavailable, UnknownRole
from cupbench.models import NormalizedPlayerStat, Role, RoleBenchmark, SeasonStatRow, SeverityTier, parse_position
from cupbench.scoring import (
    Evaluable,
    Excluded,
    ExclusionReason,
    PerformanceBand,
    classify_severity,
    compare_against_benchmark,
    expected_ppg_range,
    is_weak_link,
    score_player,
    score_row,
)


def _benchmark(mean: float, std_dev: float, *, corsi: tuple[float, float] | None = None,
               fenwick: tuple[float, float] | None = None) -> RoleBenchmark:
    missing = []
    if corsi is None:
        missing.append("corsiForPct")
    if fenwick is None:
        missing.append("fenwickForPct")
    corsi_mean, corsi_sd = corsi or (0.0, 0.0)
    fenwick_mean, fenwick_sd = fenwick or (0.0, 0.0)
    return RoleBenchmark(
        sample_size=12,
        mean_ppg=mean,
        std_dev_ppg=std_dev,
        median_ppg=mean,
        p25_ppg=mean - 0.08,
        p75_ppg=mean + 0.08,
        min_ppg=mean - 0.25,
        max_ppg=mean + 0.3,
        mean_corsi_for_pct=corsi_mean,
        std_dev_corsi_for_pct=corsi_sd,
        mean_fenwick_for_pct=fenwick_mean,
        std_dev_fenwick_for_pct=fenwick_sd,
        missing_metrics=tuple(missing),
    )


def _stat(player_id: str, position: str, ppg: float, toi: float, *, salary: float = 0.925,
          corsi: float | None = None, fenwick: float | None = None) -> NormalizedPlayerStat:
    return NormalizedPlayerStat(
        player_id=player_id,
        name=f"Player {player_id}",
        raw_position=position,
        position=parse_position(position),
        points_per_game=ppg,
        time_on_ice_per_game=toi,
        corsi_for_pct=corsi,
        fenwick_for_pct=fenwick,
        salary_millions=salary,
        games_played=70,
    )


def _store() -> BenchmarkStore:
    return BenchmarkStore(
        {
            Role.FIRST_LINE_CENTER: _benchmark(0.70, 0.10),
            Role.TOP_SIX_WING: _benchmark(0.65, 0.10, corsi=(50.0, 2.0), fenwick=(50.0, 0.0)),
            Role.FIRST_PAIR_DEFENSE: _benchmark(0.55, 0.10, corsi=(52.0, 2.0), fenwick=(52.0, 2.0)),
        }
    )


@pytest.mark.parametrize(
    "composite, expected",
    [
        (-2.0001, SeverityTier.CRITICAL),
        (-2.0, SeverityTier.HIGH),
        (-1.0001, SeverityTier.HIGH),
        (-1.0, SeverityTier.MODERATE),
        (-0.5001, SeverityTier.MODERATE),
        (-0.5, SeverityTier.MINOR),
        (-0.0001, SeverityTier.MINOR),
        (0.0, SeverityTier.NONE),
        (1.5, SeverityTier.NONE),
    ],
)
def test_severity_boundaries(composite, expected):
    assert classify_severity(composite) == expected


def test_first_line_center_half_a_deviation_below():
    outcome = score_player(_stat("c1", "C", 0.65, 19.0), _store())

    assert isinstance(outcome, Evaluable)
    score = outcome.score
    assert score.role == Role.FIRST_LINE_CENTER
    assert score.benchmark_role == Role.FIRST_LINE_CENTER
    assert score.z_scores.ppg == pytest.approx(-0.5)
    assert score.z_scores.corsi == 0.0
    assert score.z_scores.fenwick == 0.0
    assert score.composite_z_score == pytest.approx(-0.2)
    assert score.severity == SeverityTier.MINOR
    assert score.position_weight == 5.0
    assert score.ranking_score == pytest.approx(-1.0)
    assert score.percentile == pytest.approx(30.85, abs=0.01)


def test_share_z_scores_feed_forward_composite():
    outcome = score_player(_stat("w1", "LW", 0.65, 17.0, corsi=46.0, fenwick=40.0), _store())

    score = outcome.score
    assert score.z_scores.ppg == pytest.approx(0.0)
    assert score.z_scores.corsi == pytest.approx(-2.0)
    # Fenwick spread is zero for this role, so it contributes nothing.
    assert score.z_scores.fenwick == 0.0
    assert score.composite_z_score == pytest.approx(0.35 * -2.0)
    assert score.severity == SeverityTier.MODERATE
    assert score.ranking_score == pytest.approx(0.35 * -2.0 * 4.5)


def test_defense_uses_defensive_weights():
    outcome = score_player(_stat("d1", "D", 0.45, 23.0, salary=7.5, corsi=50.0, fenwick=48.0), _store())

    score = outcome.score
    assert score.benchmark_role == Role.FIRST_PAIR_DEFENSE
    expected = 0.30 * -1.0 + 0.35 * -1.0 + 0.35 * -2.0
    assert score.composite_z_score == pytest.approx(expected)
    assert score.severity == SeverityTier.HIGH


def test_high_explanation_lists_share_gaps():
    score = score_player(_stat("d1", "D", 0.45, 23.0, salary=7.5, corsi=50.0, fenwick=48.0), _store()).score

    assert "Corsi: 50.0% vs 52.0% avg (-1.00 std devs)" in score.explanation
    assert "Fenwick: 48.0% vs 52.0% avg (-2.00 std devs)" in score.explanation


def test_moderate_explanation_names_the_share_driving_it():
    outcome = score_player(_stat("d2", "D", 0.55, 23.0, salary=7.5, corsi=48.0, fenwick=52.0), _store())

    score = outcome.score
    assert score.z_scores.ppg == pytest.approx(0.0)
    assert score.composite_z_score == pytest.approx(0.35 * -2.0)
    assert score.severity == SeverityTier.MODERATE
    assert score.explanation.startswith("Player d2 (1D) is below championship standards but not critically.")
    assert "Corsi: 48.0% vs 52.0% avg (-2.00 std devs)." in score.explanation
    # Fenwick sits at the benchmark mean, so it is not cited.
    assert "Fenwick" not in score.explanation


def test_missing_player_share_is_not_a_penalty():
    with_share = score_player(_stat("w1", "LW", 0.70, 17.0, corsi=50.0), _store()).score
    without_share = score_player(_stat("w2", "LW", 0.70, 17.0), _store()).score
    assert with_share.composite_z_score == pytest.approx(without_share.composite_z_score)


def test_benchmark_role_comes_from_salary_aware_classifier():
    outcome = score_player(_stat("c9", "C", 0.10, 19.0, salary=9.5), _store())

    score = outcome.score
    assert score.benchmark_role == Role.FIRST_LINE_CENTER
    assert score.role == Role.FOURTH_LINE_CENTER
    assert score.z_scores.ppg == pytest.approx(-6.0)
    assert score.severity == SeverityTier.CRITICAL
    assert "1C" in score.explanation
    assert "PPG: 0.100 vs 0.700" in score.explanation
    assert "86% below" in score.explanation


def test_position_weights_affect_ranking_only():
    weights = {Role.FIRST_LINE_CENTER: 1.0}
    default = score_player(_stat("c1", "C", 0.40, 19.0, salary=9.0), _store()).score
    custom = score_player(_stat("c1", "C", 0.40, 19.0, salary=9.0), _store(), position_weights=weights).score

    assert custom.severity == default.severity == SeverityTier.HIGH
    assert custom.ranking_score == pytest.approx(default.ranking_score / 5.0)


def test_meets_standards_explanation():
    score = score_player(_stat("c1", "C", 0.90, 20.0), _store()).score
    assert score.severity == SeverityTier.NONE
    assert score.explanation == "Player c1 (1C) meets or exceeds championship standards."


@pytest.mark.parametrize(
    "stat, reason",
    [
        (_stat("g1", "G", 0.0, 60.0), ExclusionReason.GOALIE),
        (_stat("u1", "Utility", 0.5, 15.0), ExclusionReason.UNKNOWN_ROLE),
        (_stat("c4", "C", 0.1, 9.0), ExclusionReason.NO_BENCHMARK),
    ],
)
def test_unscorable_players_are_excluded(stat, reason):
    outcome = score_player(stat, _store())
    assert isinstance(outcome, Excluded)
    assert outcome.player_id == stat.player_id
    assert outcome.reason == reason


def test_score_row_turns_validation_into_exclusions():
    thin = SeasonStatRow(player_id="t1", position="C", games_played=8, goals=5, assists=5, time_on_ice=19.0)
    broken = SeasonStatRow(player_id="b1", position="C", games_played=60, goals=-1, assists=5, time_on_ice=19.0)
    good = SeasonStatRow(player_id="ok", position="C", games_played=60, goals=20, assists=22, time_on_ice=19.0)

    thin_outcome = score_row(thin, _store(), ice_time_basis="per_game_minutes")
    broken_outcome = score_row(broken, _store(), ice_time_basis="per_game_minutes")
    good_outcome = score_row(good, _store(), ice_time_basis="per_game_minutes")

    assert thin_outcome.reason == ExclusionReason.INSUFFICIENT_SAMPLE
    assert broken_outcome.reason == ExclusionReason.INVALID_INPUT
    assert isinstance(good_outcome, Evaluable)
    assert good_outcome.score.metrics.points_per_game == pytest.approx(0.7)


@pytest.mark.parametrize(
    "ppg, band",
    [
        (0.78, PerformanceBand.ELITE),
        (0.70, PerformanceBand.ABOVE_AVERAGE),
        (0.62, PerformanceBand.AVERAGE),
        (0.55, PerformanceBand.BELOW_AVERAGE),
        (0.40, PerformanceBand.WEAK),
    ],
)
def test_compare_against_benchmark_bands(ppg, band):
    comparison = compare_against_benchmark("1C", ppg, _store())
    assert comparison.band == band
    assert comparison.role == Role.FIRST_LINE_CENTER
    assert "1C" in comparison.description


def test_compare_reports_z_and_percentile():
    comparison = compare_against_benchmark(Role.FIRST_LINE_CENTER, 0.80, _store())
    assert comparison.z_score == pytest.approx(1.0)
    assert comparison.percentile == pytest.approx(84.13, abs=0.01)


def test_expected_range_and_weak_link():
    p25, mean, p75 = expected_ppg_range("1C", _store())
    assert (p25, mean, p75) == pytest.approx((0.62, 0.70, 0.78))
    assert is_weak_link("1C", 0.50, _store())
    assert not is_weak_link("1C", 0.62, _store())


def test_comparisons_require_a_benchmark():
    with pytest.raises(BenchmarkUnavailable):
        compare_against_benchmark("4C", 0.3, _store())
    with pytest.raises(BenchmarkUnavailable):
        is_weak_link(Role.SIXTH_PAIR_DEFENSE, 0.1, _store())
    with pytest.raises(UnknownRole):
        expected_ppg_range("Enforcer", _store())
