from datetime import date

import pytest

from proptrack.records import CandidateLine, GameStatRecord, RecentFirstLog
from proptrack.scoring.hit_rates import (
    NEUTRAL_TREND,
    analyze_line,
    classify,
    confidence_score,
    head_to_head,
    line_ladder,
    trend_score,
)


def test_scenario_a_hit_rates(scenario_a_log):
    r = analyze_line(scenario_a_log, 1.5, "points")
    assert r.total_games == 12
    assert r.last5_hit_rate == pytest.approx(80.0)
    assert r.hits == 9
    assert r.hit_rate == pytest.approx(75.0)
    assert r.avg_value == pytest.approx(2.0)
    assert r.expected_margin == pytest.approx(0.5)
    assert r.expected_margin_pct == pytest.approx(0.5 / 1.5 * 100)


def test_pushes_count_toward_games_not_hits(log_of):
    r = analyze_line(log_of([2, 2, 3]), 2, "points")
    assert (r.hits, r.pushes, r.misses) == (1, 2, 0)
    assert r.hit_rate == pytest.approx(100 / 3)


def test_classify():
    assert classify(3, 2.5) == "hit"
    assert classify(2.5, 2.5) == "push"
    assert classify(2, 2.5) == "miss"


def test_trend_neutral_under_five_games():
    assert trend_score([10, 10, 10, 10], 1.0) == NEUTRAL_TREND


def test_trend_bounds():
    assert trend_score([3] * 5, 2.0) == pytest.approx(100.0)
    assert trend_score([1] * 5, 2.0) == pytest.approx(0.0)
    assert trend_score([2] * 5, 2.0) == pytest.approx(50.0)


def test_trend_weights_recent_games_more():
    line = 2.0
    recent_hot = trend_score([3, 3, 1, 1, 1], line)
    recent_cold = trend_score([1, 1, 1, 3, 3], line)
    assert recent_hot > 50 > recent_cold


def test_trend_with_zero_line():
    assert trend_score([1, 0, 0, 0, 0], 0.0) == pytest.approx(50 + 100 * 5 / 15)


def test_confidence_formula():
    assert confidence_score(100, 100, 20, 100) == 100.0
    assert confidence_score(50, 50, 10, 50) == pytest.approx(65 * 0.9)
    assert confidence_score(80, 60, 0, 70) == 0.0


def test_zero_line_margin_pct(log_of):
    r = analyze_line(log_of([1, 0, 2]), 0, "points")
    assert r.expected_margin_pct == 0.0
    assert r.expected_margin == pytest.approx(1.0)


def test_empty_log(log_of):
    r = analyze_line(log_of([]), 2.5, "points")
    assert r.total_games == 0
    assert r.hit_rate == 0.0
    assert r.confidence_score == 0.0
    assert r.games == ()


def test_game_list_is_capped(log_of):
    r = analyze_line(log_of([1] * 20), 0.5, "points")
    assert len(r.games) == 15
    assert r.total_games == 20
    assert r.games[0].result == "hit"


def test_accepts_callable_stat(goalie_log_of):
    lg = goalie_log_of([(30, 2), (25, 3)])
    r = analyze_line(lg, 25.5, lambda g: g.stat("shotsAgainst") - g.stat("goalsAgainst"))
    assert r.hits == 1


def test_head_to_head_goalie(goalie_log_of):
    lg = goalie_log_of(
        [(30, 2), (20, 4), (25, 3)],
        opponents=["TOR", "MTL", "TOR"],
        decisions=["W", "W", "L"],
    )
    h = head_to_head(lg, "tor", "saves", line=25.5)
    assert h.opponent == "TOR"
    assert h.games == 2
    assert h.avg_value == pytest.approx(25.0)
    assert h.hits == 1
    assert h.hit_rate == pytest.approx(50.0)
    assert h.save_pct == pytest.approx(50 / 55)
    assert h.record == "1-1-0"


def test_head_to_head_without_line_or_games(log_of):
    lg = log_of([1, 2], opponents=["BOS", "BOS"])
    h = head_to_head(lg, "BOS", "points")
    assert h.hit_rate is None
    assert h.record is None
    assert head_to_head(lg, "NYR", "points") is None


def test_line_ladder(log_of):
    lg = log_of([3, 2, 1, 4, 0])
    ladder = line_ladder(
        lg,
        [CandidateLine(line=0.5, bookmaker="A"), CandidateLine(line=1.5, bookmaker="B"),
         CandidateLine(line=2.5, bookmaker="C", is_alternate=True)],
        "points",
    )
    assert [row.hits for row in ladder] == [4, 3, 2]
    assert ladder[2].is_alternate
    assert ladder[0].hit_rate == pytest.approx(80.0)


def test_head_to_head_resolves_full_team_name(log_of, league):
    lg = log_of([2, 1, 3], opponents=["TOR", "BOS", "TOR"])
    h = head_to_head(lg, "Toronto Maple Leafs", "points", line=1.5, team_stats=league)
    assert h.opponent == "TOR"
    assert h.games == 2
    assert h.hit_rate == pytest.approx(100.0)
    assert head_to_head(lg, "Toronto Maple Leafs", "points") is None


def test_head_to_head_skater_breakdown():
    games = [
        GameStatRecord(game_date=date(2025, 3, 1), opponent="MTL",
                       stats={"goals": 1, "assists": 2, "points": 3, "shots": 5}),
        GameStatRecord(game_date=date(2025, 2, 1), opponent="MTL",
                       stats={"goals": 0, "assists": 1, "points": 1, "shots": 2}),
    ]
    h = head_to_head(RecentFirstLog(games), "mtl", "shots")
    assert h.avg_value == pytest.approx(3.5)
    assert (h.avg_goals, h.avg_assists, h.avg_points, h.avg_shots) == pytest.approx((0.5, 1.5, 2.0, 3.5))
    assert h.save_pct is None


LINE_GRID = [0.0, 0.5, 1.5, 2.0, 2.5, 4.5]


@pytest.mark.parametrize("line", LINE_GRID)
def test_outcomes_partition_games(log_of, line):
    r = analyze_line(log_of([0, 2, 3, 2, 5, 1, 4, 2, 0, 6, 2, 1]), line, "points")
    assert r.hits + r.pushes + r.misses == r.total_games == 12
    assert 0.0 <= r.hit_rate <= 100.0
    assert 0.0 <= r.trend_score <= 100.0
    assert 0.0 <= r.confidence_score <= 100.0


@pytest.mark.parametrize("hit_rate,recent,games,trend", [
    (0, 100, 1, 0),
    (100, 0, 5, 100),
    (100, 100, 40, 100),
    (0, 0, 3, 0),
    (55, 70, 12, 51),
])
def test_confidence_bounds(hit_rate, recent, games, trend):
    assert 0.0 <= confidence_score(hit_rate, recent, games, trend) <= 100.0
