import pytest

from proptrack.records import GameStatRecord
from proptrack.scoring.categories import (
    CATEGORIES,
    GOALIE_WEIGHTS,
    SKATER_WEIGHTS,
    get_category,
    saves_of,
    total_touchdowns_of,
)


def _weight_sum(w):
    return w.last10 + w.last5 + w.season + w.trend + w.consistency + w.momentum + w.quality + w.workload


def test_weight_vectors_sum_to_one():
    assert _weight_sum(SKATER_WEIGHTS) == pytest.approx(1.0)
    assert _weight_sum(GOALIE_WEIGHTS) == pytest.approx(1.0)


def test_saves_are_derived():
    g = GameStatRecord(stats={"shotsAgainst": 31, "goalsAgainst": 3})
    assert saves_of(g) == 28.0
    assert saves_of(GameStatRecord()) == 0.0


def test_anytime_td_sums_all_touchdowns():
    g = GameStatRecord(stats={"passingTouchdowns": 1, "rushingTouchdowns": 2, "receivingTouchdowns": None})
    assert total_touchdowns_of(g) == 3.0


def test_category_lookup():
    assert get_category("saves").is_goalie
    assert get_category("points").matchup.dimension == "shots_against"
    assert get_category("saves").matchup.dimension == "shots_for"
    cat = CATEGORIES["receptions"]
    assert get_category(cat) is cat
    assert cat.matchup is None
    with pytest.raises(ValueError):
        get_category("blocked_shots")


def test_stat_reads_junk_as_zero():
    g = GameStatRecord(stats={"points": "n/a", "goals": float("nan"), "shots": True})
    assert g.stat("points") == 0.0
    assert g.stat("goals") == 0.0
    assert g.stat("shots") == 0.0
    assert g.stat("assists") == 0.0
