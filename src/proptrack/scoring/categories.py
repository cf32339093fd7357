# src/proptrack/scoring/categories.py
"""
Stat-category descriptors.

A category is a small record, not a subclass: the stat extractor, the
composite weight vector, the consistency steepness and the matchup dimension
travel together so the engine below stays generic across skaters, goalies and
NFL props.

Composite weights (formula source: the PropTrack ranking endpoints)
-------------------------------------------------------------------
  skater:  0.35*L10 + 0.25*L5 + 0.15*season + 0.15*trend + 0.05*consistency + 0.05*momentum
  goalie:  0.30*L10 + 0.25*L5 + 0.15*season + 0.10*quality + 0.10*workload
           + 0.05*trend + 0.05*consistency
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

from ..records import GameStatRecord

Family = Literal["skater", "goalie", "nfl"]
Dimension = Literal["shots_for", "shots_against", "goals_against"]


@dataclass(frozen=True)
class CompositeWeights:
    last10: float = 0.0
    last5: float = 0.0
    season: float = 0.0
    trend: float = 0.0
    consistency: float = 0.0
    momentum: float = 0.0
    quality: float = 0.0    # season save pct * 100
    workload: float = 0.0   # season avg saves vs GOALIE_WORKLOAD_ANCHOR


SKATER_WEIGHTS = CompositeWeights(
    last10=0.35, last5=0.25, season=0.15, trend=0.15, consistency=0.05, momentum=0.05,
)
GOALIE_WEIGHTS = CompositeWeights(
    last10=0.30, last5=0.25, season=0.15, quality=0.10, workload=0.10, trend=0.05, consistency=0.05,
)

SKATER_STEEPNESS = 50.0
GOALIE_STEEPNESS = 40.0  # save counts swing more, soften the penalty

GOALIE_WORKLOAD_ANCHOR = 35.0  # saves in a heavy-workload start


@dataclass(frozen=True)
class MatchupDimension:
    """Which opponent rank drives the matchup score.

    ``inverted`` flips the rank (33 - rank) before scoring, for categories
    where facing the "most" team in that dimension is the hard case.
    """

    dimension: Dimension
    inverted: bool = False


@dataclass(frozen=True)
class StatCategory:
    key: str
    family: Family
    stat_of: Callable[[GameStatRecord], float]
    weights: CompositeWeights
    consistency_steepness: float
    matchup: Optional[MatchupDimension]
    min_games: int
    label: str = ""

    @property
    def is_goalie(self) -> bool:
        return self.family == "goalie"


def _field(name: str) -> Callable[[GameStatRecord], float]:
    def stat_of(g: GameStatRecord) -> float:
        return g.stat(name)
    stat_of.__name__ = f"stat_{name}"
    return stat_of


def saves_of(g: GameStatRecord) -> float:
    """Saves are never stored; always shots against minus goals against."""
    return g.stat("shotsAgainst") - g.stat("goalsAgainst")


def total_touchdowns_of(g: GameStatRecord) -> float:
    return g.stat("passingTouchdowns") + g.stat("rushingTouchdowns") + g.stat("receivingTouchdowns")


# Opponent dimension per category.  Skater props key off how many shots the
# opponent allows; saves key off how many shots the opponent generates.
_SKATER_MATCHUP = MatchupDimension("shots_against")
_GOALIE_MATCHUP = MatchupDimension("shots_for")


def _skater(key: str, label: str) -> StatCategory:
    return StatCategory(
        key=key, family="skater", stat_of=_field(key), weights=SKATER_WEIGHTS,
        consistency_steepness=SKATER_STEEPNESS, matchup=_SKATER_MATCHUP, min_games=5, label=label,
    )


def _nfl(key: str, stat_of: Callable[[GameStatRecord], float], label: str) -> StatCategory:
    # NFL has no team shot table, so no matchup dimension
    return StatCategory(
        key=key, family="nfl", stat_of=stat_of, weights=SKATER_WEIGHTS,
        consistency_steepness=SKATER_STEEPNESS, matchup=None, min_games=1, label=label,
    )


CATEGORIES: dict[str, StatCategory] = {
    "points":  _skater("points", "Points"),
    "goals":   _skater("goals", "Goals"),
    "assists": _skater("assists", "Assists"),
    "shots":   _skater("shots", "Shots on Goal"),
    "saves": StatCategory(
        key="saves", family="goalie", stat_of=saves_of, weights=GOALIE_WEIGHTS,
        consistency_steepness=GOALIE_STEEPNESS, matchup=_GOALIE_MATCHUP, min_games=3, label="Saves",
    ),
    "passing_yards":   _nfl("passing_yards", _field("passingYards"), "Passing Yards"),
    "passing_tds":     _nfl("passing_tds", _field("passingTouchdowns"), "Passing TDs"),
    "rushing_yards":   _nfl("rushing_yards", _field("rushingYards"), "Rushing Yards"),
    "receiving_yards": _nfl("receiving_yards", _field("receivingYards"), "Receiving Yards"),
    "receptions":      _nfl("receptions", _field("receptions"), "Receptions"),
    "anytime_td":      _nfl("anytime_td", total_touchdowns_of, "Anytime TD"),
}


def get_category(key: str | StatCategory) -> StatCategory:
    if isinstance(key, StatCategory):
        return key
    try:
        return CATEGORIES[key]
    except KeyError:
        raise ValueError(f"Unsupported stat={key!r}. Use one of: {list(CATEGORIES)}") from None
