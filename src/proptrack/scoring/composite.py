# src/proptrack/scoring/composite.py
"""
Composite ranking score per player.

Sub-scores
----------
  trend     = last5_avg / (season_avg + 0.01) * 100     recent vs season form
  momentum  = last3_avg / (last10_avg + 0.01) * 100     short-horizon acceleration
  consistency                                            see consistency.py
  goalies only:
    quality   = season save pct * 100
    workload  = season_avg_saves / 35 * 100

The composite is the dot product of those with the category's weight vector
(categories.py).  Players under ``min_games`` are left out of the ranking
entirely rather than scored with defaults.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Mapping, Optional, Sequence

import pandas as pd

from ..records import RecentFirstLog, TeamAggregateStat
from .categories import GOALIE_WORKLOAD_ANCHOR, StatCategory, get_category
from .consistency import consistency_for
from .matchup import MatchupResult, matchup_for
from .windows import aggregate

log = logging.getLogger("proptrack.scoring.composite")

_RATIO_EPS = 0.01

QUALITY_START_SV_PCT = 0.915
HIGH_VOLUME_SHOTS = 30

SORT_KEYS: dict[str, str] = {
    "last10": "last10_avg",
    "l10": "last10_avg",
    "last5": "last5_avg",
    "l5": "last5_avg",
    "season": "season_avg",
    "composite": "composite_score",
}


@dataclass(frozen=True)
class ScoreResult:
    player_id: str
    category: str
    games_played: int
    season_avg: float
    last10_avg: float
    last5_avg: float
    last3_avg: float
    composite_score: float
    trend_score: float
    consistency_score: float
    momentum_score: float
    matchup: Optional[MatchupResult] = None
    # goalie-only
    save_pct: Optional[float] = None
    quality_score: Optional[float] = None
    workload_score: Optional[float] = None
    quality_start_pct: Optional[float] = None
    high_volume_pct: Optional[float] = None

    @property
    def matchup_score(self) -> Optional[float]:
        return None if self.matchup is None else self.matchup.score


def _ratio_score(recent: float, baseline: float) -> float:
    denom = baseline + _RATIO_EPS
    if denom == 0:  # negative baselines only (NFL yardage)
        return 0.0
    return recent / denom * 100.0


def _goalie_profile(game_log: RecentFirstLog) -> dict[str, float]:
    games = game_log.season()
    total_shots = 0.0
    total_saves = 0.0
    quality_starts = 0
    high_volume = 0
    for g in games:
        shots = g.stat("shotsAgainst")
        saves = shots - g.stat("goalsAgainst")
        total_shots += shots
        total_saves += saves
        if shots > 0 and saves / shots > QUALITY_START_SV_PCT:
            quality_starts += 1
        if shots >= HIGH_VOLUME_SHOTS:
            high_volume += 1

    n = len(games)
    return {
        "save_pct": total_saves / total_shots if total_shots > 0 else 0.0,
        "quality_start_pct": quality_starts / n * 100.0 if n else 0.0,
        "high_volume_pct": high_volume / n * 100.0 if n else 0.0,
    }


def score_player(
    player_id: str,
    game_log: RecentFirstLog,
    category: str | StatCategory,
    team_stats: Optional[Sequence[TeamAggregateStat]] = None,
    next_opponent: Optional[str] = None,
) -> ScoreResult:
    cat = get_category(category)
    agg = aggregate(game_log, cat.stat_of)
    w = cat.weights

    season_avg = agg.season.average
    last10_avg = agg.last10.average
    last5_avg = agg.last5.average
    last3_avg = agg.last3.average

    trend = _ratio_score(last5_avg, season_avg)
    momentum = _ratio_score(last3_avg, last10_avg)
    consistency = consistency_for(game_log, cat)

    composite = (
        w.last10 * last10_avg
        + w.last5 * last5_avg
        + w.season * season_avg
        + w.trend * trend
        + w.consistency * consistency
        + w.momentum * momentum
    )

    goalie: dict[str, float] = {}
    if cat.is_goalie:
        goalie = _goalie_profile(game_log)
        goalie["quality_score"] = goalie["save_pct"] * 100.0
        goalie["workload_score"] = season_avg / GOALIE_WORKLOAD_ANCHOR * 100.0
        composite += w.quality * goalie["quality_score"] + w.workload * goalie["workload_score"]

    return ScoreResult(
        player_id=str(player_id),
        category=cat.key,
        games_played=agg.games,
        season_avg=season_avg,
        last10_avg=last10_avg,
        last5_avg=last5_avg,
        last3_avg=last3_avg,
        composite_score=composite,
        trend_score=trend,
        consistency_score=consistency,
        momentum_score=momentum,
        matchup=matchup_for(cat, next_opponent, team_stats),
        **goalie,
    )


def rank_players(
    logs: Mapping[str, RecentFirstLog],
    category: str | StatCategory,
    min_games: Optional[int] = None,
    sort_by: str = "last10",
    team_stats: Optional[Sequence[TeamAggregateStat]] = None,
    next_opponents: Optional[Mapping[str, str]] = None,
) -> list[ScoreResult]:
    """Score every player with enough games and sort descending by ``sort_by``."""
    cat = get_category(category)
    if min_games is None:
        min_games = cat.min_games
    if min_games < 0:
        raise ValueError(f"min_games must be >= 0, got {min_games}")
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unsupported sort_by={sort_by!r}. Use one of: {list(SORT_KEYS)}")

    results: list[ScoreResult] = []
    skipped = 0
    for player_id, player_log in logs.items():
        if player_log is None or len(player_log) == 0 or len(player_log) < min_games:
            skipped += 1
            continue
        opp = (next_opponents or {}).get(player_id)
        results.append(score_player(player_id, player_log, cat, team_stats, opp))

    log.debug(
        "Ranked %d players for %s (skipped %d under min_games=%d)",
        len(results), cat.key, skipped, min_games,
    )

    attr = SORT_KEYS[sort_by]
    return sorted(results, key=lambda r: getattr(r, attr), reverse=True)


def rankings_frame(results: Sequence[ScoreResult]) -> pd.DataFrame:
    """Flatten results into a DataFrame (matchup fields prefixed ``matchup_``)."""
    rows = []
    for r in results:
        row = asdict(r)
        m = row.pop("matchup")
        row["matchup_score"] = m["score"] if m else None
        row["matchup_rank"] = m["rank"] if m else None
        row["matchup_opponent"] = m["opponent"] if m else None
        rows.append(row)
    return pd.DataFrame(rows)
