# src/proptrack/scoring/hit_rates.py
"""
Hit rates, trend and confidence for one player against one line.

Per game:  value > line -> hit,  value == line -> push,  else miss.
Pushes count toward the game total but never toward hits.

Trend score (last <= 10 games, needs >= 5 or returns 50)
--------------------------------------------------------
  weight_i = W - i                     i = 0 is the latest game
  margin_i = clamp(-100, 100, (value_i - line) / line * 100)
  trend    = clamp(0, 100, 50 + sum(weight_i * margin_i) / sum(weight_i))

Confidence score
----------------
  sample      = min(100, games / 20 * 100)
  agreement   = 100 - |season_hit_rate - last10_hit_rate|
  raw         = 0.4*sample + 0.3*agreement + 0.2*season_hit_rate + 0.1*trend
  confidence  = clamp(0, 100, raw * (1.1 if trend > 50 else 0.9))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Literal, Optional, Sequence

from ..records import CandidateLine, GameStatRecord, RecentFirstLog, TeamAggregateStat
from .categories import StatCategory, get_category
from .matchup import find_team
from .windows import LAST3, LAST5, LAST10

log = logging.getLogger("proptrack.scoring.hit_rates")

Outcome = Literal["hit", "push", "miss"]
StatOf = Callable[[GameStatRecord], float]

TREND_WINDOW = 10
TREND_MIN_GAMES = 5
NEUTRAL_TREND = 50.0
DISPLAY_GAME_CAP = 15

SKATER_BREAKDOWN = ("goals", "assists", "points", "shots")

# confidence blend
CONFIDENCE_SAMPLE_SATURATION = 20
W_SAMPLE = 0.4
W_AGREEMENT = 0.3
W_HIT_RATE = 0.2
W_TREND = 0.1
TREND_BOOST = 1.1
TREND_DRAG = 0.9


@dataclass(frozen=True)
class GameResult:
    game_date: Optional[date]
    opponent: Optional[str]
    value: float
    result: Outcome


@dataclass(frozen=True)
class HitRateResult:
    line: float
    total_games: int
    hits: int
    pushes: int
    misses: int
    hit_rate: float
    last10_hit_rate: float
    last5_hit_rate: float
    last3_hit_rate: float
    trend_score: float
    confidence_score: float
    avg_value: float
    expected_margin: float
    expected_margin_pct: float
    games: tuple[GameResult, ...] = ()


@dataclass(frozen=True)
class HeadToHeadResult:
    opponent: str
    games: int
    avg_value: float
    hit_rate: Optional[float]
    hits: Optional[int]
    # goalie-only
    avg_shots_against: Optional[float] = None
    avg_goals_against: Optional[float] = None
    save_pct: Optional[float] = None
    record: Optional[str] = None
    # skater-only
    avg_goals: Optional[float] = None
    avg_assists: Optional[float] = None
    avg_points: Optional[float] = None
    avg_shots: Optional[float] = None


@dataclass(frozen=True)
class LadderRow:
    line: float
    bookmaker: str
    over_odds: Optional[int]
    under_odds: Optional[int]
    is_alternate: bool
    hits: int
    total: int
    hit_rate: float


def _stat_fn(stat: str | StatCategory | StatOf) -> StatOf:
    if callable(stat) and not isinstance(stat, StatCategory):
        return stat
    return get_category(stat).stat_of


def classify(value: float, line: float) -> Outcome:
    if value > line:
        return "hit"
    if value == line:
        return "push"
    return "miss"


def _rate(hits: int, games: int) -> float:
    return hits / games * 100.0 if games else 0.0


def _margin_score(value: float, line: float) -> float:
    margin = value - line
    if line == 0:
        return 100.0 if margin > 0 else (-100.0 if margin < 0 else 0.0)
    pct = margin / line * 100.0
    return min(100.0, pct) if margin > 0 else max(-100.0, pct)


def trend_score(values: Sequence[float], line: float) -> float:
    """Recency-weighted over/under signal; ``values`` newest first."""
    if len(values) < TREND_MIN_GAMES:
        return NEUTRAL_TREND

    recent = list(values[:TREND_WINDOW])
    size = len(recent)
    weighted = 0.0
    total_weight = 0
    for i, v in enumerate(recent):
        weight = size - i
        weighted += _margin_score(v, line) * weight
        total_weight += weight

    return max(0.0, min(100.0, NEUTRAL_TREND + weighted / total_weight))


def confidence_score(hit_rate: float, recent_hit_rate: float, total_games: int, trend: float) -> float:
    if total_games <= 0:
        return 0.0
    sample = min(100.0, total_games / CONFIDENCE_SAMPLE_SATURATION * 100.0)
    agreement = 100.0 - abs(hit_rate - recent_hit_rate)
    raw = W_SAMPLE * sample + W_AGREEMENT * agreement + W_HIT_RATE * hit_rate + W_TREND * trend
    factor = TREND_BOOST if trend > NEUTRAL_TREND else TREND_DRAG
    return max(0.0, min(100.0, raw * factor))


def analyze_line(
    game_log: RecentFirstLog,
    line: float,
    stat: str | StatCategory | StatOf,
) -> HitRateResult:
    """Full hit-rate breakdown for ``line`` over every game in ``game_log``."""
    stat_of = _stat_fn(stat)
    line = float(line)
    values = game_log.values(stat_of)
    outcomes = [classify(v, line) for v in values]

    hits = outcomes.count("hit")
    pushes = outcomes.count("push")
    misses = outcomes.count("miss")
    total = len(values)

    def window_rate(n: int) -> float:
        head = outcomes[:n]
        return _rate(head.count("hit"), len(head))

    season_rate = _rate(hits, total)
    last10_rate = window_rate(LAST10)
    trend = trend_score(values, line)

    avg_value = sum(values) / total if total else 0.0
    expected_margin = avg_value - line
    expected_margin_pct = expected_margin / line * 100.0 if line > 0 else 0.0

    games = tuple(
        GameResult(game_date=g.game_date, opponent=g.opponent, value=v, result=o)
        for g, v, o in zip(game_log.window(DISPLAY_GAME_CAP), values, outcomes)
    )

    return HitRateResult(
        line=line,
        total_games=total,
        hits=hits,
        pushes=pushes,
        misses=misses,
        hit_rate=season_rate,
        last10_hit_rate=last10_rate,
        last5_hit_rate=window_rate(LAST5),
        last3_hit_rate=window_rate(LAST3),
        trend_score=trend,
        confidence_score=confidence_score(season_rate, last10_rate, total, trend),
        avg_value=avg_value,
        expected_margin=expected_margin,
        expected_margin_pct=expected_margin_pct,
        games=games,
    )


def head_to_head(
    game_log: RecentFirstLog,
    opponent: str,
    category: str | StatCategory,
    line: Optional[float] = None,
    team_stats: Optional[Sequence[TeamAggregateStat]] = None,
) -> Optional[HeadToHeadResult]:
    """Stats against one opponent; None when the player never faced them.

    ``opponent`` may be an abbreviation or, when ``team_stats`` is given, a
    full team name.
    """
    cat = get_category(category)
    team = find_team(team_stats or (), opponent)
    target = team.abbrev if team is not None else opponent.strip().upper()
    h2h = game_log.against(target)
    if not h2h:
        log.debug("No head-to-head games vs %s", target)
        return None

    values = h2h.values(cat.stat_of)
    n = len(values)
    hits = None if line is None else sum(1 for v in values if v > line)

    extras: dict = {}
    if cat.is_goalie:
        shots = sum(g.stat("shotsAgainst") for g in h2h)
        goals = sum(g.stat("goalsAgainst") for g in h2h)
        decisions = [(g.decision or "").upper() for g in h2h]
        extras = {
            "avg_shots_against": shots / n,
            "avg_goals_against": goals / n,
            "save_pct": (shots - goals) / shots if shots > 0 else 0.0,
            "record": f"{decisions.count('W')}-{decisions.count('L')}-{decisions.count('O')}",
        }
    elif cat.family == "skater":
        extras = {f"avg_{k}": sum(g.stat(k) for g in h2h) / n for k in SKATER_BREAKDOWN}

    return HeadToHeadResult(
        opponent=target,
        games=n,
        avg_value=sum(values) / n,
        hit_rate=None if hits is None else _rate(hits, n),
        hits=hits,
        **extras,
    )


def line_ladder(
    game_log: RecentFirstLog,
    lines: Sequence[CandidateLine],
    stat: str | StatCategory | StatOf,
    window: int = LAST10,
) -> list[LadderRow]:
    """Hit rate of every available line over the last ``window`` games."""
    values = game_log.values(_stat_fn(stat), window)
    rows = []
    for ln in lines:
        hits = sum(1 for v in values if v > ln.line)
        rows.append(
            LadderRow(
                line=float(ln.line),
                bookmaker=ln.bookmaker,
                over_odds=ln.over_odds,
                under_odds=ln.under_odds,
                is_alternate=ln.is_alternate,
                hits=hits,
                total=len(values),
                hit_rate=_rate(hits, len(values)),
            )
        )
    return rows
