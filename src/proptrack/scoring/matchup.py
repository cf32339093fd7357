# src/proptrack/scoring/matchup.py
"""
Matchup difficulty: map an opponent's league rank to a 0-100 "ease" score.

  score = ((32 - rank) / 32) * 100      rank 1 -> 96.875, rank 32 -> 0

Which rank is used depends on the stat category (see categories.py):
skater props read the opponent's shots-against rank, goalie saves read the
opponent's shots-for rank.  Team lookup is exact (abbreviation or normalized
full name); fuzzy matching belongs to whoever builds the team table.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

import pandas as pd

from ..records import TeamAggregateStat
from .categories import Dimension, StatCategory, get_category

log = logging.getLogger("proptrack.scoring.matchup")

LEAGUE_SIZE = 32

# dimension -> (rank attribute, per-game attribute)
_DIMENSION_FIELDS: dict[str, tuple[str, str]] = {
    "shots_for":     ("offensive_rank", "shots_for_per_game"),
    "shots_against": ("defensive_rank", "shots_against_per_game"),
    "goals_against": ("goals_against_rank", "goals_against_per_game"),
}


@dataclass(frozen=True)
class MatchupResult:
    score: float
    rank: int
    dimension: Dimension
    per_game: float
    opponent: str


def matchup_score(rank: int, inverted: bool = False) -> float:
    if not (1 <= rank <= LEAGUE_SIZE):
        raise ValueError(f"rank must be in [1, {LEAGUE_SIZE}], got {rank}")
    effective = (LEAGUE_SIZE + 1 - rank) if inverted else rank
    return (LEAGUE_SIZE - effective) / LEAGUE_SIZE * 100.0


def normalize_team_name(name: str) -> str:
    s = unicodedata.normalize("NFD", name)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = s.replace("St.", "St")
    return re.sub(r"\s+", " ", s).strip().lower()


def find_team(team_stats: Iterable[TeamAggregateStat], opponent: str) -> Optional[TeamAggregateStat]:
    if not opponent:
        return None
    abbr = opponent.strip().upper()
    norm = normalize_team_name(opponent)
    for t in team_stats:
        if t.abbrev.upper() == abbr:
            return t
        if t.full_name and normalize_team_name(t.full_name) == norm:
            return t
    return None


def matchup_for(
    category: str | StatCategory,
    opponent: Optional[str],
    team_stats: Optional[Sequence[TeamAggregateStat]],
) -> Optional[MatchupResult]:
    """Matchup score for ``category`` against ``opponent``, or None if unknown."""
    cat = get_category(category)
    if cat.matchup is None or not opponent or not team_stats:
        return None

    team = find_team(team_stats, opponent)
    if team is None:
        log.debug("No team stats for opponent=%r", opponent)
        return None

    rank_attr, rate_attr = _DIMENSION_FIELDS[cat.matchup.dimension]
    rank = getattr(team, rank_attr)
    if rank is None or not (1 <= int(rank) <= LEAGUE_SIZE):
        log.debug("Team %s has no usable %s (%r)", team.abbrev, rank_attr, rank)
        return None

    return MatchupResult(
        score=matchup_score(int(rank), inverted=cat.matchup.inverted),
        rank=int(rank),
        dimension=cat.matchup.dimension,
        per_game=float(getattr(team, rate_attr)),
        opponent=team.abbrev,
    )


def rank_teams(teams: Sequence[TeamAggregateStat]) -> list[TeamAggregateStat]:
    """Return copies of ``teams`` with every rank filled in (1 = most; ties keep input order)."""
    if not teams:
        return []

    df = pd.DataFrame(
        {
            "shots_for": [t.shots_for_per_game for t in teams],
            "shots_against": [t.shots_against_per_game for t in teams],
            "goals_against": [t.goals_against_per_game for t in teams],
        }
    )
    ranks = df.rank(method="first", ascending=False).astype(int)

    out: list[TeamAggregateStat] = []
    for i, t in enumerate(teams):
        out.append(
            replace(
                t,
                offensive_rank=int(ranks.at[i, "shots_for"]),
                defensive_rank=int(ranks.at[i, "shots_against"]),
                goals_against_rank=int(ranks.at[i, "goals_against"]),
            )
        )
    return out
