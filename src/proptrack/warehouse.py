# src/proptrack/warehouse.py
"""
Postgres loaders for the command-line scans.

Tables read
-----------
  raw.player_gamelogs   one row per player-game (snake_case stat columns)
  raw.team_summary      one row per team-season (per-game shot/goal rates)
  raw.games             schedule, used to find each team's next opponent
  odds.player_prop_lines  normalized prop quotes (one row per book/line)

Every loader returns engine records via proptrack.frames.  Optional context
(schedule, odds) degrades to empty on failure; game logs do not.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import pandas as pd
from sqlalchemy import text

from .frames import gamelogs_from_frame, lines_from_frame, team_stats_from_frame
from .records import CandidateLine, RecentFirstLog, TeamAggregateStat
from .scoring.categories import StatCategory

log = logging.getLogger("proptrack.warehouse")

# NOTE: column selection is mapped, never interpolated from user input.
STAT_SELECT: dict[str, list[str]] = {
    "points":          ['p.points AS "points"'],
    "goals":           ['p.goals AS "goals"'],
    "assists":         ['p.assists AS "assists"'],
    "shots":           ['p.shots AS "shots"'],
    "saves":           ['p.shots_against AS "shotsAgainst"', 'p.goals_against AS "goalsAgainst"'],
    "passing_yards":   ['p.passing_yards AS "passingYards"'],
    "passing_tds":     ['p.passing_tds AS "passingTouchdowns"'],
    "rushing_yards":   ['p.rushing_yards AS "rushingYards"'],
    "receiving_yards": ['p.receiving_yards AS "receivingYards"'],
    "receptions":      ['p.receptions AS "receptions"'],
    "anytime_td": [
        'p.passing_tds AS "passingTouchdowns"',
        'p.rushing_tds AS "rushingTouchdowns"',
        'p.receiving_tds AS "receivingTouchdowns"',
    ],
}


def build_gamelog_sql(cat: StatCategory) -> str:
    if cat.key not in STAT_SELECT:
        raise ValueError(f"Unsupported stat={cat.key!r}. Use one of: {list(STAT_SELECT)}")
    cols = ",\n  ".join(STAT_SELECT[cat.key])
    # goalie logs only count games the goalie started
    started_clause = "AND COALESCE(p.games_started, 1) > 0" if cat.is_goalie else ""

    return f"""
SELECT
  p.player_id,
  p.game_id,
  p.game_date,
  UPPER(p.team_abbr)     AS team_abbr,
  UPPER(p.opponent_abbr) AS opponent_abbr,
  p.decision,
  p.home_road,
  COALESCE(p.is_bye_week, FALSE) AS is_bye_week,
  {cols}
FROM raw.player_gamelogs p
WHERE p.season = :season
  AND p.family = :family
  {started_clause}
ORDER BY p.player_id, p.game_date DESC
"""


SQL_PLAYER_NAMES = """
SELECT DISTINCT ON (player_id) player_id::text AS player_id, player_name, UPPER(team_abbr) AS team_abbr
FROM raw.player_gamelogs
WHERE season = :season
ORDER BY player_id, game_date DESC
"""

SQL_TEAM_SUMMARY = """
SELECT
  UPPER(team_abbr)          AS abbrev,
  team_full_name            AS full_name,
  games_played,
  shots_for_per_game,
  shots_against_per_game,
  goals_for_per_game,
  goals_against_per_game
FROM raw.team_summary
WHERE season = :season
"""

SQL_NEXT_OPPONENTS = """
SELECT DISTINCT ON (team_abbr) team_abbr, opponent_abbr
FROM (
  SELECT UPPER(home_team_abbr) AS team_abbr, UPPER(away_team_abbr) AS opponent_abbr, game_date
  FROM raw.games WHERE game_date >= :as_of
  UNION ALL
  SELECT UPPER(away_team_abbr), UPPER(home_team_abbr), game_date
  FROM raw.games WHERE game_date >= :as_of
) s
ORDER BY team_abbr, game_date
"""

SQL_PROP_LINES = """
SELECT
  player_id::text AS player,
  stat,
  line,
  bookmaker,
  over_price  AS over_odds,
  under_price AS under_odds,
  game,
  commence_time_utc AS game_time,
  is_alternate
FROM odds.player_prop_lines
WHERE as_of_date = :as_of
"""


def load_gamelogs(conn, cat: StatCategory, season: str) -> dict[str, RecentFirstLog]:
    df = pd.read_sql(text(build_gamelog_sql(cat)), conn, params={"season": season, "family": cat.family})
    log.info("Loaded %d game rows for stat=%s season=%s", len(df), cat.key, season)
    logs = gamelogs_from_frame(df, stat_cols=[c.split(" AS ")[1].strip('"') for c in STAT_SELECT[cat.key]])
    if cat.family == "nfl":
        logs = {pid: lg.filter(lambda g: not g.is_bye_week) for pid, lg in logs.items()}
    return logs


def load_player_names(conn, season: str) -> pd.DataFrame:
    return pd.read_sql(text(SQL_PLAYER_NAMES), conn, params={"season": season})


def load_team_stats(conn, season: str) -> list[TeamAggregateStat]:
    try:
        df = pd.read_sql(text(SQL_TEAM_SUMMARY), conn, params={"season": season})
    except Exception as e:
        log.warning("Could not load team summary (%s); matchup scores skipped.", e)
        return []
    return team_stats_from_frame(df)


def load_next_opponents(conn, as_of: date) -> dict[str, str]:
    """Returns {team_abbr: next opponent abbr}, or {} on failure."""
    try:
        df = pd.read_sql(text(SQL_NEXT_OPPONENTS), conn, params={"as_of": as_of})
    except Exception as e:
        log.warning("Could not load schedule (%s); matchup scores skipped.", e)
        return {}
    return dict(zip(df["team_abbr"], df["opponent_abbr"]))


def load_prop_lines(conn, as_of: date) -> dict[str, dict[str, list[CandidateLine]]]:
    try:
        df = pd.read_sql(text(SQL_PROP_LINES), conn, params={"as_of": as_of})
    except Exception as e:
        log.warning("Could not load prop lines (%s); falling back to the configured line.", e)
        return {}
    return lines_from_frame(df)


def player_next_opponents(
    names: pd.DataFrame,
    team_next: dict[str, str],
) -> dict[str, str]:
    """Map player_id -> next opponent through the player's latest team."""
    if names.empty or not team_next:
        return {}
    out: dict[str, str] = {}
    for pid, team in zip(names["player_id"].astype(str), names["team_abbr"]):
        opp: Optional[str] = team_next.get(str(team).upper())
        if opp:
            out[pid] = opp
    return out
