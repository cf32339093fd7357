# src/proptrack/frames.py
"""
DataFrame <-> engine record adapters.

gamelogs_from_frame     one row per player-game  -> {player_id: RecentFirstLog}
team_stats_from_frame   one row per team          -> [TeamAggregateStat] with ranks
lines_from_frame        one row per quote         -> {player: {stat: [CandidateLine]}}
hit_rate_frame          HitRateResult per player  -> DataFrame for printing

Missing numeric cells become 0 at read time via GameStatRecord.stat(); the
adapters never drop a game because a stat column is blank.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Mapping, Optional, Sequence

import pandas as pd

from .records import CandidateLine, GameStatRecord, RecentFirstLog, TeamAggregateStat, _as_date, _as_int, _as_num
from .scoring.hit_rates import HitRateResult
from .scoring.lines import dedupe_lines
from .scoring.matchup import rank_teams

log = logging.getLogger("proptrack.frames")

_META_COLS = {"player_id", "game_id", "game_date", "opponent_abbr", "team_abbr", "decision", "home_road", "is_bye_week"}


def _cell(v):
    return None if v is None or (not isinstance(v, str) and pd.isna(v)) else v


def _text(v) -> Optional[str]:
    # ids come back as floats when the column has NULLs
    v = _cell(v)
    if v is None:
        return None
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return str(v)


def gamelogs_from_frame(
    df: pd.DataFrame,
    stat_cols: Optional[Sequence[str]] = None,
) -> dict[str, RecentFirstLog]:
    """
    Group player-game rows into newest-first logs.

    Expected columns: player_id, game_date, plus stat columns (camelCase, as
    the stat categories read them).  Optional: game_id, opponent_abbr,
    team_abbr, decision, home_road, is_bye_week.
    """
    if df.empty:
        return {}
    for col in ("player_id", "game_date"):
        if col not in df.columns:
            raise ValueError(f"gamelog frame is missing required column {col!r}")

    if stat_cols is None:
        stat_cols = [c for c in df.columns if c not in _META_COLS]

    d = df.copy()
    d["player_id"] = d["player_id"].astype(str)
    d["game_date"] = pd.to_datetime(d["game_date"], errors="coerce")
    d = d.sort_values(["player_id", "game_date"], ascending=[True, False], kind="mergesort", na_position="last")

    logs: dict[str, RecentFirstLog] = {}
    for pid, g in d.groupby("player_id", sort=False):
        records = []
        for row in g.to_dict("records"):
            opp = _cell(row.get("opponent_abbr"))
            team = _cell(row.get("team_abbr"))
            records.append(
                GameStatRecord(
                    game_id=_text(row.get("game_id")),
                    game_date=_as_date(_cell(row.get("game_date"))),
                    opponent=None if opp is None else str(opp).upper(),
                    stats={c: _cell(row.get(c)) for c in stat_cols},
                    decision=_cell(row.get("decision")),
                    home_road=_cell(row.get("home_road")),
                    team=None if team is None else str(team).upper(),
                    is_bye_week=bool(_cell(row.get("is_bye_week")) or False),
                )
            )
        logs[str(pid)] = RecentFirstLog(records)

    log.debug("Built %d game logs from %d rows", len(logs), len(d))
    return logs


def team_stats_from_frame(df: pd.DataFrame) -> list[TeamAggregateStat]:
    """Build team rows and derive every rank from the per-game rates."""
    if df.empty:
        return []
    teams = []
    for row in df.to_dict("records"):
        teams.append(
            TeamAggregateStat(
                abbrev=str(row.get("abbrev") or row.get("team_abbr") or "").upper(),
                full_name=str(_cell(row.get("full_name")) or ""),
                games_played=_as_int(row.get("games_played")) or 0,
                shots_for_per_game=_as_num(row.get("shots_for_per_game")) or 0.0,
                shots_against_per_game=_as_num(row.get("shots_against_per_game")) or 0.0,
                goals_for_per_game=_as_num(row.get("goals_for_per_game")) or 0.0,
                goals_against_per_game=_as_num(row.get("goals_against_per_game")) or 0.0,
            )
        )
    return rank_teams(teams)


def lines_from_frame(df: pd.DataFrame) -> dict[str, dict[str, list[CandidateLine]]]:
    """Group quote rows (player, stat, line, bookmaker, ...) by player then stat."""
    out: dict[str, dict[str, list[CandidateLine]]] = {}
    if df.empty:
        return out

    d = df.copy()
    d["line"] = pd.to_numeric(d["line"], errors="coerce")
    dropped = int(d["line"].isna().sum())
    if dropped:
        log.warning("Dropping %d quotes with no numeric line", dropped)
    d = d[d["line"].notna()]

    for row in d.to_dict("records"):
        ln = CandidateLine(
            line=float(row["line"]),
            bookmaker=str(_cell(row.get("bookmaker")) or ""),
            over_odds=_as_int(row.get("over_odds")),
            under_odds=_as_int(row.get("under_odds")),
            game=_text(row.get("game")),
            game_time=None if _cell(row.get("game_time")) is None else str(row["game_time"]),
            is_alternate=bool(_cell(row.get("is_alternate")) or False),
        )
        out.setdefault(str(row["player"]), {}).setdefault(str(row["stat"]), []).append(ln)

    for by_stat in out.values():
        for stat, lines in by_stat.items():
            by_stat[stat] = dedupe_lines(lines)
    return out


def hit_rate_frame(results: Mapping[str, HitRateResult]) -> pd.DataFrame:
    rows = []
    for pid, r in results.items():
        row = asdict(r)
        row.pop("games")
        row["player_id"] = pid
        rows.append(row)
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows)
    cols = ["player_id"] + [c for c in df.columns if c != "player_id"]
    return df[cols]
