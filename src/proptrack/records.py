# src/proptrack/records.py
"""Plain data records shared by the scoring engine and its adapters.

Everything here is immutable.  The engine builds these fresh on every call and
never writes back into them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional


def _as_num(x: Any) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    try:
        v = float(x)
    except (TypeError, ValueError):
        return None
    if math.isnan(v) or math.isinf(v):
        return None
    return v


def _as_int(x: Any) -> Optional[int]:
    v = _as_num(x)
    return None if v is None else int(v)


def _as_date(x: Any) -> Optional[date]:
    if x is None:
        return None
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    s = str(x).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


@dataclass(frozen=True)
class GameStatRecord:
    """One completed game for one player."""

    game_id: Optional[str] = None
    game_date: Optional[date] = None
    opponent: Optional[str] = None
    stats: Mapping[str, Any] = field(default_factory=dict)
    decision: Optional[str] = None   # goalies: W / L / O
    home_road: Optional[str] = None
    team: Optional[str] = None
    is_bye_week: bool = False

    def stat(self, name: str) -> float:
        """Numeric value of ``name``; missing or junk values read as 0."""
        v = _as_num(self.stats.get(name))
        return 0.0 if v is None else v


class RecentFirstLog:
    """Newest-first game log.

    Index 0 is always the latest game.  ``window(n)`` takes the first
    ``min(n, len)`` games and never pads.
    """

    __slots__ = ("_games",)

    def __init__(self, games: Iterable[GameStatRecord] = ()):
        self._games: tuple[GameStatRecord, ...] = tuple(games)

    @classmethod
    def from_unordered(cls, games: Iterable[GameStatRecord]) -> "RecentFirstLog":
        # undated games sort after dated ones; ties keep input order
        ordered = sorted(
            games,
            key=lambda g: (g.game_date is not None, g.game_date or date.min),
            reverse=True,
        )
        return cls(ordered)

    def window(self, n: int) -> tuple[GameStatRecord, ...]:
        if n < 0:
            raise ValueError(f"window size must be >= 0, got {n}")
        return self._games[:n]

    def season(self) -> tuple[GameStatRecord, ...]:
        return self._games

    def filter(self, pred: Callable[[GameStatRecord], bool]) -> "RecentFirstLog":
        return RecentFirstLog(g for g in self._games if pred(g))

    def against(self, opponent: str) -> "RecentFirstLog":
        target = opponent.strip().upper()
        return self.filter(lambda g: (g.opponent or "").strip().upper() == target)

    def values(self, stat_of: Callable[[GameStatRecord], float], n: Optional[int] = None) -> list[float]:
        games = self._games if n is None else self.window(n)
        return [float(stat_of(g)) for g in games]

    def __len__(self) -> int:
        return len(self._games)

    def __iter__(self) -> Iterator[GameStatRecord]:
        return iter(self._games)

    def __getitem__(self, idx):
        return self._games[idx]

    def __bool__(self) -> bool:
        return bool(self._games)

    def __repr__(self) -> str:
        return f"RecentFirstLog(games={len(self._games)})"


@dataclass(frozen=True)
class TeamAggregateStat:
    """Season rates for one team.  Rank 1 means "most" in that dimension."""

    abbrev: str
    full_name: str = ""
    games_played: int = 0
    shots_for_per_game: float = 0.0
    shots_against_per_game: float = 0.0
    goals_for_per_game: float = 0.0
    goals_against_per_game: float = 0.0
    offensive_rank: Optional[int] = None      # shots for
    defensive_rank: Optional[int] = None      # shots against
    goals_against_rank: Optional[int] = None


@dataclass(frozen=True)
class CandidateLine:
    """One sportsbook quote for a player prop."""

    line: float
    bookmaker: str = ""
    over_odds: Optional[int] = None
    under_odds: Optional[int] = None
    game: Optional[str] = None
    game_time: Optional[str] = None
    is_alternate: bool = False
