# src/proptrack/scoring/windows.py
"""Windowed sums and averages over a newest-first game log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ..records import GameStatRecord, RecentFirstLog

StatOf = Callable[[GameStatRecord], float]

LAST10 = 10
LAST5 = 5
LAST3 = 3


@dataclass(frozen=True)
class WindowStats:
    size: Optional[int]  # None = whole season
    count: int
    total: float
    average: float


@dataclass(frozen=True)
class Aggregate:
    season: WindowStats
    last10: WindowStats
    last5: WindowStats
    last3: WindowStats

    @property
    def games(self) -> int:
        return self.season.count


def window_stats(log: RecentFirstLog, stat_of: StatOf, size: Optional[int] = None) -> WindowStats:
    games = log.season() if size is None else log.window(size)
    total = float(sum(stat_of(g) for g in games))
    count = len(games)
    return WindowStats(size=size, count=count, total=total, average=total / count if count else 0.0)


def aggregate(log: RecentFirstLog, stat_of: StatOf) -> Aggregate:
    return Aggregate(
        season=window_stats(log, stat_of),
        last10=window_stats(log, stat_of, LAST10),
        last5=window_stats(log, stat_of, LAST5),
        last3=window_stats(log, stat_of, LAST3),
    )
