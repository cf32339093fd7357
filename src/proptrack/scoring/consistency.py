# src/proptrack/scoring/consistency.py
"""
Consistency score: 0-100 inverse-dispersion signal over recent games.

  cv    = std / |mean + 0.1|        population std, last <= 10 games
  score = clamp(0, 100, 100 - cv * K)

A stability signal, not a skill signal.  Fewer than 3 games returns the
neutral prior of 50.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..records import RecentFirstLog
from .categories import StatCategory, get_category

CONSISTENCY_SAMPLE = 10
CONSISTENCY_MIN_GAMES = 3
NEUTRAL_SCORE = 50.0
_MEAN_EPS = 0.1


def consistency_score(values: Sequence[float], steepness: float) -> float:
    sample = np.asarray(list(values)[:CONSISTENCY_SAMPLE], dtype=float)
    if sample.size < CONSISTENCY_MIN_GAMES:
        return NEUTRAL_SCORE

    mean = float(sample.mean())
    std = float(sample.std(ddof=0))
    # negative means (rushing yards) divide by the magnitude so cv stays >= 0
    denom = abs(mean + _MEAN_EPS)
    if denom == 0:
        return 100.0 if std == 0 else 0.0
    cv = std / denom
    return float(np.clip(100.0 - cv * steepness, 0.0, 100.0))


def consistency_for(log: RecentFirstLog, category: str | StatCategory) -> float:
    cat = get_category(category)
    return consistency_score(log.values(cat.stat_of, CONSISTENCY_SAMPLE), cat.consistency_steepness)
