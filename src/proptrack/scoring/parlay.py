# src/proptrack/scoring/parlay.py
"""American-odds parlay math."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ParlayQuote:
    legs: int
    decimal_odds: float
    american_odds: int
    stake: float
    payout: float
    profit: float


def _check_odds(odds: float) -> float:
    o = float(odds)
    if o == 0 or math.isnan(o):
        raise ValueError(f"American odds cannot be {odds!r}")
    return o


def american_to_decimal(odds: float) -> float:
    o = _check_odds(odds)
    return o / 100.0 + 1.0 if o > 0 else 100.0 / abs(o) + 1.0


def decimal_to_american(decimal_odds: float) -> int:
    d = float(decimal_odds)
    if d <= 1.0:
        raise ValueError(f"decimal odds must be > 1, got {decimal_odds!r}")
    if d >= 2.0:
        return int(round((d - 1.0) * 100.0))
    return int(round(-100.0 / (d - 1.0)))


def implied_probability(odds: float) -> float:
    o = _check_odds(odds)
    return 100.0 / (o + 100.0) if o > 0 else -o / (-o + 100.0)


def parlay_decimal(legs: Sequence[float]) -> float:
    if not legs:
        raise ValueError("parlay needs at least one leg")
    return math.prod(american_to_decimal(o) for o in legs)


def parlay_odds(legs: Sequence[float]) -> int:
    """Combined American odds.  A one-leg parlay is just that leg."""
    if not legs:
        raise ValueError("parlay needs at least one leg")
    if len(legs) == 1:
        return int(legs[0])
    return decimal_to_american(parlay_decimal(legs))


def payout(odds: float, stake: float = 100.0) -> float:
    o = _check_odds(odds)
    if o > 0:
        return stake + stake * o / 100.0
    return stake + stake * 100.0 / abs(o)


def parlay_quote(legs: Sequence[float], stake: float = 100.0) -> ParlayQuote:
    """Full parlay breakdown.  Payout is priced off the rounded American odds."""
    decimal_odds = parlay_decimal(legs)
    american = parlay_odds(legs)
    total = payout(american, stake)
    return ParlayQuote(
        legs=len(legs),
        decimal_odds=decimal_odds,
        american_odds=american,
        stake=float(stake),
        payout=total,
        profit=total - stake,
    )
