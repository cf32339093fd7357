# src/proptrack/scoring/lines.py
"""
Pick the "main" line out of a pile of sportsbook quotes for one player/stat.

Rules (first match wins)
------------------------
 1  Non-alternate lines only, when any exist
 2  First line from a priority bookmaker (checked in priority order)
 3  Most frequent line value
 4  Frequency tie -> value closest to the median of ALL values in the set;
    equal distance -> first value in canonical order
 5  Return the first line carrying the chosen value

Quotes are put into a canonical order before rule 2, so the same set of lines
gives the same answer whatever order the odds feed delivered them in.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Mapping, Optional, Sequence

from ..records import CandidateLine

log = logging.getLogger("proptrack.scoring.lines")

PRIORITY_BOOKMAKERS: tuple[str, ...] = ("DraftKings", "FanDuel", "BetMGM", "Caesars", "BetRivers")


def _canonical_key(ln: CandidateLine) -> tuple:
    return (
        float(ln.line),
        (ln.bookmaker or "").lower(),
        ln.over_odds if ln.over_odds is not None else 0,
        ln.under_odds if ln.under_odds is not None else 0,
        str(ln.game or ""),
        str(ln.game_time or ""),
    )


def _upper_median(values: Sequence[float]) -> float:
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def select_main_line(
    lines: Sequence[CandidateLine],
    priority: Sequence[str] = PRIORITY_BOOKMAKERS,
) -> CandidateLine:
    if not lines:
        raise ValueError("select_main_line needs at least one candidate line")
    if len(lines) == 1:
        return lines[0]

    # R1
    standard = [ln for ln in lines if not ln.is_alternate]
    pool = sorted(standard or lines, key=_canonical_key)
    if len(pool) == 1:
        return pool[0]

    # R2
    for book in priority:
        needle = book.lower()
        for ln in pool:
            if ln.bookmaker and needle in ln.bookmaker.lower():
                return ln

    # R3
    values = [float(ln.line) for ln in pool]
    freq = Counter(values)
    top = max(freq.values())
    candidates = [v for v in dict.fromkeys(values) if freq[v] == top]

    # R4
    if len(candidates) > 1:
        median = _upper_median(values)
        chosen = min(candidates, key=lambda v: abs(v - median))  # min() keeps the first on ties
    else:
        chosen = candidates[0]

    # R5
    return next(ln for ln in pool if float(ln.line) == chosen)


def dedupe_lines(lines: Iterable[CandidateLine]) -> list[CandidateLine]:
    """Drop repeated (bookmaker, line) quotes, keeping the first one seen."""
    seen: set[tuple[str, float]] = set()
    out: list[CandidateLine] = []
    for ln in lines:
        key = (ln.bookmaker, float(ln.line))
        if key in seen:
            continue
        seen.add(key)
        out.append(ln)
    return out


def lines_for(
    odds: Optional[Mapping[str, Mapping[str, Sequence[CandidateLine]]]],
    player_key: str,
    category_key: str,
) -> list[CandidateLine]:
    """Lines for one player/stat; empty when the odds feed has nothing for them."""
    if not odds:
        return []
    by_stat = odds.get(player_key) or {}
    return list(by_stat.get(category_key) or [])


def main_line_for(
    odds: Optional[Mapping[str, Mapping[str, Sequence[CandidateLine]]]],
    player_key: str,
    category_key: str,
) -> Optional[CandidateLine]:
    lines = lines_for(odds, player_key, category_key)
    if not lines:
        log.debug("No lines for player=%s stat=%s", player_key, category_key)
        return None
    return select_main_line(dedupe_lines(lines))
