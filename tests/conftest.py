from datetime import date, timedelta

import pytest

from proptrack.records import CandidateLine, GameStatRecord, RecentFirstLog, TeamAggregateStat


def make_log(values, stat="points", opponents=None, start=date(2025, 3, 1)):
    """Newest-first log: values[0] is the latest game."""
    games = []
    for i, v in enumerate(values):
        games.append(
            GameStatRecord(
                game_id=f"g{i}",
                game_date=start - timedelta(days=i),
                opponent=(opponents[i] if opponents else "BOS"),
                stats={stat: v},
            )
        )
    return RecentFirstLog(games)


def make_goalie_log(rows, opponents=None, decisions=None, start=date(2025, 3, 1)):
    """rows = [(shots_against, goals_against), ...] newest first."""
    games = []
    for i, (sa, ga) in enumerate(rows):
        games.append(
            GameStatRecord(
                game_id=f"g{i}",
                game_date=start - timedelta(days=i),
                opponent=(opponents[i] if opponents else "TOR"),
                stats={"shotsAgainst": sa, "goalsAgainst": ga},
                decision=(decisions[i] if decisions else "W"),
            )
        )
    return RecentFirstLog(games)


@pytest.fixture
def scenario_a_log():
    # last 5 = [2,3,1,4,2] (sum 12), earlier 7 games sum 12 -> season 24 over 12 games
    return make_log([2, 3, 1, 4, 2, 2, 2, 2, 2, 2, 1, 1])


@pytest.fixture
def league():
    return [
        TeamAggregateStat(abbrev="TOR", full_name="Toronto Maple Leafs", shots_for_per_game=33.0,
                          shots_against_per_game=28.0, offensive_rank=1, defensive_rank=30),
        TeamAggregateStat(abbrev="BOS", full_name="Boston Bruins", shots_for_per_game=30.0,
                          shots_against_per_game=34.0, offensive_rank=12, defensive_rank=1),
        TeamAggregateStat(abbrev="MTL", full_name="Montréal Canadiens", shots_for_per_game=26.0,
                          shots_against_per_game=31.0, offensive_rank=32, defensive_rank=8),
    ]


@pytest.fixture
def scenario_e_lines():
    return [
        CandidateLine(line=2.5, bookmaker="BookA"),
        CandidateLine(line=3.5, bookmaker="DraftKings"),
        CandidateLine(line=2.5, bookmaker="BookC"),
    ]


@pytest.fixture
def log_of():
    return make_log


@pytest.fixture
def goalie_log_of():
    return make_goalie_log
