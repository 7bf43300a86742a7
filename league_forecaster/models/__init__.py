"""League data records."""

from .league import Division, LeagueSnapshot, SquadOverride, roster_key
from .match import (
    FrameOutcome,
    Fixture,
    InvalidRecordError,
    MatchFrames,
    MatchResult,
    WhatIfResult,
    parse_match_date,
)
from .player import PlayerSeason, PlayerTeamStats, PriorPlayerStats
from .standings import StandingEntry, calc_standings

__all__ = [
    "Division",
    "Fixture",
    "FrameOutcome",
    "InvalidRecordError",
    "LeagueSnapshot",
    "MatchFrames",
    "MatchResult",
    "PlayerSeason",
    "PlayerTeamStats",
    "PriorPlayerStats",
    "SquadOverride",
    "StandingEntry",
    "WhatIfResult",
    "calc_standings",
    "parse_match_date",
    "roster_key",
]
