"""Venue, set and break-and-dish splits."""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..models.match import MatchFrames, MatchResult
from ..models.player import PlayerSeason


@dataclass
class VenueRecord:
    played: int = 0
    won: int = 0

    @property
    def pct(self) -> float:
        return (self.won / self.played) * 100 if self.played else 0.0


@dataclass
class HomeAwaySplit:
    home: VenueRecord
    away: VenueRecord


@dataclass
class TeamVenueRecord:
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    frames_for: int = 0
    frames_against: int = 0

    @property
    def win_pct(self) -> float:
        return (self.won / self.played) * 100 if self.played else 0.0


@dataclass
class TeamHomeAwaySplit:
    home: TeamVenueRecord
    away: TeamVenueRecord


@dataclass
class SetPerformance:
    """Frame win rates by set; positive bias means stronger in set 1."""

    set1: VenueRecord
    set2: VenueRecord

    @property
    def bias(self) -> float:
        return self.set1.pct - self.set2.pct


def player_home_away(player: str, frames: Iterable[MatchFrames]) -> HomeAwaySplit:
    home, away = VenueRecord(), VenueRecord()
    for match in frames:
        for frame in match.frames:
            if frame.home_player == player:
                home.played += 1
                home.won += frame.winner == "home"
            elif frame.away_player == player:
                away.played += 1
                away.won += frame.winner == "away"
    return HomeAwaySplit(home=home, away=away)


def team_home_away(team: str, results: Iterable[MatchResult]) -> TeamHomeAwaySplit:
    split = TeamHomeAwaySplit(home=TeamVenueRecord(), away=TeamVenueRecord())
    for result in results:
        if result.home == team:
            record = split.home
        elif result.away == team:
            record = split.away
        else:
            continue
        own, other = result.score_for(team), result.score_against(team)
        record.played += 1
        record.frames_for += own
        record.frames_against += other
        if own > other:
            record.won += 1
        elif own == other:
            record.drawn += 1
        else:
            record.lost += 1
    return split


def set_performance(team: str, frames: Iterable[MatchFrames]) -> Optional[SetPerformance]:
    """
    Frame win rates in each set of ``team``'s matches.

    Returns:
        SetPerformance, or None when the team has no frame records
    """
    perf = SetPerformance(set1=VenueRecord(), set2=VenueRecord())
    for match in frames:
        if not match.involves(team):
            continue
        side = "home" if match.home == team else "away"
        for frame in match.frames:
            record = perf.set1 if frame.set_number == 1 else perf.set2
            record.played += 1
            record.won += frame.winner == side

    if perf.set1.played == 0 and perf.set2.played == 0:
        return None
    return perf


@dataclass
class BreakAndDishStats:
    """Break-and-dish totals and rates for a player or a team."""

    games: int = 0
    bd_for: int = 0
    bd_against: int = 0
    forfeits: int = 0

    @property
    def for_per_game(self) -> float:
        return self.bd_for / self.games if self.games else 0.0

    @property
    def against_per_game(self) -> float:
        return self.bd_against / self.games if self.games else 0.0

    @property
    def diff(self) -> int:
        return self.bd_for - self.bd_against

    @property
    def efficiency(self) -> float:
        total = self.bd_for + self.bd_against
        return self.bd_for / total if total else 0.5

    @property
    def forfeit_rate(self) -> float:
        return self.forfeits / self.games if self.games else 0.0


def break_and_dish_stats(
    players: Dict[str, PlayerSeason],
    player: Optional[str] = None,
    team: Optional[str] = None,
    division: Optional[str] = None,
) -> BreakAndDishStats:
    """
    Aggregate break-and-dish counts for one player or every player of a team.

    Args:
        players: Current season statistics
        player: Player to aggregate; takes precedence over ``team``
        team: Team whose contexts are aggregated
        division: Restrict to contexts in this division
    """
    stats = BreakAndDishStats()
    if player is not None:
        season = players.get(player)
        contexts = season.teams if season else []
    elif team is not None:
        contexts = [t for s in players.values() for t in s.teams if t.team == team]
    else:
        contexts = []

    for ctx in contexts:
        if division is not None and ctx.division != division:
            continue
        stats.games += ctx.played
        stats.bd_for += ctx.bd_for
        stats.bd_against += ctx.bd_against
        stats.forfeits += ctx.forfeits
    return stats


def compare_break_and_dish(first: BreakAndDishStats, second: BreakAndDishStats) -> Dict[str, float]:
    """Differences between two aggregates; positive values favour ``first``."""
    return {
        "bd_advantage": first.for_per_game - second.for_per_game,
        "efficiency_diff": first.efficiency - second.efficiency,
        "net_diff": first.diff - second.diff,
    }
