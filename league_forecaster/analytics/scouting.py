"""Opponent scouting: who turns up, how they play and who to worry about."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..data.fixtures import team_results
from ..data.player_stats import team_players
from ..models.league import LeagueSnapshot
from ..models.match import MatchFrames, MatchResult, most_recent_first
from ..predictors.strength import bayesian_pct
from .splits import (
    BreakAndDishStats,
    SetPerformance,
    TeamHomeAwaySplit,
    break_and_dish_stats,
    set_performance,
    team_home_away,
)

CORE_RATE = 0.75
ROTATION_RATE = 0.4


@dataclass(frozen=True)
class PlayerAppearance:
    name: str
    appearances: int
    total_matches: int
    rate: float
    category: str  # "core", "rotation" or "fringe"


@dataclass
class PredictedLineup:
    players: List[PlayerAppearance] = field(default_factory=list)
    recent_players: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PlayerSummary:
    name: str
    pct: float
    adj_pct: float
    played: int


@dataclass
class ScoutingReport:
    team: str
    team_form: List[str]
    home_away: TeamHomeAwaySplit
    set_performance: Optional[SetPerformance]
    break_and_dish: BreakAndDishStats
    predicted_lineup: PredictedLineup
    strongest_players: List[PlayerSummary]
    weakest_players: List[PlayerSummary]
    forfeit_rate: float


def appearance_rates(team: str, frames: Iterable[MatchFrames]) -> List[PlayerAppearance]:
    """
    Share of the team's matches each player appeared in.

    Returns:
        Appearances sorted by rate, highest first
    """
    matches = set()
    seen: Dict[str, set] = {}
    for match in frames:
        if not match.involves(team):
            continue
        matches.add(match.match_id)
        for name in match.players_for(team):
            seen.setdefault(name, set()).add(match.match_id)

    total = len(matches)
    appearances = []
    for name, ids in seen.items():
        rate = len(ids) / total if total else 0.0
        if rate >= CORE_RATE:
            category = "core"
        elif rate >= ROTATION_RATE:
            category = "rotation"
        else:
            category = "fringe"
        appearances.append(PlayerAppearance(name, len(ids), total, rate, category))

    return sorted(appearances, key=lambda a: a.rate, reverse=True)


def predict_lineup(team: str, frames: Iterable[MatchFrames], recent_n: int = 3) -> PredictedLineup:
    """Appearance rates plus everyone seen in the team's ``recent_n`` latest matches."""
    frames = list(frames)
    recent = most_recent_first(m for m in frames if m.involves(team))[:recent_n]
    recent_players = []
    for match in recent:
        for name in match.players_for(team):
            if name not in recent_players:
                recent_players.append(name)
    return PredictedLineup(players=appearance_rates(team, frames), recent_players=recent_players)


def team_form(team: str, results: Iterable[MatchResult], n: int = 5) -> List[str]:
    """Outcome letters of the team's ``n`` latest results, newest first."""
    return [r.outcome for r in team_results(team, results)[:n]]


def scouting_report(snapshot: LeagueSnapshot, team: str) -> ScoutingReport:
    """
    Full scouting picture of ``team``.

    Strongest and weakest players are ranked on Bayesian-adjusted current
    season win rate, among players with at least one game for the team.
    """
    division = snapshot.division_of(team)
    rated = []
    games = 0
    forfeits = 0
    for player in team_players(snapshot, team):
        current = player.current
        if current is None:
            continue
        games += current.played
        forfeits += current.forfeits
        if current.played > 0:
            rated.append(PlayerSummary(
                name=player.name,
                pct=current.pct,
                adj_pct=bayesian_pct(current.won, current.played),
                played=current.played,
            ))
    rated.sort(key=lambda p: p.adj_pct, reverse=True)

    return ScoutingReport(
        team=team,
        team_form=team_form(team, snapshot.results),
        home_away=team_home_away(team, snapshot.results),
        set_performance=set_performance(team, snapshot.frames),
        break_and_dish=break_and_dish_stats(snapshot.players, team=team, division=division),
        predicted_lineup=predict_lineup(team, snapshot.frames),
        strongest_players=rated[:3],
        weakest_players=list(reversed(rated[-3:])),
        forfeit_rate=forfeits / games if games else 0.0,
    )
