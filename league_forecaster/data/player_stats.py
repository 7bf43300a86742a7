"""
Player lookups and squad strength.

Squad strength is the games-weighted Bayesian win rate of a team's players.
It backs hypothetical roster changes: the difference between a modified and
an original squad, scaled onto the strength scale, is added to the team's
strength before simulating.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.league import LeagueSnapshot, SquadOverride, roster_key
from ..models.player import PlayerTeamStats
from ..predictors.strength import bayesian_pct

logger = logging.getLogger(__name__)

SQUAD_STRENGTH_SCALING = 4.0

# Current-season games needed before the prior period is ignored
MIN_CURRENT_GAMES = 3


@dataclass(frozen=True)
class TeamPlayer:
    """A player associated with a team through its roster or current season."""

    name: str
    rating: Optional[float] = None
    prior_win_pct: Optional[float] = None
    prior_played: Optional[int] = None
    current: Optional[PlayerTeamStats] = None
    rostered: bool = False


@dataclass(frozen=True)
class EffectivePct:
    """Best available win rate for a player, all values 0-1."""

    pct: float
    adj_pct: float
    weight: int
    wins: int


def effective_pct(player: TeamPlayer) -> Optional[EffectivePct]:
    """
    Current-season rate when the player has enough games, else the prior.

    Returns:
        EffectivePct, or None when neither period has usable data
    """
    current = player.current
    if current is not None and current.played >= MIN_CURRENT_GAMES:
        return EffectivePct(
            pct=current.pct / 100,
            adj_pct=bayesian_pct(current.won, current.played) / 100,
            weight=current.played,
            wins=current.won,
        )
    if player.prior_win_pct is not None and player.prior_played:
        wins = int(round(player.prior_win_pct * player.prior_played))
        return EffectivePct(
            pct=player.prior_win_pct,
            adj_pct=bayesian_pct(wins, player.prior_played) / 100,
            weight=player.prior_played,
            wins=wins,
        )
    return None


def _build_player(snapshot: LeagueSnapshot, name: str, current, rostered: bool) -> TeamPlayer:
    prior = snapshot.prior_players.get(name)
    return TeamPlayer(
        name=name,
        rating=prior.rating if prior else None,
        prior_win_pct=prior.win_pct if prior else None,
        prior_played=prior.played if prior else None,
        current=current,
        rostered=rostered,
    )


def _sort_key(player: TeamPlayer):
    eff = effective_pct(player)
    return (eff is None, -(eff.adj_pct if eff else 0.0))


def team_players(snapshot: LeagueSnapshot, team: str) -> List[TeamPlayer]:
    """
    Roster players plus anyone with a current-season context for ``team``.

    Returns:
        Players sorted by effective adjusted pct, players without data last.
        Empty when the team has no division or no roster.
    """
    division = snapshot.division_of(team)
    if division is None:
        return []
    key = roster_key(division, team)
    if key not in snapshot.rosters:
        return []
    roster = snapshot.rosters[key]

    current: Dict[str, PlayerTeamStats] = {}
    for name, season in snapshot.players.items():
        entry = season.for_team(team)
        if entry is not None:
            current[name] = entry

    names = list(roster) + [n for n in current if n not in roster]
    players = [_build_player(snapshot, n, current.get(n), n in roster) for n in names]
    return sorted(players, key=_sort_key)


def top_players(players: List[TeamPlayer], n: int) -> List[TeamPlayer]:
    """The ``n`` players with the highest effective adjusted pct."""
    rated = [p for p in players if effective_pct(p) is not None]
    rated.sort(key=lambda p: effective_pct(p).adj_pct, reverse=True)
    return rated[:n]


def _weighted_strength(players: List[TeamPlayer], top_n: Optional[int]) -> Optional[float]:
    pool = top_players(players, top_n) if top_n else players
    total_weight = 0
    weighted = 0.0
    for player in pool:
        eff = effective_pct(player)
        if eff is not None:
            weighted += eff.adj_pct * eff.weight
            total_weight += eff.weight
    return weighted / total_weight if total_weight else None


def squad_strength(snapshot: LeagueSnapshot, team: str, top_n: Optional[int] = None) -> Optional[float]:
    """Games-weighted adjusted win rate (0-1) of the team's players."""
    players = team_players(snapshot, team)
    if not players:
        return None
    return _weighted_strength(players, top_n)


def modified_squad_strength(
    snapshot: LeagueSnapshot,
    team: str,
    overrides: Dict[str, SquadOverride],
    top_n: Optional[int] = None,
) -> Optional[float]:
    """
    Squad strength with players added or removed.

    Added players bring their busiest current-season context and their prior
    record.
    """
    override = overrides.get(team)
    if override is None:
        return squad_strength(snapshot, team, top_n)

    removed = set(override.removed)
    players = [p for p in team_players(snapshot, team) if p.name not in removed]
    for name in override.added:
        season = snapshot.players.get(name)
        busiest = max(season.teams, key=lambda t: t.played) if season and season.teams else None
        players.append(_build_player(snapshot, name, busiest, rostered=False))

    return _weighted_strength(players, top_n)


def strength_adjustments(
    snapshot: LeagueSnapshot,
    division: str,
    overrides: Dict[str, SquadOverride],
    top_n: Optional[int] = None,
) -> Dict[str, float]:
    """
    Strength deltas for overridden teams in a division.

    Returns:
        team -> (modified - original) * SQUAD_STRENGTH_SCALING
    """
    adjustments: Dict[str, float] = {}
    for team in snapshot.division_teams(division):
        if team not in overrides:
            continue
        original = squad_strength(snapshot, team, top_n)
        modified = modified_squad_strength(snapshot, team, overrides, top_n)
        if original is None or modified is None:
            logger.debug("No squad data for %s, override ignored", team)
            continue
        adjustments[team] = (modified - original) * SQUAD_STRENGTH_SCALING
    return adjustments
