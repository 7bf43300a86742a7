"""
Team strength estimation.

A team's strength is its frame differential per match mapped onto the
logistic scale the matchup model consumes. Early in a season the sample is
too small to trust, so the estimate is blended with a prior built from the
previous period's player win rates.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from ..models.league import LeagueSnapshot
from ..models.standings import calc_standings

logger = logging.getLogger(__name__)


@dataclass
class StrengthConfig:
    """Configuration for strength estimation."""

    # Matches after which the prior no longer contributes
    prior_blend_matches: int = 10
    bayesian_k: int = 6
    bayesian_prior: float = 0.5
    # Below-average default for players without a prior record
    unknown_player_prior: float = 0.45
    strength_scale: float = 4.0
    frames_per_match: int = 10

    def __post_init__(self):
        if self.prior_blend_matches < 1:
            raise ValueError("prior_blend_matches must be >= 1")
        if self.bayesian_k < 0:
            raise ValueError("bayesian_k must be >= 0")
        if self.frames_per_match < 1:
            raise ValueError("frames_per_match must be >= 1")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "StrengthConfig":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def bayesian_pct(wins: float, games: float, k: float = 6, prior: float = 0.5) -> float:
    """
    Win percentage shrunk toward ``prior``.

    A 2-0 record reads as 62.5%, not 100%.

    Args:
        wins: Games won
        games: Games played
        k: Pseudo-games of prior weight
        prior: Prior win rate (0-1)

    Returns:
        Adjusted percentage in 0-100
    """
    if games == 0:
        return prior * 100
    return ((wins + k * prior) / (games + k)) * 100


def win_pct_to_strength(win_pct: float, scale: float = 4.0) -> float:
    """Map a 0-1 win rate onto the strength scale (0.5 -> 0)."""
    return (win_pct - 0.5) * scale


class StrengthEstimator:
    """Converts division results into per-team strength scalars."""

    def __init__(self, config: Optional[StrengthConfig] = None):
        self.config = config or StrengthConfig()

    def prior_team_strength(self, snapshot: LeagueSnapshot, team: str, division: str) -> float:
        """
        Strength implied by the prior-period records of a team's players.

        Players come from the team's roster plus anyone with a current-season
        context for the team. Each known player is weighted by prior games
        played; unknown players count as ``unknown_player_prior`` over
        ``bayesian_k`` pseudo-games.

        Args:
            snapshot: League data
            team: Team name
            division: Division code used for the roster lookup

        Returns:
            Strength scalar, 0 when the team has no associated players
        """
        cfg = self.config
        players = list(snapshot.roster_for(division, team))
        seen = set(players)
        for name, season in snapshot.players.items():
            if name not in seen and any(t.team == team for t in season.teams):
                players.append(name)
                seen.add(name)

        total_weight = 0.0
        weighted_pct = 0.0
        for name in players:
            prior = snapshot.prior_players.get(name)
            if prior is not None and prior.played > 0:
                total_weight += prior.played
                weighted_pct += prior.win_pct * prior.played
            else:
                total_weight += cfg.bayesian_k
                weighted_pct += cfg.unknown_player_prior * cfg.bayesian_k

        if total_weight == 0:
            return 0.0
        return win_pct_to_strength(weighted_pct / total_weight, cfg.strength_scale)

    def team_strengths(self, snapshot: LeagueSnapshot, division: str) -> Dict[str, float]:
        """
        Strength for every team in a division.

        Args:
            snapshot: League data
            division: Division code

        Returns:
            team -> strength; empty for an unknown or empty division
        """
        cfg = self.config
        strengths: Dict[str, float] = {}
        for entry in calc_standings(snapshot, division):
            if entry.played > 0:
                current = (entry.diff / entry.played / cfg.frames_per_match) * 2
            else:
                current = 0.0
            weight = min(1.0, entry.played / cfg.prior_blend_matches)
            if weight < 1:
                prior = self.prior_team_strength(snapshot, entry.team, division)
                strengths[entry.team] = (1 - weight) * prior + weight * current
            else:
                strengths[entry.team] = current

        logger.debug("Estimated %d team strengths for %s", len(strengths), division)
        return strengths
